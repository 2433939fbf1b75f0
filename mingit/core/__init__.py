"""Core functionality for mingit.

This module contains the core data structures:
- Objects (Blob, Tree, Commit) and their canonical encoding
- The content-addressed object store
- Tree building from a directory and checkout back into one
- Repository layout management
- Hashing utilities and the error taxonomy

Command-line handling lives in mingit.cli.
"""

from mingit.core.errors import (
    MingitError,
    InvalidHashEncoding,
    ObjectNotFound,
    MalformedObject,
    UnsupportedObjectType,
    UnsupportedPermission,
    UnexpectedObjectKind,
    AlreadyInitialized,
    FilesystemError,
)
from mingit.core.hash import hash_object, hash_file, hash_to_hex, hex_to_hash
from mingit.core.objects import (
    GitObject,
    Blob,
    Tree,
    TreeEntry,
    Permission,
    Commit,
    CommitAuthor,
    CommitTimestamp,
    encode_object,
    decode_object,
)
from mingit.core.store import ObjectStore
from mingit.core.tree_builder import write_tree
from mingit.core.checkout import checkout
from mingit.core.repository import Repository
from mingit.core.config import Config, get_config

__all__ = [
    'MingitError',
    'InvalidHashEncoding',
    'ObjectNotFound',
    'MalformedObject',
    'UnsupportedObjectType',
    'UnsupportedPermission',
    'UnexpectedObjectKind',
    'AlreadyInitialized',
    'FilesystemError',
    'hash_object',
    'hash_file',
    'hash_to_hex',
    'hex_to_hash',
    'GitObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Permission',
    'Commit',
    'CommitAuthor',
    'CommitTimestamp',
    'encode_object',
    'decode_object',
    'ObjectStore',
    'write_tree',
    'checkout',
    'Repository',
    'Config',
    'get_config',
]
