"""mingit - a content-addressed object store in git's loose object format."""

__version__ = '0.1.0'

from mingit.core.repository import Repository
from mingit.core.objects import GitObject, Blob, Tree, Commit

__all__ = [
    'Repository',
    'GitObject',
    'Blob',
    'Tree',
    'Commit',
]
