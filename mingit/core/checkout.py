"""Materialize stored trees into the filesystem."""

import os
import shutil
import stat
from pathlib import Path
from typing import Union

from .errors import FilesystemError, MalformedObject, UnexpectedObjectKind
from .hash import hash_to_hex, to_hash
from .objects import Blob, Commit, Permission, Tree, TreeEntry
from .store import ObjectStore

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def checkout(store: ObjectStore, sha: Union[bytes, str], destination) -> None:
    """
    Write the object named by sha into destination.

    A commit checks out its root tree, a tree is written as a directory
    at destination, and a blob is written as a single file at destination.
    Whatever sits at an entry's path inside the tree (file, link or
    directory) is replaced, and links are never followed. Paths not in
    the tree are left alone. A blob is not written over an existing
    directory at destination.

    Args:
        store: Object store to read from
        sha: Hash of a commit, tree or blob
        destination: Target path

    Raises:
        ObjectNotFound: If a referenced object is missing
        MalformedObject: If an object is corrupt or has an unsafe entry name
        UnexpectedObjectKind: If an object is not of the kind its reference requires
        FilesystemError: If writing to the filesystem fails
    """
    sha = to_hash(sha)
    destination = Path(destination)
    obj = store.read_object(sha)

    if isinstance(obj, Commit):
        checkout_tree(store, _read_kind(store, obj.tree, Tree), destination)
    elif isinstance(obj, Tree):
        checkout_tree(store, obj, destination)
    else:
        _write_file(destination, obj.data, Permission.REGULAR_FILE, replace_dirs=False)


def checkout_tree(store: ObjectStore, tree: Tree, destination: Path) -> None:
    """Recursively write a tree's entries under destination."""
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(destination, e) from e

    for entry in tree.entries:
        target = destination / _safe_name(entry)

        if entry.permission is Permission.DIRECTORY:
            subtree = _read_kind(store, entry.hash, Tree)
            if target.is_symlink() or not target.is_dir():
                _clear_path(target)
            checkout_tree(store, subtree, target)
            continue

        blob = _read_kind(store, entry.hash, Blob)
        if entry.permission is Permission.SYMBOLIC_LINK:
            _write_symlink(target, blob.data)
        else:
            _write_file(target, blob.data, entry.permission)


def _read_kind(store: ObjectStore, sha: bytes, kind):
    obj = store.read_object(sha)
    if not isinstance(obj, kind):
        raise UnexpectedObjectKind(hash_to_hex(sha), kind.__name__.lower(), obj.type)
    return obj


def _safe_name(entry: TreeEntry) -> str:
    name = entry.name
    if name in (b'', b'.', b'..') or b'/' in name or b'\0' in name:
        raise MalformedObject(f"Unsafe tree entry name: {name!r}")
    return os.fsdecode(name)


def _clear_path(path: Path) -> None:
    """Remove whatever is at path without following links."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif os.path.lexists(path):
            path.unlink()
    except OSError as e:
        raise FilesystemError(path, e) from e


def _write_file(path: Path, data: bytes, permission: Permission,
                replace_dirs: bool = True) -> None:
    # Never write through a link left at the path.
    if path.is_symlink() or (replace_dirs and path.is_dir()):
        _clear_path(path)
    try:
        path.write_bytes(data)

        mode = stat.S_IMODE(path.stat().st_mode)
        if permission is Permission.EXECUTABLE:
            path.chmod(mode | EXEC_BITS)
        elif mode & EXEC_BITS:
            path.chmod(mode & ~EXEC_BITS)
    except OSError as e:
        raise FilesystemError(path, e) from e


def _write_symlink(path: Path, target: bytes) -> None:
    _clear_path(path)
    try:
        os.symlink(target, os.fsencode(path))
    except OSError as e:
        raise FilesystemError(path, e) from e
