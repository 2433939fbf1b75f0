"""Snapshot a directory into tree objects."""

import os
import stat
from pathlib import Path

from .errors import FilesystemError
from .objects import Blob, Permission, Tree
from .store import ObjectStore


def _entry_permission(st_mode: int) -> Permission:
    if stat.S_ISLNK(st_mode):
        return Permission.SYMBOLIC_LINK
    if stat.S_ISDIR(st_mode):
        return Permission.DIRECTORY
    if st_mode & stat.S_IXUSR:
        return Permission.EXECUTABLE
    return Permission.REGULAR_FILE


def write_tree(store: ObjectStore, directory, exclude=(), skip_empty: bool = False) -> bytes:
    """
    Build and store tree objects for a directory, bottom-up.

    Every file is written as a blob and every subdirectory as a tree
    before the tree that lists it. Symbolic links are stored as blobs
    holding the link target and are never followed. FIFOs, sockets and
    device files are skipped.

    Args:
        store: Object store to write blobs and trees into
        directory: Path to directory
        exclude: Entry names skipped at every level (e.g. the repository directory)
        skip_empty: Leave out subdirectories that contain nothing to track

    Returns:
        bytes: Raw hash of the directory's tree

    Raises:
        FilesystemError: If the directory or one of its entries cannot be read
    """
    return store.add_object(
        build_tree(store, Path(directory), frozenset(exclude), skip_empty))


def build_tree(store: ObjectStore, dir_path: Path, exclude, skip_empty: bool) -> Tree:
    """Build the Tree for dir_path, storing every child object on the way."""
    entries = []

    try:
        children = list(dir_path.iterdir())
    except OSError as e:
        raise FilesystemError(dir_path, e) from e

    for item in children:
        if item.name in exclude:
            continue

        try:
            st_mode = item.lstat().st_mode
            permission = _entry_permission(st_mode)

            if permission is Permission.DIRECTORY:
                subtree = build_tree(store, item, exclude, skip_empty)
                if skip_empty and not subtree.entries:
                    continue
                obj_hash = store.add_object(subtree)
            elif permission is Permission.SYMBOLIC_LINK:
                obj_hash = store.add_object(Blob(os.readlink(os.fsencode(item))))
            elif stat.S_ISREG(st_mode):
                obj_hash = store.add_object(Blob.from_file(item))
            else:
                continue
        except OSError as e:
            raise FilesystemError(item, e) from e

        entries.append((permission, os.fsencode(item.name), obj_hash))

    tree = Tree()
    tree.add_entries(entries)
    return tree
