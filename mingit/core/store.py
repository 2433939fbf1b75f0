"""Loose object storage keyed by content hash."""

import os
import tempfile
import zlib
from pathlib import Path
from typing import Iterator, Optional, Union

from .errors import FilesystemError, InvalidHashEncoding, MalformedObject, ObjectNotFound
from .hash import HEX_LENGTH, hash_object, hash_to_hex, hex_to_hash, to_hash
from .objects import (
    Blob,
    Commit,
    CommitAuthor,
    CommitTimestamp,
    GitObject,
    decode_object,
    parse_header,
)

MIN_PREFIX_LENGTH = 4
OBJECT_MODE = 0o444


class ObjectStore:
    """
    Content-addressed store of zlib-compressed objects.

    Objects live in subdirectories named by the first 2 characters of
    their hex hash, with the remaining 38 characters as the filename.
    Example: ab/cdef0123456789... for hash abcdef0123456789...
    Stored files are read-only and never modified once written.
    """

    def __init__(self, objects_dir):
        self.objects_dir = Path(objects_dir)

    def object_path(self, sha: Union[bytes, str]) -> Path:
        """
        Get filesystem path for an object.

        Args:
            sha: Raw 20-byte hash or 40-character hex hash

        Returns:
            Path: Full path to object file
        """
        hexsha = hash_to_hex(to_hash(sha))
        return self.objects_dir / hexsha[:2] / hexsha[2:]

    def contains(self, sha: Union[bytes, str]) -> bool:
        """Check if an object is stored under sha."""
        return self.object_path(sha).is_file()

    __contains__ = contains

    def write_object(self, encoded: bytes) -> bytes:
        """
        Store an encoded object (header + payload).

        A duplicate write is skipped. New objects are written to a
        temporary file and renamed into place so readers never see a
        partially written object.

        Args:
            encoded: Canonical encoded object bytes

        Returns:
            bytes: Raw 20-byte hash of the encoded bytes

        Raises:
            FilesystemError: If the object cannot be written
        """
        sha = hash_object(encoded)
        path = self.object_path(sha)
        if path.exists():
            return sha

        compressed = zlib.compress(encoded)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix='tmp_obj_')
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(compressed)
                os.chmod(tmp_name, OBJECT_MODE)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise FilesystemError(path, e) from e

        return sha

    def add_object(self, obj: GitObject) -> bytes:
        """Encode and store an object, returning its hash."""
        return self.write_object(obj.encode())

    def write_blob(self, data: bytes) -> bytes:
        """Store raw bytes as a blob."""
        return self.add_object(Blob(data))

    def write_commit(
        self,
        tree: Union[bytes, str],
        parents,
        message: str,
        author: CommitAuthor,
        timestamp: CommitTimestamp,
        committer: Optional[CommitAuthor] = None,
        committer_timestamp: Optional[CommitTimestamp] = None,
    ) -> bytes:
        """
        Store a commit built exactly from the given values.

        Args:
            tree: Hash of the root tree
            parents: Parent commit hashes, in order (may be empty)
            message: Commit message
            author: Author identity
            timestamp: Author timestamp
            committer: Committer identity (defaults to author)
            committer_timestamp: Committer timestamp (defaults to timestamp)

        Returns:
            bytes: Raw hash of the commit
        """
        commit = Commit(
            tree=to_hash(tree),
            parents=[to_hash(parent) for parent in parents],
            author=author,
            author_timestamp=timestamp,
            message=message,
            committer=committer,
            committer_timestamp=committer_timestamp,
        )
        return self.add_object(commit)

    def read_encoded(self, sha: Union[bytes, str]) -> bytes:
        """
        Read and decompress an object's encoded bytes.

        Raises:
            ObjectNotFound: If no object is stored under sha
            MalformedObject: If the file is not valid zlib data
            FilesystemError: If the file cannot be read
        """
        path = self.object_path(sha)
        try:
            compressed = path.read_bytes()
        except FileNotFoundError:
            raise ObjectNotFound(hash_to_hex(to_hash(sha))) from None
        except IsADirectoryError:
            raise ObjectNotFound(hash_to_hex(to_hash(sha)), "not a file") from None
        except OSError as e:
            raise FilesystemError(path, e) from e

        try:
            return zlib.decompress(compressed)
        except zlib.error as e:
            raise MalformedObject(f"Object {hash_to_hex(to_hash(sha))} is corrupt: {e}") from e

    def read_raw(self, sha: Union[bytes, str]):
        """
        Read an object's type tag and payload without decoding the payload.

        Returns:
            tuple: (type_name, payload)
        """
        return parse_header(self.read_encoded(sha))

    def read_object(self, sha: Union[bytes, str]) -> GitObject:
        """
        Read object from the store.

        Args:
            sha: Raw 20-byte hash or 40-character hex hash

        Returns:
            GitObject: Decoded object (Blob, Tree, or Commit)

        Raises:
            ObjectNotFound: If no object is stored under sha
            MalformedObject: If the object cannot be decompressed or decoded
        """
        return decode_object(self.read_encoded(sha))

    def __iter__(self) -> Iterator[bytes]:
        """Iterate over the hashes of all stored objects."""
        if not self.objects_dir.is_dir():
            return
        for subdir in sorted(self.objects_dir.iterdir()):
            if not subdir.is_dir() or len(subdir.name) != 2:
                continue
            for obj_file in sorted(subdir.iterdir()):
                hexsha = subdir.name + obj_file.name
                if len(hexsha) != HEX_LENGTH:
                    continue
                try:
                    yield hex_to_hash(hexsha)
                except InvalidHashEncoding:
                    continue

    def expand_prefix(self, prefix: str) -> bytes:
        """
        Resolve an abbreviated hex hash to a full hash.

        Raises:
            ObjectNotFound: If no object, or more than one, matches
        """
        prefix = prefix.lower()
        if len(prefix) == HEX_LENGTH:
            return hex_to_hash(prefix)
        if len(prefix) < MIN_PREFIX_LENGTH:
            raise ObjectNotFound(prefix, f"need at least {MIN_PREFIX_LENGTH} characters")

        subdir = self.objects_dir / prefix[:2]
        matches = []
        if subdir.is_dir():
            for obj_file in subdir.iterdir():
                hexsha = prefix[:2] + obj_file.name
                if hexsha.startswith(prefix) and len(hexsha) == HEX_LENGTH:
                    matches.append(hexsha)

        if not matches:
            raise ObjectNotFound(prefix)
        if len(matches) > 1:
            raise ObjectNotFound(prefix, "ambiguous")
        return hex_to_hash(matches[0])

    def __repr__(self) -> str:
        return f"ObjectStore(path={self.objects_dir})"
