"""Git objects and their canonical encoding.

Every object is stored as ``<type> <size>\\0<payload>`` and identified by
the SHA-1 of that whole byte stream. This module holds the three object
kinds (Blob, Tree, Commit), the payload codecs for each, and the header
dispatch that turns stored bytes back into the right object.
"""

import time
from abc import ABC, abstractmethod
from enum import Enum
from operator import attrgetter
from typing import NamedTuple, Optional

from .errors import (
    InvalidHashEncoding,
    MalformedObject,
    UnsupportedObjectType,
    UnsupportedPermission,
)
from .hash import HASH_LENGTH, hash_object, hash_to_hex, hex_to_hash

# Text fields are stored as UTF-8; undecodable bytes survive a round trip.
TEXT_ENCODING = 'utf-8'
TEXT_ERRORS = 'surrogateescape'

MAX_TIMESTAMP = 2 ** 64
MAX_TIMEZONE_OFFSET = 100 * 60


def _encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)


def _decode_text(data: bytes) -> str:
    return data.decode(TEXT_ENCODING, TEXT_ERRORS)


class GitObject(ABC):
    """Base class for all stored objects."""

    type_name: bytes = b''

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize the object payload (without header).

        Returns:
            bytes: Payload bytes
        """

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Load the object from its payload.

        Args:
            data: Payload bytes (without header)

        Raises:
            MalformedObject: If the payload cannot be parsed
        """

    @classmethod
    def from_payload(cls, data: bytes) -> 'GitObject':
        """Create an object of this kind from its payload."""
        obj = cls()
        obj.deserialize(data)
        return obj

    @property
    def type(self) -> str:
        """Object type name (blob, tree, commit)."""
        return self.type_name.decode('ascii')

    def encode(self) -> bytes:
        """
        Encode the object with its header.

        Format: <type> <size>\\0<payload>

        Returns:
            bytes: Canonical encoded bytes, the input to hashing and storage
        """
        data = self.serialize()
        header = self.type_name + b' ' + str(len(data)).encode('ascii') + b'\0'
        return header + data

    @property
    def hash(self) -> bytes:
        """Raw 20-byte SHA-1 of the encoded object."""
        return hash_object(self.encode())

    @property
    def hex(self) -> str:
        """40-character hex form of the object hash."""
        return hash_to_hex(self.hash)

    def __eq__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.serialize() == other.serialize()

    __hash__ = None


class Blob(GitObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    type_name = b'blob'

    def __init__(self, data: bytes = b''):
        self.data = data

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data

    @classmethod
    def from_file(cls, filepath) -> 'Blob':
        """
        Create blob from a regular file's contents.

        Args:
            filepath: Path to file

        Returns:
            Blob: New blob containing file content
        """
        with open(filepath, 'rb') as f:
            return cls(f.read())

    def __repr__(self) -> str:
        return f"Blob(hash={self.hex[:7]}, size={len(self.data)})"


class Permission(Enum):
    """Tree entry modes, valued by their canonical mode string."""

    DIRECTORY = b'40000'
    REGULAR_FILE = b'100644'
    EXECUTABLE = b'100755'
    SYMBOLIC_LINK = b'120000'

    @property
    def mode(self) -> bytes:
        return self.value

    @classmethod
    def from_mode(cls, mode: bytes) -> 'Permission':
        """
        Parse a mode string, tolerating zero padding (040000).

        Raises:
            UnsupportedPermission: If the mode is not one of the four known modes
        """
        try:
            return cls(mode.lstrip(b'0'))
        except ValueError:
            raise UnsupportedPermission(mode) from None


class TreeEntry:
    """
    A single entry in a tree.

    Each entry contains:
    - permission: Permission of the entry (directory, file, executable, symlink)
    - name: Entry name as raw bytes
    - hash: Raw 20-byte hash of the referenced blob or tree
    """

    def __init__(self, permission: Permission, name: bytes, sha: bytes):
        self.permission = permission
        self.name = name
        self.hash = sha

    @property
    def type(self) -> str:
        """Kind of object the entry points at ('tree' or 'blob')."""
        return 'tree' if self.permission is Permission.DIRECTORY else 'blob'

    @property
    def sort_key(self) -> bytes:
        # Directories compare as if their name ended in '/', as git does.
        if self.permission is Permission.DIRECTORY:
            return self.name + b'/'
        return self.name

    def __lt__(self, other: 'TreeEntry') -> bool:
        return self.sort_key < other.sort_key

    def __eq__(self, other) -> bool:
        if not isinstance(other, TreeEntry):
            return NotImplemented
        return (self.permission, self.name, self.hash) == (
            other.permission, other.name, other.hash)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"TreeEntry({self.permission.mode.decode()} {self.type} "
                f"{self.hash.hex()[:7]} {self.name!r})")


class Tree(GitObject):
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files and symlink targets)
    and other trees (subdirectories). Entries built through the constructor,
    add_entry() or add_entries() are always kept sorted, since the order is part of the
    encoding. Decoded trees keep the order they were stored in.
    """

    type_name = b'tree'

    def __init__(self, entries=None):
        self.entries: list[TreeEntry] = []
        self._by_name: dict[bytes, TreeEntry] = {}
        if entries:
            self.add_entries((e.permission, e.name, e.hash) for e in entries)

    def add_entry(self, permission: Permission, name: bytes, sha: bytes) -> TreeEntry:
        """
        Add entry to tree, keeping entries sorted.

        Args:
            permission: Entry permission
            name: Entry name (raw bytes, no '/' or NUL)
            sha: Raw 20-byte hash of the object

        Returns:
            TreeEntry: The entry that was added

        Raises:
            ValueError: If the name is invalid, duplicated, or the hash is not 20 bytes
        """
        return self.add_entries([(permission, name, sha)])[0]

    def add_entries(self, entries) -> list:
        """
        Add several (permission, name, sha) entries, sorting once.

        Nothing is added if any entry is rejected.

        Raises:
            ValueError: If a name is invalid or duplicated, or a hash is not 20 bytes
        """
        added = {}
        for permission, name, sha in entries:
            if not name or b'/' in name or b'\0' in name:
                raise ValueError(f"Invalid tree entry name: {name!r}")
            if len(sha) != HASH_LENGTH:
                raise ValueError(f"Invalid hash for {name!r}: {sha!r}")
            if name in self._by_name or name in added:
                raise ValueError(f"Duplicate tree entry name: {name!r}")
            added[name] = TreeEntry(permission, name, sha)

        self._by_name.update(added)
        self.entries.extend(added.values())
        self.entries.sort(key=attrgetter('sort_key'))
        return list(added.values())

    def get(self, name: bytes) -> Optional[TreeEntry]:
        """Look up an entry by name."""
        return self._by_name.get(name)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def serialize(self) -> bytes:
        """
        Serialize tree entries.

        Format per entry: <mode> <name>\\0<20-byte hash>
        """
        return b''.join(
            entry.permission.mode + b' ' + entry.name + b'\0' + entry.hash
            for entry in self.entries
        )

    def deserialize(self, data: bytes) -> None:
        entries = []
        seen = set()
        pos = 0

        while pos < len(data):
            space_pos = data.find(b' ', pos)
            if space_pos == -1:
                raise MalformedObject(f"Tree entry at offset {pos} has no mode separator")
            permission = Permission.from_mode(data[pos:space_pos])

            null_pos = data.find(b'\0', space_pos + 1)
            if null_pos == -1:
                raise MalformedObject(f"Tree entry at offset {pos} has no name terminator")
            name = data[space_pos + 1:null_pos]

            sha = data[null_pos + 1:null_pos + 1 + HASH_LENGTH]
            if len(sha) != HASH_LENGTH:
                raise MalformedObject(f"Tree entry {name!r} has a truncated hash")
            if name in seen:
                raise MalformedObject(f"Duplicate tree entry name: {name!r}")
            seen.add(name)

            entries.append(TreeEntry(permission, name, sha))
            pos = null_pos + 1 + HASH_LENGTH

        self.entries = entries
        self._by_name = {entry.name: entry for entry in entries}

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


class CommitAuthor(NamedTuple):
    """Free-form identity of a commit author or committer."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    @classmethod
    def parse(cls, ident: str) -> 'CommitAuthor':
        """
        Parse a "Name <email>" string.

        Raises:
            ValueError: If the string has no <email> part
        """
        lt = ident.find('<')
        gt = ident.find('>', lt + 1)
        if lt == -1 or gt == -1:
            raise ValueError(f"Expected 'Name <email>', got {ident!r}")
        return cls(ident[:lt].strip(), ident[lt + 1:gt])


class CommitTimestamp(NamedTuple):
    """Epoch seconds plus timezone offset in minutes east of UTC."""

    seconds: int
    timezone_offset: int = 0

    @classmethod
    def now(cls) -> 'CommitTimestamp':
        """Current time in the local timezone."""
        seconds = int(time.time())
        offset = time.localtime(seconds).tm_gmtoff // 60
        return cls(seconds, offset)


def format_timezone(offset: int) -> bytes:
    """
    Render a timezone offset in minutes as +HHMM / -HHMM.

    Examples:
        >>> format_timezone(-300)
        b'-0500'

    Raises:
        ValueError: If the offset does not fit in four digits
    """
    if abs(offset) >= MAX_TIMEZONE_OFFSET:
        raise ValueError(f"Timezone offset out of range: {offset}")
    sign = '-' if offset < 0 else '+'
    offset = abs(offset)
    return f"{sign}{offset // 60:02d}{offset % 60:02d}".encode('ascii')


def parse_timezone(text: bytes) -> int:
    """
    Parse +HHMM / -HHMM into minutes east of UTC.

    Raises:
        ValueError: If text is not a sign followed by four digits
    """
    if len(text) != 5 or text[:1] not in (b'+', b'-') or not text[1:].isdigit():
        raise ValueError(f"Invalid timezone: {text!r}")
    minutes = int(text[1:3]) * 60 + int(text[3:5])
    return -minutes if text[:1] == b'-' else minutes


def _format_ident(person: CommitAuthor, timestamp: CommitTimestamp) -> bytes:
    seconds = int(timestamp.seconds)
    if any(c in person.name for c in '\n<>') or any(c in person.email for c in '\n>'):
        raise ValueError(f"Invalid characters in identity: {person}")
    if not 0 <= seconds < MAX_TIMESTAMP:
        raise ValueError(f"Timestamp out of range: {seconds}")
    return (_encode_text(person.name) + b' <' + _encode_text(person.email) + b'> '
            + str(seconds).encode('ascii') + b' '
            + format_timezone(timestamp.timezone_offset))


def _parse_ident(value: bytes):
    lt = value.find(b'<')
    gt = value.find(b'>', lt + 1)
    if lt == -1 or gt == -1:
        raise MalformedObject(f"Invalid identity line: {value!r}")

    name = value[:lt]
    if name.endswith(b' '):
        name = name[:-1]
    email = value[lt + 1:gt]

    fields = value[gt + 1:].split()
    if len(fields) != 2 or not fields[0].isdigit():
        raise MalformedObject(f"Invalid identity timestamp: {value!r}")
    try:
        offset = parse_timezone(fields[1])
    except ValueError as e:
        raise MalformedObject(str(e)) from None

    person = CommitAuthor(_decode_text(name), _decode_text(email))
    return person, CommitTimestamp(int(fields[0]), offset)


def _parse_hex(value: bytes) -> bytes:
    try:
        return hex_to_hash(value)
    except InvalidHashEncoding:
        raise MalformedObject(f"Invalid hash in commit: {value!r}") from None


class Commit(GitObject):
    """
    Represents a commit with metadata.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history, in order
    - Author and committer identity with timestamps
    - Commit message

    The committer defaults to the author. Unknown headers such as gpgsig
    are kept in extra_headers so the object re-encodes byte for byte. A
    decoded message that lacked its final newline is written back without one.
    """

    type_name = b'commit'

    def __init__(
        self,
        tree: Optional[bytes] = None,
        parents=None,
        author: Optional[CommitAuthor] = None,
        author_timestamp: Optional[CommitTimestamp] = None,
        message: str = '',
        committer: Optional[CommitAuthor] = None,
        committer_timestamp: Optional[CommitTimestamp] = None,
        extra_headers=None,
    ):
        self.tree = tree
        self.parents: list[bytes] = list(parents or [])
        self.author = author or CommitAuthor('', '')
        self.author_timestamp = author_timestamp or CommitTimestamp(0)
        self.committer = committer or self.author
        self.committer_timestamp = committer_timestamp or self.author_timestamp
        self.message = message
        self.extra_headers: list[tuple[bytes, bytes]] = list(extra_headers or [])
        self.message_newline = True

    def serialize(self) -> bytes:
        """
        Serialize commit.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero or more)
        author Name <email> <timestamp> <timezone>
        committer Name <email> <timestamp> <timezone>

        <commit message>

        Raises:
            ValueError: If the commit has no tree, or an identity, timestamp
                or timezone cannot be encoded
        """
        if self.tree is None:
            raise ValueError("Commit has no tree")

        lines = [b'tree ' + hash_to_hex(self.tree).encode('ascii')]
        for parent in self.parents:
            lines.append(b'parent ' + hash_to_hex(parent).encode('ascii'))
        lines.append(b'author ' + _format_ident(self.author, self.author_timestamp))
        lines.append(b'committer ' + _format_ident(self.committer, self.committer_timestamp))
        for key, value in self.extra_headers:
            lines.append(key + b' ' + value.replace(b'\n', b'\n '))

        return (b'\n'.join(lines) + b'\n\n' + _encode_text(self.message)
                + (b'\n' if self.message_newline else b''))

    def deserialize(self, data: bytes) -> None:
        header, sep, body = data.partition(b'\n\n')
        if not sep:
            raise MalformedObject("Commit has no message separator")

        fields: list[list[bytes]] = []
        for line in header.split(b'\n'):
            if line.startswith(b' ') and fields:
                fields[-1][1] += b'\n' + line[1:]
                continue
            key, _, value = line.partition(b' ')
            fields.append([key, value])

        tree = None
        parents = []
        author = committer = None
        extra = []
        for key, value in fields:
            if key == b'tree' and tree is None:
                tree = _parse_hex(value)
            elif key == b'parent':
                parents.append(_parse_hex(value))
            elif key == b'author' and author is None:
                author = _parse_ident(value)
            elif key == b'committer' and committer is None:
                committer = _parse_ident(value)
            else:
                extra.append((key, value))

        if tree is None:
            raise MalformedObject("Commit has no tree")
        if author is None or committer is None:
            raise MalformedObject("Commit has no author or committer")

        self.tree = tree
        self.parents = parents
        self.author, self.author_timestamp = author
        self.committer, self.committer_timestamp = committer
        self.extra_headers = extra
        self.message_newline = body.endswith(b'\n')
        if self.message_newline:
            body = body[:-1]
        self.message = _decode_text(body)

    @classmethod
    def create(
        cls,
        tree_hash: bytes,
        parent_hashes,
        author: CommitAuthor,
        message: str,
        timestamp: Optional[CommitTimestamp] = None,
    ) -> 'Commit':
        """
        Create a new commit, stamping it with the current time if needed.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: List of parent commit hashes
            author: Author identity, also used as committer
            message: Commit message
            timestamp: Commit time (defaults to now, local timezone)

        Returns:
            Commit: New commit object
        """
        if timestamp is None:
            timestamp = CommitTimestamp.now()
        return cls(tree=tree_hash, parents=parent_hashes, author=author,
                   author_timestamp=timestamp, message=message)

    def __repr__(self) -> str:
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(tree={self.tree.hex()[:7] if self.tree else None}{parent_info}, msg='{msg_preview}')"


OBJECT_TYPES = {cls.type_name: cls for cls in (Blob, Tree, Commit)}


def encode_object(obj: GitObject) -> bytes:
    """Canonical encoding of an object (header + payload)."""
    return obj.encode()


def parse_header(data: bytes):
    """
    Split an encoded object into its type tag and payload.

    Args:
        data: Encoded object bytes

    Returns:
        tuple: (type_name, payload)

    Raises:
        MalformedObject: If the header is invalid or the declared size
            does not match the payload length
    """
    space_pos = data.find(b' ')
    null_pos = data.find(b'\0')
    if space_pos == -1 or null_pos == -1 or null_pos < space_pos:
        raise MalformedObject("Invalid object header")

    type_name = data[:space_pos]
    size = data[space_pos + 1:null_pos]
    if not size.isdigit():
        raise MalformedObject(f"Invalid object size: {size!r}")

    payload = data[null_pos + 1:]
    if int(size) != len(payload):
        raise MalformedObject(
            f"Object size mismatch: expected {int(size)}, got {len(payload)}")
    return type_name, payload


def decode_object(data: bytes) -> GitObject:
    """
    Decode an encoded object into a Blob, Tree or Commit.

    Raises:
        UnsupportedObjectType: If the type tag is not blob, tree or commit
        MalformedObject: If the header or payload cannot be parsed
    """
    space_pos = data.find(b' ')
    if space_pos == -1:
        raise MalformedObject("Invalid object header")
    cls = OBJECT_TYPES.get(data[:space_pos])
    if cls is None:
        raise UnsupportedObjectType(data[:space_pos])

    _, payload = parse_header(data)
    return cls.from_payload(payload)
