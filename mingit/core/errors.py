"""Exception classes raised by the mingit core."""

from typing import Optional


class MingitError(Exception):
    """Base class for all mingit errors."""


class InvalidHashEncoding(MingitError):
    """A hash was not 40 hex characters (or 20 raw bytes)."""

    def __init__(self, value) -> None:
        self.value = value
        super().__init__(f"Invalid object hash: {value!r}")


class ObjectNotFound(MingitError):
    """No object is stored under the requested hash."""

    def __init__(self, sha: str, reason: Optional[str] = None) -> None:
        self.sha = sha
        message = f"Object {sha} not found"
        if reason is not None:
            message += f" ({reason})"
        super().__init__(message)


class MalformedObject(MingitError):
    """Stored bytes could not be decompressed or decoded."""


class UnsupportedObjectType(MalformedObject):
    """The object header carries an unknown type tag."""

    def __init__(self, type_name: bytes) -> None:
        self.type_name = type_name
        super().__init__(f"Unsupported object type: {type_name!r}")


class UnsupportedPermission(MalformedObject):
    """A tree entry carries an unknown mode string."""

    def __init__(self, mode: bytes) -> None:
        self.mode = mode
        super().__init__(f"Unsupported tree entry mode: {mode!r}")


class UnexpectedObjectKind(MingitError):
    """An object of one kind was found where another was required."""

    def __init__(self, sha: str, expected: str, got: str) -> None:
        self.sha = sha
        self.expected = expected
        self.got = got
        super().__init__(f"Object {sha} is a {got}, expected {expected}")


class AlreadyInitialized(MingitError):
    """The repository directory already exists."""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"Repository already exists at {path}")


class FilesystemError(MingitError):
    """An underlying filesystem operation failed."""

    def __init__(self, path, error: OSError) -> None:
        self.path = path
        self.error = error
        super().__init__(f"{path}: {error.strerror or error}")
