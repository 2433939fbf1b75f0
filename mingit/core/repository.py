"""Repository management for mingit."""

from pathlib import Path
from typing import Optional, Union

from .checkout import checkout
from .errors import AlreadyInitialized, FilesystemError
from .objects import CommitAuthor, CommitTimestamp, GitObject
from .store import ObjectStore
from .tree_builder import write_tree

DEFAULT_ROOT_NAME = '.git'
DEFAULT_BRANCH = 'main'


class Repository:
    """
    Represents a mingit repository.

    A repository is a work tree with the object database in a fixed
    subdirectory (``.git`` by default). It wires the object store, tree
    builder and checkout engine together; it does not manage refs.
    """

    def __init__(self, path: str = '.', root_name: str = DEFAULT_ROOT_NAME):
        """
        Initialize repository.

        Args:
            path: Path to the work tree (defaults to current directory)
            root_name: Name of the repository directory inside the work tree
        """
        self.work_tree = Path(path).resolve()
        self.root_name = root_name
        self.git_dir = self.work_tree / root_name
        self.objects_dir = self.git_dir / 'objects'
        self.refs_dir = self.git_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.git_dir / 'HEAD'
        self.config_file = self.git_dir / 'config'
        self.store = ObjectStore(self.objects_dir)

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the directory structure:
        .git/
        ├── objects/       # Object database
        ├── refs/
        │   ├── heads/     # Branch references
        │   └── tags/      # Tag references
        └── HEAD           # Current branch pointer

        Returns:
            Repository: self for method chaining

        Raises:
            AlreadyInitialized: If the repository directory already exists
            FilesystemError: If the layout cannot be created
        """
        if self.git_dir.exists():
            raise AlreadyInitialized(self.git_dir)

        try:
            self.work_tree.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(self.work_tree, e) from e

        try:
            self.git_dir.mkdir()
            self.objects_dir.mkdir()
            self.refs_dir.mkdir()
            self.heads_dir.mkdir()
            self.tags_dir.mkdir()
            self.head_file.write_text(f'ref: refs/heads/{DEFAULT_BRANCH}\n')
        except FileExistsError:
            raise AlreadyInitialized(self.git_dir) from None
        except OSError as e:
            raise FilesystemError(self.git_dir, e) from e

        return self

    def is_initialized(self) -> bool:
        """Check whether the repository layout exists."""
        return self.objects_dir.is_dir() and self.head_file.is_file()

    def object_path(self, sha: Union[bytes, str]) -> Path:
        """Get filesystem path for an object."""
        return self.store.object_path(sha)

    def object_exists(self, sha: Union[bytes, str]) -> bool:
        """Check if object exists in repository."""
        return self.store.contains(sha)

    def write_object(self, obj: GitObject) -> bytes:
        """Encode and store an object, returning its raw hash."""
        return self.store.add_object(obj)

    def read_object(self, sha: Union[bytes, str]) -> GitObject:
        """
        Read object from repository.

        Args:
            sha: Raw 20-byte hash or 40-character hex hash

        Returns:
            GitObject: Deserialized object (Blob, Tree, or Commit)
        """
        return self.store.read_object(sha)

    def write_blob(self, data: bytes) -> bytes:
        """Store bytes as a blob and return its hash."""
        return self.store.write_blob(data)

    def write_tree(self, path=None, skip_empty: bool = False) -> bytes:
        """
        Snapshot a directory (the work tree by default) into tree objects.

        The repository directory is never included.

        Returns:
            bytes: Raw hash of the root tree
        """
        directory = self.work_tree if path is None else Path(path)
        return write_tree(self.store, directory, exclude=(self.root_name,),
                          skip_empty=skip_empty)

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
        Store a commit exactly as given. HEAD and refs are not updated.

        Returns:
            bytes: Raw hash of the commit
        """
        return self.store.write_commit(tree, parents, message, author, timestamp,
                                       committer, committer_timestamp)

    def checkout(self, sha: Union[bytes, str], destination) -> None:
        """Materialize a commit, tree or blob at destination."""
        checkout(self.store, sha, destination)

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree})"
