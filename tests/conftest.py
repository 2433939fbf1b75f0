"""Shared pytest fixtures for mingit tests."""

import os
import pytest
import tempfile
import shutil
from pathlib import Path
from mingit.core.repository import Repository
from mingit.core.objects import Blob, Tree, Commit, CommitAuthor, CommitTimestamp, Permission

AUTHOR = CommitAuthor('Test User', 'test@example.com')
TIMESTAMP = CommitTimestamp(1698660000, 0)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    repo = Repository(str(temp_dir))
    repo.init()
    return repo


@pytest.fixture
def store(repo):
    """Object store of an initialized repository."""
    return repo.store


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def sample_tree(repo, sample_blob):
    """Create a sample tree with one blob."""
    blob_hash = repo.write_object(sample_blob)
    tree = Tree()
    tree.add_entry(Permission.REGULAR_FILE, b'test.txt', blob_hash)
    return tree


@pytest.fixture
def sample_commit(sample_tree, repo):
    """Sample commit object."""
    tree_hash = repo.write_object(sample_tree)
    return Commit(
        tree=tree_hash,
        parents=[],
        author=AUTHOR,
        author_timestamp=TIMESTAMP,
        message="Test commit",
    )


@pytest.fixture
def working_files(repo):
    """Create sample file structure in repository."""
    file1 = repo.work_tree / "test1.txt"
    file2 = repo.work_tree / "test2.txt"

    (repo.work_tree / "subdir" / "deeper").mkdir(parents=True)
    file3 = repo.work_tree / "subdir" / "test3.txt"
    file4 = repo.work_tree / "subdir" / "deeper" / "test4.txt"

    file1.write_text("Content 1")
    file2.write_text("Content 2")
    file3.write_text("Content 3")
    file4.write_bytes(b"\x00\xffbinary\n")

    return {
        'file1': file1,
        'file2': file2,
        'file3': file3,
        'file4': file4,
    }


def _snapshot(root):
    """Map every path under root to its bytes; directories map to None, links to ('link', target)."""
    root = Path(root)
    result = {}
    for path in sorted(root.rglob('*')):
        rel = path.relative_to(root)
        if rel.parts[0] == '.git':
            continue
        if path.is_symlink():
            result[str(rel)] = ('link', os.readlink(path))
        elif path.is_dir():
            result[str(rel)] = None
        else:
            result[str(rel)] = path.read_bytes()
    return result


@pytest.fixture
def snapshot():
    """Function capturing a directory's contents for comparison."""
    return _snapshot
