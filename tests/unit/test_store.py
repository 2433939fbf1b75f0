"""Object store tests."""

import stat
import zlib
import pytest
from mingit.core.store import ObjectStore
from mingit.core.objects import Blob, Tree, Commit, CommitAuthor, CommitTimestamp, Permission
from mingit.core.errors import (
    InvalidHashEncoding,
    MalformedObject,
    ObjectNotFound,
    UnsupportedObjectType,
)
from mingit.core.hash import hash_object, hash_to_hex

HELLO_BLOB = 'ce013625030ba8dba906f756967f9e9ca394464a'


def test_write_object_returns_hash_of_encoded_bytes(store):
    """Test the returned hash covers header and payload."""
    encoded = b'blob 6\x00hello\n'
    sha = store.write_object(encoded)
    assert sha == hash_object(encoded)
    assert hash_to_hex(sha) == HELLO_BLOB


def test_object_path_layout(store):
    """Test objects are fanned out by the first two hex characters."""
    path = store.object_path(HELLO_BLOB)
    assert path.parent.name == 'ce'
    assert path.name == HELLO_BLOB[2:]
    assert len(path.name) == 38
    assert path.parent.parent == store.objects_dir


def test_stored_file_is_zlib_of_encoded_bytes(store):
    """Test the on-disk bytes inflate to the exact encoding."""
    sha = store.write_blob(b'hello\n')
    assert zlib.decompress(store.object_path(sha).read_bytes()) == b'blob 6\x00hello\n'


def test_write_is_idempotent(store):
    """Test writing the same bytes twice leaves one retrievable object."""
    sha1 = store.write_blob(b'same data')
    sha2 = store.write_blob(b'same data')
    assert sha1 == sha2

    fanout = store.object_path(sha1).parent
    assert [p.name for p in fanout.iterdir()] == [hash_to_hex(sha1)[2:]]
    assert store.read_object(sha1).data == b'same data'


def test_write_into_existing_fanout_directory(store):
    """Test a pre-existing fan-out directory is not an error."""
    store.object_path(HELLO_BLOB).parent.mkdir(parents=True)
    assert hash_to_hex(store.write_blob(b'hello\n')) == HELLO_BLOB


def test_no_temporary_files_left_behind(store):
    """Test only the final object file remains after a write."""
    sha = store.write_blob(b'payload')
    names = [p.name for p in store.object_path(sha).parent.iterdir()]
    assert names == [hash_to_hex(sha)[2:]]


def test_read_accepts_raw_and_hex(store):
    """Test read_object takes either hash form."""
    sha = store.write_blob(b'data')
    assert store.read_object(sha) == store.read_object(hash_to_hex(sha))


def test_read_tree_and_commit(store):
    """Test trees and commits come back as the right kind."""
    blob_hash = store.write_blob(b'content')
    tree = Tree()
    tree.add_entry(Permission.REGULAR_FILE, b'file.txt', blob_hash)
    tree_hash = store.add_object(tree)
    commit_hash = store.write_commit(tree_hash, [], 'msg', CommitAuthor('A', 'a@x'),
                                     CommitTimestamp(10, 0))

    assert store.read_object(tree_hash) == tree
    commit = store.read_object(commit_hash)
    assert isinstance(commit, Commit)
    assert commit.tree == tree_hash


def test_write_commit_accepts_hex_hashes(store):
    """Test write_commit normalizes hex tree and parent hashes."""
    tree_hash = store.add_object(Tree())
    author = CommitAuthor('A', 'a@x')
    root = store.write_commit(tree_hash, [], 'root', author, CommitTimestamp(1))
    child = store.write_commit(hash_to_hex(tree_hash), [hash_to_hex(root)], 'child',
                               author, CommitTimestamp(2))
    assert store.read_object(child).parents == [root]


def test_contains(store):
    """Test existence checks."""
    sha = store.write_blob(b'present')
    assert store.contains(sha)
    assert sha in store
    assert 'ab' * 20 not in store


def test_read_missing_object(store):
    """Test a missing object raises ObjectNotFound."""
    with pytest.raises(ObjectNotFound):
        store.read_object('ab' * 20)


def test_read_invalid_hash(store):
    """Test a malformed hash raises InvalidHashEncoding."""
    with pytest.raises(InvalidHashEncoding):
        store.read_object('not-a-hash')


def test_read_corrupt_object(store):
    """Test data that is not zlib raises MalformedObject."""
    path = store.object_path('ab' * 20)
    path.parent.mkdir(parents=True)
    path.write_bytes(b'definitely not zlib')
    with pytest.raises(MalformedObject):
        store.read_object('ab' * 20)


def test_read_length_mismatch(store):
    """Test a stored object whose header lies about its size is rejected."""
    path = store.object_path('cd' * 20)
    path.parent.mkdir(parents=True)
    path.write_bytes(zlib.compress(b'blob 10\x00short'))
    with pytest.raises(MalformedObject):
        store.read_object('cd' * 20)


def test_read_unknown_type(store):
    """Test an unsupported type tag surfaces as UnsupportedObjectType."""
    sha = store.write_object(b'tag 3\x00abc')
    with pytest.raises(UnsupportedObjectType):
        store.read_object(sha)
    assert store.read_raw(sha) == (b'tag', b'abc')


def test_iterate_objects(store):
    """Test iteration yields every stored hash."""
    hashes = {store.write_blob(b'one'), store.write_blob(b'two'), store.add_object(Tree())}
    assert set(store) == hashes


def test_iterate_empty_store(tmp_path):
    """Test iterating a store without an objects directory yields nothing."""
    assert list(ObjectStore(tmp_path / 'missing')) == []


def test_expand_prefix(store):
    """Test unique prefixes expand to full hashes."""
    sha = store.write_blob(b'hello\n')
    assert store.expand_prefix(HELLO_BLOB[:7]) == sha
    assert store.expand_prefix(HELLO_BLOB[:4].upper()) == sha
    assert store.expand_prefix(HELLO_BLOB) == sha


def test_expand_prefix_errors(store):
    """Test short, unknown and ambiguous prefixes raise ObjectNotFound."""
    store.write_blob(b'hello\n')
    with pytest.raises(ObjectNotFound):
        store.expand_prefix('ce0')
    with pytest.raises(ObjectNotFound):
        store.expand_prefix('ffff')

    fanout = store.objects_dir / 'ce'
    (fanout / ('0136' + '0' * 34)).write_bytes(b'')
    with pytest.raises(ObjectNotFound, match='ambiguous'):
        store.expand_prefix('ce0136')


def test_stored_objects_are_read_only_for_everyone(store):
    """Test loose objects are written world-readable and never writable."""
    sha = store.write_blob(b'shared')
    assert stat.S_IMODE(store.object_path(sha).stat().st_mode) == 0o444


def test_write_commit_with_unencodable_timezone(store):
    """Test a commit that could not be read back is never stored."""
    tree = store.add_object(Tree())
    with pytest.raises(ValueError):
        store.write_commit(tree, [], 'x', CommitAuthor('A', 'a@x'), CommitTimestamp(1, 6000))
    assert set(store) == {tree}
