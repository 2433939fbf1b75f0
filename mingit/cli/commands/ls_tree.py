"""Commands that inspect stored objects."""

import click
from colorama import Fore, Style

from mingit.core.errors import MingitError, UnexpectedObjectKind
from mingit.core.hash import hash_to_hex
from mingit.core.objects import Blob, Commit, Tree
from mingit.cli.context import fail, open_repository, resolve_hash
from mingit.cli.output import display_name


def tree_line(entry, full_path: str, abbrev: int = 0) -> str:
    """Format one entry as '<mode> <type> <hash>\\t<path>' with a 6-digit mode."""
    hexsha = hash_to_hex(entry.hash)
    if abbrev:
        hexsha = hexsha[:abbrev]
    mode = entry.permission.mode.decode('ascii').rjust(6, '0')
    return f"{mode} {entry.type} {hexsha}\t{full_path}"


@click.command('ls-tree')
@click.option('-r', '--recursive', is_flag=True, help='Recurse into sub-trees')
@click.option('--name-only', is_flag=True, help='Show only file names')
@click.option('--abbrev', type=int, default=0, help='Abbreviate hashes to N characters')
@click.argument('treeish')
def ls_tree_cmd(recursive, name_only, abbrev, treeish):
    """
    List contents of a tree object.

    TREEISH is a tree hash or a commit hash (its root tree is listed).

    Examples:
        mingit ls-tree 4b825dc6            # List a tree
        mingit ls-tree -r <commit>         # Recursively list all files
        mingit ls-tree --name-only <tree>  # Only show entry names
    """
    repo = open_repository()

    try:
        sha = resolve_hash(repo, treeish)
        obj = repo.read_object(sha)
        if isinstance(obj, Commit):
            sha = obj.tree
            obj = repo.read_object(sha)
        if not isinstance(obj, Tree):
            raise UnexpectedObjectKind(hash_to_hex(sha), 'tree', obj.type)

        display_tree(repo, obj, "", recursive, name_only, abbrev)
    except MingitError as e:
        fail("ls-tree", e)


def display_tree(repo, tree_obj, prefix, recursive, name_only, abbrev):
    """Display tree entries with optional recursion."""
    for entry in tree_obj.entries:
        full_path = prefix + display_name(entry.name)

        if entry.type == 'tree' and recursive:
            subtree = repo.read_object(entry.hash)
            if not isinstance(subtree, Tree):
                raise UnexpectedObjectKind(hash_to_hex(entry.hash), 'tree', subtree.type)
            display_tree(repo, subtree, full_path + "/", recursive, name_only, abbrev)
        elif name_only:
            click.echo(full_path)
        else:
            click.echo(tree_line(entry, full_path, abbrev))


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Pretty-print object content')
@click.argument('object_hash')
def cat_file_cmd(show_type, show_size, pretty, object_hash):
    """
    Show object content, type, or size.

    OBJECT_HASH may be abbreviated to a unique prefix of at least 4 characters.

    Examples:
        mingit cat-file -t abc123     # Show object type
        mingit cat-file -s abc123     # Show payload size in bytes
        mingit cat-file -p abc123     # Pretty-print object content
    """
    if sum((show_type, show_size, pretty)) != 1:
        raise click.UsageError("Exactly one of -t, -s or -p is required")

    repo = open_repository()

    try:
        sha = resolve_hash(repo, object_hash)

        if show_type or show_size:
            type_name, payload = repo.store.read_raw(sha)
            click.echo(type_name.decode('ascii', 'replace') if show_type else len(payload))
            return

        obj = repo.read_object(sha)
    except MingitError as e:
        fail("cat-file", e)

    if isinstance(obj, Blob):
        click.echo(obj.data, nl=False)
    elif isinstance(obj, Tree):
        for entry in obj.entries:
            line = tree_line(entry, display_name(entry.name))
            click.echo(f"{Fore.YELLOW}{line}{Style.RESET_ALL}" if entry.type == 'tree' else line)
    else:
        click.echo(obj.serialize(), nl=False)


@click.command('count-objects')
@click.option('-v', '--verbose', is_flag=True, help='Show a breakdown by object type')
def count_objects_cmd(verbose):
    """
    Count objects in the repository.

    Shows statistics about loose objects in the object database.

    Examples:
        mingit count-objects          # Show object counts
        mingit count-objects -v       # Show detailed breakdown
    """
    repo = open_repository()

    total_objects = 0
    total_size = 0
    type_counts = {'commit': 0, 'tree': 0, 'blob': 0, 'other': 0}

    try:
        for sha in repo.store:
            total_objects += 1
            total_size += repo.object_path(sha).stat().st_size

            if verbose:
                type_name, _ = repo.store.read_raw(sha)
                key = type_name.decode('ascii', 'replace')
                type_counts[key if key in type_counts else 'other'] += 1
    except MingitError as e:
        fail("count-objects", e)

    if verbose:
        click.echo(f"{Fore.CYAN}Object Statistics:{Style.RESET_ALL}")
        click.echo(f"  Commits: {Fore.YELLOW}{type_counts['commit']}{Style.RESET_ALL}")
        click.echo(f"  Trees:   {Fore.YELLOW}{type_counts['tree']}{Style.RESET_ALL}")
        click.echo(f"  Blobs:   {Fore.YELLOW}{type_counts['blob']}{Style.RESET_ALL}")
        if type_counts['other'] > 0:
            click.echo(f"  Other:   {type_counts['other']}")
        click.echo()

    size_kb = total_size / 1024
    click.echo(f"{total_objects} objects, {size_kb:.2f} KB")
