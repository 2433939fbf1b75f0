"""Snapshot the work tree into tree objects."""

import click

from mingit.core.errors import MingitError
from mingit.core.hash import hash_to_hex
from mingit.cli.context import fail, open_repository
from mingit.log_utils import getLogger

logger = getLogger(__name__)


@click.command('write-tree')
@click.option('--skip-empty', is_flag=True,
              help='Leave out empty directories, as git does')
def write_tree_cmd(skip_empty):
    """
    Store the current work tree and print the root tree hash.

    Every file and directory under the repository root is written,
    except the repository directory itself. Empty directories are kept
    as empty trees unless --skip-empty is given.

    Examples:
        mingit write-tree                 # Snapshot the work tree
        mingit write-tree --skip-empty    # Snapshot without empty directories
    """
    repo = open_repository()

    try:
        sha = repo.write_tree(skip_empty=skip_empty)
    except MingitError as e:
        fail("write-tree", e)

    logger.debug("Wrote tree for %s", repo.work_tree)
    click.echo(hash_to_hex(sha))
