"""Checkout command - materialize a stored commit, tree or blob."""

import click
from pathlib import Path

from mingit.core.errors import MingitError
from mingit.cli.context import fail, open_repository, resolve_hash
from mingit.cli.output import display_path, success
from mingit.log_utils import getLogger

logger = getLogger(__name__)


@click.command('checkout')
@click.argument('object_hash')
@click.argument('destination', required=False, type=click.Path(path_type=Path))
def checkout_cmd(object_hash, destination):
    """
    Write the files of a commit or tree into DESTINATION.

    DESTINATION defaults to the work tree. Existing files with the same
    names are overwritten; other files are left alone. A blob hash writes
    a single file at DESTINATION. HEAD is not changed.

    Examples:
        mingit checkout <commit>              # Restore into the work tree
        mingit checkout <tree> /tmp/export    # Export a tree elsewhere
        mingit checkout <blob> restored.txt   # Write one blob to a file
    """
    repo = open_repository()
    if destination is None:
        destination = repo.work_tree

    try:
        sha = resolve_hash(repo, object_hash)
        repo.checkout(sha, destination)
    except MingitError as e:
        fail("checkout", e)

    logger.debug("Checked out %s into %s", object_hash, destination)
    click.echo(success(f"Checked out {object_hash} into {display_path(destination)}"))
