"""Compute a blob hash for a file, optionally storing it."""

import click
from pathlib import Path

from mingit.core.errors import MingitError
from mingit.core.hash import hash_to_hex
from mingit.core.objects import Blob
from mingit.cli.context import fail, open_repository
from mingit.cli.output import error
from mingit.log_utils import getLogger

logger = getLogger(__name__)


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the blob into the object database')
@click.argument('file', type=click.Path(dir_okay=False, path_type=Path))
def hash_object_cmd(write, file):
    """
    Print the blob hash of FILE.

    Examples:
        mingit hash-object README.md       # Only compute the hash
        mingit hash-object -w README.md    # Compute and store the blob
    """
    try:
        blob = Blob.from_file(file)
    except OSError as e:
        click.echo(error(f"Cannot read {file}: {e.strerror or e}"))
        raise click.Abort()

    if not write:
        click.echo(blob.hex)
        return

    repo = open_repository()
    try:
        sha = repo.write_object(blob)
    except MingitError as e:
        fail("hash-object", e)

    logger.debug("Stored blob for %s (%d bytes)", file, len(blob.data))
    click.echo(hash_to_hex(sha))
