"""Helpers shared by CLI commands."""

import re

import click

from mingit.core.errors import InvalidHashEncoding, MingitError
from mingit.core.hash import HEX_LENGTH, hex_to_hash
from mingit.core.repository import Repository
from mingit.cli.output import error, info
from mingit.log_utils import getLogger

logger = getLogger(__name__)

HEX_PATTERN = re.compile(r"[0-9a-fA-F]+")


def open_repository(path: str = '.') -> Repository:
    """Open the repository in path, aborting if it is not initialized."""
    repo = Repository(path)
    if not repo.is_initialized():
        click.echo(error(f"Not a mingit repository: {repo.work_tree}"))
        click.echo(info("Run 'mingit init' first"))
        raise click.Abort()
    logger.debug("Using repository at %s", repo.git_dir)
    return repo


def resolve_hash(repo: Repository, name: str) -> bytes:
    """
    Resolve a full or abbreviated hex hash to a raw hash.

    Raises:
        InvalidHashEncoding: If name is not hexadecimal
        ObjectNotFound: If no unique object matches
    """
    if len(name) == HEX_LENGTH:
        return hex_to_hash(name)
    if not HEX_PATTERN.fullmatch(name):
        raise InvalidHashEncoding(name)
    return repo.store.expand_prefix(name)


def fail(action: str, exc: MingitError):
    """Report a core error and abort the command."""
    logger.debug("%s failed", action, exc_info=exc)
    click.echo(error(f"{action} failed: {exc}"))
    raise click.Abort()
