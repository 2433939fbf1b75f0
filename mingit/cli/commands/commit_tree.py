"""Create a commit object from a tree."""

import click

from mingit.core.config import get_config
from mingit.core.errors import MingitError, UnexpectedObjectKind
from mingit.core.hash import hash_to_hex
from mingit.core.objects import Commit, CommitAuthor, CommitTimestamp, Tree, parse_timezone
from mingit.cli.context import fail, open_repository, resolve_hash
from mingit.cli.output import error, info
from mingit.log_utils import getLogger

logger = getLogger(__name__)


def get_author_info(repo, author=None) -> CommitAuthor:
    """Get author identity from --author, the environment, or config.

    Priority order (highest to lowest):
    1. The --author option ("Name <email>")
    2. Environment variables (MINGIT_USER_NAME/EMAIL or GIT_AUTHOR_NAME/EMAIL)
    3. Repository-local config (<repository>/config)
    4. Global config (~/.mingitconfig)
    """
    if author:
        try:
            return CommitAuthor.parse(author)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint='--author')

    name, email = get_config(repo).get_user_identity()
    if not name or not email:
        click.echo(error("Author identity unknown"))
        click.echo(info("Set MINGIT_USER_NAME and MINGIT_USER_EMAIL, add a [user] section "
                        "to ~/.mingitconfig, or pass --author 'Name <email>'"))
        raise click.Abort()
    return CommitAuthor(name, email)


def get_timestamp(date, timezone) -> CommitTimestamp:
    """Build the commit timestamp, defaulting to now in the local timezone."""
    now = CommitTimestamp.now()
    seconds = now.seconds if date is None else date
    if timezone is None:
        offset = now.timezone_offset
    else:
        try:
            offset = parse_timezone(timezone.encode('ascii'))
        except (ValueError, UnicodeEncodeError):
            raise click.BadParameter(f"expected +HHMM or -HHMM, got {timezone!r}",
                                     param_hint='--timezone')
    return CommitTimestamp(seconds, offset)


@click.command('commit-tree')
@click.argument('tree')
@click.option('-p', '--parent', 'parents', multiple=True, help='Parent commit (repeatable, order is kept)')
@click.option('-m', '--message', required=True, help='Commit message')
@click.option('--author', help='Author as "Name <email>"')
@click.option('--date', type=click.IntRange(min=0, max=2 ** 64 - 1), help='Author time in epoch seconds')
@click.option('--timezone', help='Timezone offset as +HHMM or -HHMM')
def commit_tree_cmd(tree, parents, message, author, date, timezone):
    """
    Create a commit for TREE and print its hash.

    No branch or HEAD is updated; record the printed hash yourself.

    Examples:
        mingit commit-tree <tree> -m "first"
        mingit commit-tree <tree> -p <parent> -m "second"
        mingit commit-tree <tree> -p <a> -p <b> -m "merge"
    """
    repo = open_repository()
    identity = get_author_info(repo, author)
    timestamp = get_timestamp(date, timezone)

    try:
        tree_hash = resolve_hash(repo, tree)
        tree_obj = repo.read_object(tree_hash)
        if not isinstance(tree_obj, Tree):
            raise UnexpectedObjectKind(hash_to_hex(tree_hash), 'tree', tree_obj.type)

        parent_hashes = []
        for parent in parents:
            parent_hash = resolve_hash(repo, parent)
            parent_obj = repo.read_object(parent_hash)
            if not isinstance(parent_obj, Commit):
                raise UnexpectedObjectKind(hash_to_hex(parent_hash), 'commit', parent_obj.type)
            parent_hashes.append(parent_hash)

        sha = repo.write_commit(tree_hash, parent_hashes, message, identity, timestamp)
    except MingitError as e:
        fail("commit-tree", e)
    except ValueError as e:
        raise click.UsageError(f"Cannot encode commit: {e}")

    logger.debug("Committed tree %s with %d parent(s)", hash_to_hex(tree_hash), len(parent_hashes))
    click.echo(hash_to_hex(sha))
