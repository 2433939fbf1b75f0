"""Initialize a new mingit repository."""

import click
from pathlib import Path

from mingit.core.errors import AlreadyInitialized, MingitError
from mingit.core.repository import Repository
from mingit.cli.context import fail
from mingit.cli.output import success, error, info
from mingit.log_utils import getLogger

logger = getLogger(__name__)


@click.command('init')
@click.argument('path', default='.')
def init_cmd(path):
    """
    Initialize a new repository.

    Creates a .git directory holding the object database, refs and HEAD.

    Examples:
        mingit init                    # Initialize in current directory
        mingit init my-project         # Initialize in my-project directory
    """
    repo_path = Path(path).resolve()
    repo = Repository(str(repo_path))

    try:
        repo.init()
    except AlreadyInitialized:
        click.echo(error(f"Repository already exists at {repo.git_dir}"))
        click.echo(info("Use an empty directory or different path"))
        raise click.Abort()
    except MingitError as e:
        fail("init", e)

    logger.debug("Created %s", repo.git_dir)
    click.echo(success(f"Initialized empty repository in {repo.git_dir}"))
    click.echo(info("Repository structure created:"))
    click.echo(info("  objects/     - Object database"))
    click.echo(info("  refs/        - Branch and tag references"))
    click.echo(info("  HEAD         - Current branch pointer"))
