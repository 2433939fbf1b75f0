"""Main CLI entry point for mingit."""

import click
from colorama import init

from mingit import __version__
from mingit.cli.output import BANNER
from mingit.cli.commands import (init_cmd, hash_object_cmd, cat_file_cmd, ls_tree_cmd,
                                 count_objects_cmd, write_tree_cmd, commit_tree_cmd,
                                 checkout_cmd)
from mingit.log_utils import default_logging_config, trace_enabled

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class MingitGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=MingitGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr')
def cli(verbose):
    if verbose or trace_enabled():
        default_logging_config()


cli.add_command(init_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(ls_tree_cmd)
cli.add_command(count_objects_cmd)
cli.add_command(write_tree_cmd)
cli.add_command(commit_tree_cmd)
cli.add_command(checkout_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
