"""Main CLI entry point for minigit."""

import logging

import click
from colorama import init

from minigit import __version__
from minigit.cli.output import BANNER
from minigit.cli.commands import (init_cmd, hash_object_cmd, cat_file_cmd, write_tree_cmd,
                                  ls_tree_cmd, add_cmd, commit_cmd, log_cmd, branch_cmd,
                                  symbolic_ref_cmd, status_cmd, checkout_cmd, merge_cmd,
                                  pack_objects_cmd, unpack_objects_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


class MinigitGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


def configure_logging(verbose: bool) -> None:
    """Send minigit's log records to stderr when running verbosely."""
    logger = logging.getLogger('minigit')
    if not verbose or logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


@click.group(cls=MinigitGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log internal operations to stderr')
def cli(verbose):
    configure_logging(verbose)


# Register commands
cli.add_command(init_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(write_tree_cmd)
cli.add_command(ls_tree_cmd)
cli.add_command(add_cmd)
cli.add_command(commit_cmd)
cli.add_command(log_cmd)
cli.add_command(branch_cmd)
cli.add_command(symbolic_ref_cmd)
cli.add_command(status_cmd)
cli.add_command(checkout_cmd)
cli.add_command(merge_cmd)
cli.add_command(pack_objects_cmd)
cli.add_command(unpack_objects_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
