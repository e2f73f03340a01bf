"""CLI entrypoint."""

import sys

import click
from loguru import logger

from bundler import __version__
from .commands.cache import cache_clear
from .commands.compile import compile_core
from .commands.entry_point import entry_point


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


@click.group()
@click.version_option(version=__version__, prog_name="doctrine-bundler")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
def cli(verbose: bool):
    """Doctrine Bundler - compile a library into a single file."""
    configure_logging(verbose)


cli.add_command(compile_core)
cli.add_command(cache_clear)
cli.add_command(entry_point)


if __name__ == "__main__":
    cli()
