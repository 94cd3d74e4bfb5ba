# deploy_sentry/cli/main.py
"""Command line entry point of deploy-sentry"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from ..__version__ import __version__
from ..constants import APP_NAME, LOG_FORMAT
from .commands import deploy, snippet, tag, upload

console = Console()


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route log records through rich

    Warnings and errors are always shown; ``verbose`` adds the progress
    messages of the upload, ``debug`` adds every request.
    """
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=debug,
        show_path=debug,
        rich_tracebacks=True,
        tracebacks_suppress=[click]
    )
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)

    # Library chatter stays out of the upload log
    for name in ("asyncio", "aiohttp"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Show upload progress')
@click.option('-d', '--debug', is_flag=True, help='Show every API request')
@click.option('-q', '--quiet', is_flag=True, help='Only show errors')
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """Publish sourcemaps to Sentry releases

    Uploads the JavaScript bundles and sourcemaps of a build into the
    Sentry release named by its revision, and stamps that revision into
    index.html so error reports can be matched to the uploaded maps.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.ensure_object(dict)
    ctx.obj.update(verbose=verbose, debug=debug)


for command in (tag.tag, upload.upload, deploy.deploy, snippet.snippet):
    cli.add_command(command)


def main():
    """Console script entry point"""
    try:
        cli(prog_name=APP_NAME)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
