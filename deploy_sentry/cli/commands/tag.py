"""Tag command implementation"""

import sys

import click

from ..decorators import with_plugin_config
from ..utils.output import console, format_error
from ...api import Publisher
from ...api.exceptions import DeploySentryError
from ...constants import EMOJI_SUCCESS


@click.command()
@with_plugin_config
def tag(config):
    """Stamp the revision into index.html

    Replaces the <meta name="sentry:revision"> placeholder in the build
    output with the configured revision.

    Examples:
        deploy-sentry tag --dist-dir dist --revision abcdef
    """
    try:
        tagged = Publisher(config).tag()
    except DeploySentryError as e:
        format_error("Tag Error", e)
        sys.exit(1)

    if tagged:
        console.print(f"[green]{EMOJI_SUCCESS}[/green] Tagged index.html with revision {config.revision_key}")
    else:
        console.print("[yellow]index.html was not changed[/yellow]")
