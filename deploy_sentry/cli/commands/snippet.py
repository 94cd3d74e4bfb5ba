"""Snippet command implementation"""

import click

from ...core.revision_tagger import head_footer_snippet


@click.command()
def snippet():
    """Print the revision meta tag placeholder

    Render the printed tag into the head of index.html; the tag command
    fills in the revision at deploy time.
    """
    click.echo(head_footer_snippet())
