"""Upload command implementation"""

import sys

import click

from ..decorators import with_plugin_config
from ..utils.output import format_reconcile_result, format_error
from ...api import Publisher
from ...api.exceptions import DeploySentryError


@click.command()
@with_plugin_config
def upload(config):
    """Upload sourcemaps into the Sentry release

    Creates the release when it does not exist yet. Files of an existing
    release are replaced unless --no-replace is given.

    Examples:
        # Upload with settings from .deploy-sentry.yaml
        deploy-sentry upload --revision abcdef

        # Keep what an existing release already has
        deploy-sentry upload -r abcdef --no-replace
    """
    try:
        result = Publisher(config).upload()
    except DeploySentryError as e:
        format_error("Upload Error", e)
        sys.exit(1)

    format_reconcile_result(result)
