"""Deploy command implementation"""

import sys

import click

from ..decorators import with_plugin_config
from ..utils.output import console, format_reconcile_result, format_error
from ...api import Publisher
from ...api.exceptions import DeploySentryError


@click.command()
@with_plugin_config
def deploy(config):
    """Run the whole deploy lifecycle

    Tags index.html (unless revision tagging is disabled), uploads the
    sourcemaps and reports the release location.
    """
    try:
        result = Publisher(config).deploy()
    except DeploySentryError as e:
        format_error("Deploy Error", e)
        sys.exit(1)

    format_reconcile_result(result)
    console.print(
        f"Uploaded sourcemaps to sentry release: {config.to_settings().dashboard_url}"
    )
