"""Configuration decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click

from ..utils.output import format_error
from ...api.exceptions import ConfigError
from ...services.config_service import ConfigService


def with_plugin_config(func: Callable) -> Callable:
    """Decorator that loads the plugin configuration

    Adds the common options, merges them over the configuration file and
    the environment, and passes the validated ``config`` to the command.
    Configuration errors are displayed and end the command with status 1.

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @click.option('--config', '-c', 'config_path', default=None,
                  type=click.Path(dir_okay=False),
                  help='Configuration file (default: .deploy-sentry.yaml)')
    @click.option('--dist-dir', default=None,
                  type=click.Path(file_okay=False),
                  help='Build output directory')
    @click.option('--revision', '-r', default=None,
                  help='Release identifier (revision key)')
    @click.option('--file-pattern', default=None,
                  help='Glob of files to upload, relative to the dist dir')
    @click.option('--no-replace', is_flag=True,
                  help='Leave files of an existing release alone')
    @wraps(func)
    def wrapper(*args, config_path, dist_dir, revision, file_pattern, no_replace, **kwargs):
        overrides = {
            "distDir": dist_dir,
            "revisionKey": revision,
            "filePattern": file_pattern,
            "replaceFiles": False if no_replace else None,
        }

        try:
            config = ConfigService(config_path).load_config(overrides)
        except ConfigError as e:
            format_error("Configuration Error", e)
            click.get_current_context().exit(1)

        return func(*args, config=config, **kwargs)

    return wrapper
