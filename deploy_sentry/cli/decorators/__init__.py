# deploy_sentry/cli/decorators/__init__.py
"""CLI decorators"""

from .config import with_plugin_config

__all__ = [
    'with_plugin_config',
]
