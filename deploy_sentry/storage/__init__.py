# deploy_sentry/storage/__init__.py
"""Release transports for deploy-sentry"""

from .base import ReleaseTransport
from .sentry import SentryReleaseTransport, next_page_url

__all__ = [
    'ReleaseTransport',
    'SentryReleaseTransport',
    'next_page_url',
]
