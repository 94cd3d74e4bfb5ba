# deploy_sentry/api/__init__.py
"""API layer for deploy-sentry"""

from .exceptions import (
    DeploySentryError,
    ConfigError,
    MissingRevisionError,
    DiscoveryError,
    TransportError,
    ProtocolError,
    RevisionTagError,
)
from .publisher import Publisher, publish

__all__ = [
    "Publisher",
    "publish",
    "DeploySentryError",
    "ConfigError",
    "MissingRevisionError",
    "DiscoveryError",
    "TransportError",
    "ProtocolError",
    "RevisionTagError",
]
