"""Deploy Sentry - Publish sourcemaps to Sentry releases.

This tool uploads built JavaScript bundles and their sourcemaps into a
Sentry release and stamps the deployed HTML with the release revision,
so stack traces of deployed code can be de-minified.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Exceptions
from .api.exceptions import (
    DeploySentryError,
    ConfigError,
    MissingRevisionError,
    DiscoveryError,
    TransportError,
    ProtocolError,
    RevisionTagError,
)

# Core API
from .api.publisher import Publisher, publish

# Data models
from .models import (
    ReleaseSettings,
    PluginConfig,
    Release,
    RemoteFile,
    ReconcileResult,
)

# Building blocks
from .core import FileSource, GlobFileSource, RevisionTagger
from .storage import ReleaseTransport, SentryReleaseTransport
from .services import ReleaseReconciler, UploadService

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Publisher",
    "publish",

    # Data models
    "ReleaseSettings",
    "PluginConfig",
    "Release",
    "RemoteFile",
    "ReconcileResult",

    # Building blocks
    "FileSource",
    "GlobFileSource",
    "RevisionTagger",
    "ReleaseTransport",
    "SentryReleaseTransport",
    "ReleaseReconciler",
    "UploadService",

    # Exceptions
    "DeploySentryError",
    "ConfigError",
    "MissingRevisionError",
    "DiscoveryError",
    "TransportError",
    "ProtocolError",
    "RevisionTagError",
]
