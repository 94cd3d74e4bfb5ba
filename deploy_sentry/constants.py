"""Global constants for deploy-sentry"""

from enum import Enum

APP_NAME = "deploy-sentry"
PLUGIN_NAME = "sentry"

# Project identification
PROJECT_CONFIG_FILE = ".deploy-sentry.yaml"

# File discovery
DEFAULT_FILE_PATTERN = "**/*.{js,map}"
DEFAULT_DIST_DIR = "dist"

# Revision tagging
INDEX_FILE = "index.html"
REVISION_META_NAME = "sentry:revision"
REVISION_META_PLACEHOLDER = f'<meta name="{REVISION_META_NAME}">'

# Sentry API
API_PATH = "/api/0/projects/"
DEFAULT_UPLOAD_CONCURRENCY = 5
DEFAULT_REQUEST_TIMEOUT = 300  # seconds
DEFAULT_CONNECT_TIMEOUT = 30  # seconds
GZIP_MAGIC = b"\x1f\x8b"

# Logging
LOG_FORMAT = "%(message)s"

# Display
EMOJI_SUCCESS = "✔"
EMOJI_ERROR = "✗"


class ReleaseAction(Enum):
    """How the remote release was obtained during a run"""
    CREATED = "created"
    REUSED = "reused"
    CONFLICT = "conflict"


class ReconcilePhase(Enum):
    """States of the release reconciliation machine"""
    START = "start"
    CHECKING_EXISTENCE = "checking_existence"
    CREATING_RELEASE = "creating_release"
    REUSING_RELEASE = "reusing_release"
    UPLOADING = "uploading"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "DS001"
    DISCOVERY_FAILED = "DS002"
    TRANSPORT_FAILED = "DS003"
    PROTOCOL_ERROR = "DS004"
    REVISION_TAG_FAILED = "DS005"


# Environment variables
ENV_CONFIG_PATH = "DEPLOY_SENTRY_CONFIG"
ENV_SENTRY_URL = "SENTRY_URL"
ENV_SENTRY_ORG = "SENTRY_ORG"
ENV_SENTRY_PROJECT = "SENTRY_PROJECT"
ENV_SENTRY_API_KEY = "SENTRY_API_KEY"
ENV_SENTRY_AUTH_TOKEN = "SENTRY_AUTH_TOKEN"
ENV_SENTRY_RELEASE = "SENTRY_RELEASE"
