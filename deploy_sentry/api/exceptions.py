"""Exception definitions for deploy-sentry"""

from typing import Optional

from ..constants import ErrorCode


class DeploySentryError(Exception):
    """Base exception for deploy-sentry"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(DeploySentryError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class MissingRevisionError(ConfigError):
    """Release identifier is not available"""

    def __init__(self, message: str = None):
        if message is None:
            message = (
                "revisionKey setting is not available, either provide it "
                "manually (--revision / revisionKey) or set SENTRY_RELEASE"
            )
        super().__init__(message)


class DiscoveryError(DeploySentryError):
    """Local file discovery failed"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, ErrorCode.DISCOVERY_FAILED)
        self.path = path


class TransportError(DeploySentryError):
    """Network level failure talking to the release API"""

    def __init__(self, message: str, url: Optional[str] = None, release: Optional[str] = None):
        super().__init__(message, ErrorCode.TRANSPORT_FAILED)
        self.url = url
        self.release = release


class ProtocolError(DeploySentryError):
    """Unexpected HTTP status or malformed response body"""

    def __init__(self,
                 message: str,
                 status: Optional[int] = None,
                 url: Optional[str] = None,
                 release: Optional[str] = None):
        if status is not None:
            message = f"{message} (HTTP {status})"
        if release:
            message = f"{message} [release {release}]"
        super().__init__(message, ErrorCode.PROTOCOL_ERROR)
        self.status = status
        self.url = url
        self.release = release


class RevisionTagError(DeploySentryError):
    """Stamping the revision into the HTML failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.REVISION_TAG_FAILED)
