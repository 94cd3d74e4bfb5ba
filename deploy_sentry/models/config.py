"""Configuration data models"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple

from ..api.exceptions import ConfigError
from ..constants import (
    API_PATH,
    DEFAULT_DIST_DIR,
    DEFAULT_FILE_PATTERN,
    ENV_SENTRY_API_KEY,
    ENV_SENTRY_AUTH_TOKEN,
    ENV_SENTRY_ORG,
    ENV_SENTRY_PROJECT,
    ENV_SENTRY_RELEASE,
    ENV_SENTRY_URL,
)
from ..utils.url_utils import join_url


@dataclass(frozen=True)
class ReleaseSettings:
    """Immutable settings for one release synchronization run"""

    url: str
    organization_slug: str
    project_slug: str
    public_url: str
    release: Optional[str] = None
    api_key: Optional[str] = None
    bearer_api_key: Optional[str] = None
    commits: Tuple[Dict[str, Any], ...] = ()
    verify_ssl: bool = True

    @property
    def releases_url(self) -> str:
        """Releases collection URL of the project"""
        return join_url(
            self.url,
            API_PATH,
            self.organization_slug,
            self.project_slug,
            "/releases/"
        )

    @property
    def release_url(self) -> str:
        """URL of this release"""
        return join_url(self.releases_url, self.release, "/")

    @property
    def files_url(self) -> str:
        """URL of the release's file collection"""
        return join_url(self.release_url, "files/")

    @property
    def dashboard_url(self) -> str:
        """Human facing URL of the release"""
        return join_url(
            self.url,
            self.organization_slug,
            self.project_slug,
            "releases",
            self.release,
            "/"
        )

    def logical_name(self, relative_path: str) -> str:
        """Name under which a local file is registered in the release"""
        return join_url(self.public_url, relative_path.replace("\\", "/"))

    def create_payload(self) -> Dict[str, Any]:
        """JSON body for release creation"""
        payload: Dict[str, Any] = {"version": self.release}
        if self.commits:
            payload["commits"] = list(self.commits)
        return payload

    def __repr__(self) -> str:
        # Keep credentials out of logs
        return (
            f"ReleaseSettings(url={self.url!r}, "
            f"organization_slug={self.organization_slug!r}, "
            f"project_slug={self.project_slug!r}, "
            f"release={self.release!r})"
        )


@dataclass
class PluginConfig:
    """Plugin configuration as loaded from file, environment and CLI"""

    public_url: str
    sentry_url: str
    organization_slug: str
    project_slug: str
    api_key: Optional[str] = None
    bearer_api_key: Optional[str] = None
    revision_key: Optional[str] = None
    commits: List[Dict[str, Any]] = field(default_factory=list)
    verify_ssl: bool = True
    dist_dir: str = DEFAULT_DIST_DIR
    file_pattern: str = DEFAULT_FILE_PATTERN
    enable_revision_tagging: bool = True
    replace_files: bool = True

    def __post_init__(self):
        """Validate required configuration"""
        missing = [
            key for key, value in (
                ("publicUrl", self.public_url),
                ("sentryUrl", self.sentry_url),
                ("sentryOrganizationSlug", self.organization_slug),
                ("sentryProjectSlug", self.project_slug),
            ) if not value
        ]
        if missing:
            raise ConfigError(f"Missing required config: {', '.join(missing)}")

        if not self.api_key and not self.bearer_api_key:
            raise ConfigError(
                "Missing required config: sentryApiKey or sentryBearerApiKey"
            )

        if not self.file_pattern or not self.file_pattern.strip("/"):
            raise ConfigError(f"Invalid filePattern: {self.file_pattern!r}")

    @property
    def dist_path(self) -> Path:
        """Build output directory"""
        return Path(self.dist_dir)

    def to_settings(self) -> ReleaseSettings:
        """Freeze into the settings value used by the reconciler"""
        return ReleaseSettings(
            url=self.sentry_url,
            organization_slug=self.organization_slug,
            project_slug=self.project_slug,
            public_url=self.public_url,
            release=self.revision_key,
            api_key=self.api_key,
            bearer_api_key=self.bearer_api_key,
            commits=tuple(self.commits),
            verify_ssl=self.verify_ssl
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (credentials masked)"""
        return {
            "publicUrl": self.public_url,
            "sentryUrl": self.sentry_url,
            "sentryOrganizationSlug": self.organization_slug,
            "sentryProjectSlug": self.project_slug,
            "sentryApiKey": "***" if self.api_key else None,
            "sentryBearerApiKey": "***" if self.bearer_api_key else None,
            "revisionKey": self.revision_key,
            "commits": self.commits,
            "verifySsl": self.verify_ssl,
            "distDir": self.dist_dir,
            "filePattern": self.file_pattern,
            "enableRevisionTagging": self.enable_revision_tagging,
            "replaceFiles": self.replace_files,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> 'PluginConfig':
        """
        Create from dictionary

        Both the camelCase keys of the deploy pipeline and snake_case keys are
        accepted. Missing Sentry values fall back to the usual SENTRY_*
        environment variables.

        Args:
            data: Configuration mapping
            environ: Environment mapping (defaults to os.environ)

        Returns:
            PluginConfig instance

        Raises:
            ConfigError: If required values are missing
        """
        environ = os.environ if environ is None else environ

        def get(camel: str, snake: str, env: Optional[str] = None, default: Any = None) -> Any:
            if data.get(camel) is not None:
                return data[camel]
            if data.get(snake) is not None:
                return data[snake]
            if env and environ.get(env):
                return environ[env]
            return default

        commits = get("commits", "commits", default=[])
        if not isinstance(commits, list):
            raise ConfigError("commits must be a list of commit references")

        return cls(
            public_url=get("publicUrl", "public_url"),
            sentry_url=get("sentryUrl", "sentry_url", ENV_SENTRY_URL),
            organization_slug=get("sentryOrganizationSlug", "organization_slug", ENV_SENTRY_ORG),
            project_slug=get("sentryProjectSlug", "project_slug", ENV_SENTRY_PROJECT),
            api_key=get("sentryApiKey", "api_key", ENV_SENTRY_API_KEY),
            bearer_api_key=get("sentryBearerApiKey", "bearer_api_key", ENV_SENTRY_AUTH_TOKEN),
            revision_key=get("revisionKey", "revision_key", ENV_SENTRY_RELEASE),
            commits=commits,
            verify_ssl=_as_bool(get("verifySsl", "verify_ssl", default=True)),
            dist_dir=str(get("distDir", "dist_dir", default=DEFAULT_DIST_DIR)),
            file_pattern=get("filePattern", "file_pattern", default=DEFAULT_FILE_PATTERN),
            enable_revision_tagging=_as_bool(
                get("enableRevisionTagging", "enable_revision_tagging", default=True)
            ),
            replace_files=_as_bool(get("replaceFiles", "replace_files", default=True)),
        )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("0", "false", "no", "off", "")
    return bool(value)
