"""Pytest configuration and fixtures for deploy-sentry tests."""

import asyncio
from itertools import count
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from deploy_sentry.api.exceptions import ProtocolError
from deploy_sentry.core.file_source import FileSource
from deploy_sentry.models import (
    Release,
    ReleaseConflict,
    ReleaseCreated,
    ReleaseSettings,
    RemoteFile,
)
from deploy_sentry.storage.base import ReleaseTransport


def version_from_url(release_url: str) -> str:
    return release_url.rstrip("/").split("/")[-1]


class FakeTransport(ReleaseTransport):
    """In-memory release API recording every call."""

    def __init__(self,
                 releases: Optional[Dict[str, List[str]]] = None,
                 create_status: int = 201,
                 fail_uploads: Iterable[str] = (),
                 fail_deletes: Iterable[str] = (),
                 upload_delays: Optional[Dict[str, float]] = None,
                 read_content: bool = False):
        super().__init__()
        self._ids = count(1)
        self.releases: Dict[str, List[RemoteFile]] = {}
        for version, names in (releases or {}).items():
            self.releases[version] = [self._remote(name) for name in names]
        self.create_status = create_status
        self.fail_uploads = set(fail_uploads)
        self.fail_deletes = set(fail_deletes)
        self.upload_delays = upload_delays or {}
        self.read_content = read_content
        self.calls: List[tuple] = []
        self.contents: Dict[str, bytes] = {}
        self.completed_uploads: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _remote(self, name: str) -> RemoteFile:
        return RemoteFile(id=str(next(self._ids)), name=name)

    def calls_of(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]

    def file_names(self, version: str) -> List[str]:
        return [f.name for f in self.releases.get(version, [])]

    async def release_exists(self, release_url):
        self.calls.append(("exists", release_url))
        version = version_from_url(release_url)
        if version in self.releases:
            return Release(version=version)
        return None

    async def create_release(self, settings):
        self.calls.append(("create", settings.create_payload()))
        if self.create_status == 400:
            # Someone else is creating it
            self.releases.setdefault(settings.release, [])
            return ReleaseConflict(version=settings.release)
        if self.create_status >= 300:
            raise ProtocolError("Creating release failed", status=self.create_status,
                                release=settings.release)
        self.releases[settings.release] = []
        return ReleaseCreated(release=Release(version=settings.release))

    async def list_files(self, release_url):
        self.calls.append(("list", release_url))
        return list(self.releases[version_from_url(release_url)])

    async def delete_file(self, release_url, file_id):
        self.calls.append(("delete", file_id))
        if file_id in self.fail_deletes:
            raise ProtocolError("Deleting file failed", status=500)
        files = self.releases[version_from_url(release_url)]
        files[:] = [f for f in files if f.id != file_id]

    async def upload_file(self, release_url, local_path, logical_name):
        self.calls.append(("upload", logical_name))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.upload_delays.get(logical_name, 0))
            if self.read_content:
                self.contents[logical_name] = Path(local_path).read_bytes()
            if logical_name in self.fail_uploads:
                raise ProtocolError(f"Uploading {logical_name} failed", status=500)
            self.releases[version_from_url(release_url)].append(self._remote(logical_name))
            self.completed_uploads.append(logical_name)
        finally:
            self.in_flight -= 1


class FakeFileSource(FileSource):
    """File source returning a fixed list."""

    def __init__(self, files: List[str], root: Path = Path("/build")):
        self.files = list(files)
        self._root = root
        self.discover_calls = 0

    @property
    def root(self) -> Path:
        return self._root

    async def discover(self) -> List[str]:
        self.discover_calls += 1
        return list(self.files)


@pytest.fixture
def settings():
    """Release settings for release abcdef."""
    return ReleaseSettings(
        url="https://sentry.example.com",
        organization_slug="acme",
        project_slug="web",
        public_url="https://cdn.example.com/assets",
        release="abcdef",
        api_key="secret"
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove SENTRY_* variables that would leak into configuration."""
    for name in ("SENTRY_URL", "SENTRY_ORG", "SENTRY_PROJECT", "SENTRY_API_KEY",
                 "SENTRY_AUTH_TOKEN", "SENTRY_RELEASE", "DEPLOY_SENTRY_CONFIG"):
        monkeypatch.delenv(name, raising=False)
