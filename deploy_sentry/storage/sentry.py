"""Sentry release API transport implementation"""

import asyncio
import base64
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout, TCPConnector

from .base import ReleaseTransport
from ..api.exceptions import DiscoveryError, ProtocolError, TransportError
from ..constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_REQUEST_TIMEOUT
from ..models.config import ReleaseSettings
from ..models.release import (
    CreationOutcome,
    Release,
    ReleaseConflict,
    ReleaseCreated,
    RemoteFile,
)
from ..utils.file_utils import read_bytes
from ..utils.url_utils import join_url


@dataclass
class _Response:
    status: int
    url: str
    body: bytes
    next_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


def next_page_url(links) -> Optional[str]:
    """
    Extract the next page URL from parsed Link header relations

    Pagination ends when there is no ``next`` relation or when the relation
    is marked ``results="false"``.

    Args:
        links: Mapping of relation name to link parameters (``url`` included)

    Returns:
        Absolute URL of the next page or None
    """
    link = links.get("next") if links else None
    if not link:
        return None
    if str(link.get("results", "true")).strip('"').lower() == "false":
        return None
    url = link.get("url")
    return str(url) if url else None


class SentryReleaseTransport(ReleaseTransport):
    """Release transport for the Sentry web API"""

    def __init__(self,
                 api_key: Optional[str] = None,
                 bearer_api_key: Optional[str] = None,
                 verify_ssl: bool = True,
                 timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 release: Optional[str] = None):
        """
        Initialize Sentry transport

        Args:
            api_key: API key, sent as HTTP Basic user with empty password
            bearer_api_key: Auth token, sent as Bearer; wins over api_key
            verify_ssl: Verify TLS certificates
            timeout: Total timeout per request in seconds
            release: Release identifier, used for error context only
        """
        super().__init__()
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.release = release
        self._session: Optional[ClientSession] = None
        self.logger = logging.getLogger(self.__class__.__name__)

        # Authentication policy is decided once per transport
        self._uses_bearer = bool(bearer_api_key)
        if self._uses_bearer:
            authorization = f"Bearer {bearer_api_key}"
        else:
            # API key is the Basic user, password stays empty
            credentials = base64.b64encode(f"{api_key or ''}:".encode("utf-8")).decode("ascii")
            authorization = f"Basic {credentials}"
        self._headers = {"Authorization": authorization}

    @classmethod
    def from_settings(cls, settings: ReleaseSettings, **kwargs) -> 'SentryReleaseTransport':
        """Create a transport for the given release settings"""
        return cls(
            api_key=settings.api_key,
            bearer_api_key=settings.bearer_api_key,
            verify_ssl=settings.verify_ssl,
            release=settings.release,
            **kwargs
        )

    @property
    def uses_bearer(self) -> bool:
        """Whether requests authenticate with a bearer token"""
        return self._uses_bearer

    async def _do_initialize(self) -> None:
        """Open the HTTP session"""
        if self._session is None or self._session.closed:
            self._session = ClientSession(
                connector=TCPConnector(ssl=self.verify_ssl),
                timeout=ClientTimeout(total=self.timeout, connect=DEFAULT_CONNECT_TIMEOUT),
                headers=self._headers
            )

    async def _do_close(self) -> None:
        """Close the HTTP session"""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(self, method: str, url: str, **kwargs) -> _Response:
        """Perform one request and read the whole response"""
        await self.initialize()
        self.logger.debug(f"{method} {url}")

        try:
            async with self._session.request(method, url, **kwargs) as resp:
                body = await resp.read()
                return _Response(
                    status=resp.status,
                    url=str(resp.url),
                    body=body,
                    next_url=next_page_url(resp.links)
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(
                f"{method} {url} failed: {str(e) or e.__class__.__name__}",
                url=url,
                release=self.release
            ) from e

    def _protocol_error(self, action: str, response: _Response) -> ProtocolError:
        detail = response.text.strip()
        message = f"{action} failed"
        if detail:
            message = f"{message}: {detail[:200]}"
        return ProtocolError(message, status=response.status, url=response.url, release=self.release)

    def _json(self, action: str, response: _Response) -> Any:
        try:
            return json.loads(response.body)
        except ValueError as e:
            raise ProtocolError(
                f"{action} returned malformed JSON",
                status=response.status,
                url=response.url,
                release=self.release
            ) from e

    async def release_exists(self, release_url: str) -> Optional[Release]:
        response = await self._request("GET", release_url)

        if response.status == 404:
            return None
        if not response.ok:
            raise self._protocol_error("Release lookup", response)

        return Release.from_dict(self._json("Release lookup", response))

    async def create_release(self, settings: ReleaseSettings) -> CreationOutcome:
        response = await self._request(
            "POST",
            settings.releases_url,
            json=settings.create_payload()
        )

        if response.status == 400:
            return ReleaseConflict(
                version=settings.release,
                status=response.status,
                detail=response.text or None
            )
        if not response.ok:
            raise self._protocol_error("Creating release", response)

        try:
            data = json.loads(response.body) if response.body else {}
        except ValueError:
            data = {}
        if isinstance(data, dict) and data.get("version"):
            return ReleaseCreated(release=Release.from_dict(data))
        return ReleaseCreated(release=Release(version=settings.release))

    async def list_files(self, release_url: str) -> List[RemoteFile]:
        files: List[RemoteFile] = []
        seen = set()
        url: Optional[str] = join_url(release_url, "files/")

        # Each page URL is only known from the previous response
        while url and url not in seen:
            seen.add(url)
            response = await self._request("GET", url)
            if not response.ok:
                raise self._protocol_error("Listing release files", response)

            page = self._json("Listing release files", response)
            if not isinstance(page, list):
                raise ProtocolError(
                    "Listing release files returned a non-list body",
                    status=response.status,
                    url=response.url,
                    release=self.release
                )

            files.extend(RemoteFile.from_dict(entry) for entry in page)
            url = response.next_url

        return files

    async def delete_file(self, release_url: str, file_id: str) -> None:
        response = await self._request("DELETE", join_url(release_url, "files/", file_id, "/"))
        if not response.ok:
            raise self._protocol_error(f"Deleting file {file_id}", response)

    async def upload_file(self, release_url: str, local_path: Path, logical_name: str) -> None:
        local_path = Path(local_path)
        try:
            content = await read_bytes(local_path)
        except OSError as e:
            raise DiscoveryError(f"Cannot read {local_path}: {e}", path=str(local_path)) from e

        # Bytes payloads give the multipart body a known size, so the request
        # carries Content-Length instead of chunked encoding
        form = aiohttp.FormData()
        form.add_field("name", logical_name)
        form.add_field(
            "file",
            content,
            filename=local_path.name,
            content_type="application/octet-stream"
        )

        response = await self._request("POST", join_url(release_url, "files/"), data=form)
        if not response.ok:
            raise self._protocol_error(f"Uploading {logical_name}", response)

