# deploy_sentry/storage/base.py
"""Release transport abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..models.config import ReleaseSettings
from ..models.release import Release, RemoteFile, CreationOutcome


class ReleaseTransport(ABC):
    """Abstract capability for talking to a release management API"""

    def __init__(self):
        self._initialized = False

    async def initialize(self) -> None:
        """Open connections, once; operations call this lazily"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    async def _do_initialize(self) -> None:
        """Open transport resources"""
        pass

    @abstractmethod
    async def release_exists(self, release_url: str) -> Optional[Release]:
        """
        Look up a release

        Args:
            release_url: URL of the release

        Returns:
            The release, or None if the server answered 404

        Raises:
            TransportError: On network failure
            ProtocolError: On any other non-2xx status or a malformed body
        """
        pass

    @abstractmethod
    async def create_release(self, settings: ReleaseSettings) -> CreationOutcome:
        """
        Create the release described by settings

        Args:
            settings: Release settings

        Returns:
            ReleaseCreated, or ReleaseConflict if the server answered 400

        Raises:
            TransportError: On network failure
            ProtocolError: On any other non-2xx status
        """
        pass

    @abstractmethod
    async def list_files(self, release_url: str) -> List[RemoteFile]:
        """
        List every file of a release, following pagination to the end

        Args:
            release_url: URL of the release

        Returns:
            All remote files of the release
        """
        pass

    @abstractmethod
    async def delete_file(self, release_url: str, file_id: str) -> None:
        """
        Delete one file from a release

        Args:
            release_url: URL of the release
            file_id: Server assigned file id
        """
        pass

    @abstractmethod
    async def upload_file(self, release_url: str, local_path: Path, logical_name: str) -> None:
        """
        Upload one file into a release

        Args:
            release_url: URL of the release
            local_path: Local file to send
            logical_name: Name to register the file under
        """
        pass

    async def close(self) -> None:
        """Release connections opened by initialize"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Close transport resources"""
        pass

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
