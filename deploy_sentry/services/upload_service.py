# deploy_sentry/services/upload_service.py
"""Concurrency bounded upload service"""

import logging
from typing import List, Optional

from ..constants import DEFAULT_UPLOAD_CONCURRENCY
from ..core.file_source import FileSource
from ..models import ReleaseSettings, UploadReport
from ..storage.base import ReleaseTransport
from ..utils.async_utils import AsyncPool


class UploadService:
    """Uploads discovered files into a release with bounded concurrency"""

    def __init__(self,
                 transport: ReleaseTransport,
                 file_source: FileSource,
                 concurrency: int = DEFAULT_UPLOAD_CONCURRENCY):
        """
        Initialize upload service

        Args:
            transport: Release transport
            file_source: Source of files to upload
            concurrency: Maximum number of uploads in flight
        """
        self.transport = transport
        self.file_source = file_source
        self.concurrency = concurrency
        self.logger = logging.getLogger(self.__class__.__name__)

    async def upload(self, settings: ReleaseSettings, files: Optional[List[str]] = None) -> UploadReport:
        """
        Upload all local files and fetch the resulting remote listing

        Every dispatched upload is allowed to settle before the outcome is
        decided; failed uploads do not cancel their siblings.

        Args:
            settings: Release settings
            files: Already discovered relative paths (discovered when omitted)

        Returns:
            UploadReport with uploaded names and the server's file list

        Raises:
            DiscoveryError: If local discovery fails
            TransportError, ProtocolError: First failed upload, in file order
        """
        if files is None:
            self.logger.debug("Generating file list for upload")
            files = await self.file_source.discover()

        release_url = settings.release_url
        names = [settings.logical_name(f) for f in files]

        self.logger.info(f"Beginning upload of {len(files)} file(s).")

        pool = AsyncPool(max_workers=self.concurrency)
        for relative_path, name in zip(files, names):
            await pool.submit(self._upload_one(release_url, relative_path, name))
        outcomes = await pool.wait_all()

        failures = [
            (name, outcome) for name, outcome in zip(names, outcomes)
            if isinstance(outcome, BaseException)
        ]
        for name, error in failures:
            self.logger.error(f"✗ upload of {name} failed: {error}")
        if failures:
            raise failures[0][1]

        remote_files = await self.transport.list_files(release_url)
        return UploadReport(uploaded=names, remote_files=remote_files)

    async def _upload_one(self, release_url: str, relative_path: str, name: str) -> str:
        await self.transport.upload_file(
            release_url,
            self.file_source.resolve(relative_path),
            name
        )
        self.logger.debug(f"✔ uploaded {name}")
        return name
