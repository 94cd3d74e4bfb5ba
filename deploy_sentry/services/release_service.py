# deploy_sentry/services/release_service.py
"""Release reconciliation service

Brings a remote release in line with the local build output. The work is
an explicit state machine::

    START -> CHECKING_EXISTENCE -> CREATING_RELEASE -> UPLOADING
                                \\-> REUSING_RELEASE -/    |
                                         |                 v
                                         \\-----------> REPORTING -> DONE

Any unrecoverable error moves the machine to FAILED and is re-raised.
Each phase handler returns the next phase; the remote calls behind a phase
return tagged outcomes (ReleaseFound, ReleaseMissing, ReleaseCreated,
ReleaseConflict) so transitions can be tested one at a time.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional

from ..api.exceptions import DeploySentryError, MissingRevisionError
from ..constants import DEFAULT_UPLOAD_CONCURRENCY, ReconcilePhase, ReleaseAction
from ..core.file_source import FileSource
from ..models import (
    CreationOutcome,
    ExistenceOutcome,
    OperationStatus,
    ReconcileResult,
    ReleaseConflict,
    ReleaseCreated,
    ReleaseFound,
    ReleaseMissing,
    ReleaseSettings,
    RemoteFile,
)
from ..storage.base import ReleaseTransport
from ..utils.async_utils import map_bounded
from .upload_service import UploadService

PhaseHandler = Callable[[ReconcileResult], Awaitable[ReconcilePhase]]


class ReleaseReconciler:
    """Synchronizes one release with the local build output"""

    def __init__(self,
                 settings: ReleaseSettings,
                 transport: ReleaseTransport,
                 file_source: FileSource,
                 replace_files: bool = True,
                 concurrency: int = DEFAULT_UPLOAD_CONCURRENCY,
                 uploader: Optional[UploadService] = None):
        """
        Initialize reconciler

        Args:
            settings: Immutable release settings for this run
            transport: Release transport
            file_source: Source of local files
            replace_files: Replace files of an existing release; when False an
                existing release is left alone
            concurrency: Maximum number of uploads (and deletes) in flight
            uploader: Upload service (built from transport and file_source
                when omitted)
        """
        self.settings = settings
        self.transport = transport
        self.file_source = file_source
        self.replace_files = replace_files
        self.concurrency = concurrency
        self.uploader = uploader or UploadService(transport, file_source, concurrency)
        self.result: Optional[ReconcileResult] = None
        self.logger = logging.getLogger(self.__class__.__name__)

        self._handlers: Dict[ReconcilePhase, PhaseHandler] = {
            ReconcilePhase.START: self._on_start,
            ReconcilePhase.CHECKING_EXISTENCE: self._on_checking_existence,
            ReconcilePhase.CREATING_RELEASE: self._on_creating_release,
            ReconcilePhase.REUSING_RELEASE: self._on_reusing_release,
            ReconcilePhase.UPLOADING: self._on_uploading,
            ReconcilePhase.REPORTING: self._on_reporting,
        }

    @property
    def phase(self) -> ReconcilePhase:
        """Current phase of the last run"""
        return self.result.phase if self.result else ReconcilePhase.START

    async def run(self) -> ReconcileResult:
        """
        Run the reconciliation to completion

        Returns:
            ReconcileResult in phase DONE

        Raises:
            ConfigError: If the release identifier is missing (no request made)
            DiscoveryError: If local files cannot be discovered
            TransportError: On network failure
            ProtocolError: On unexpected HTTP status
        """
        result = ReconcileResult(
            status=OperationStatus.IN_PROGRESS,
            release_version=self.settings.release
        )
        self.result = result
        phase = ReconcilePhase.START

        try:
            while phase != ReconcilePhase.DONE:
                result.enter(phase)
                phase = await self._handlers[phase](result)

        except Exception as e:
            failed_in = result.phase
            result.enter(ReconcilePhase.FAILED)
            result.add_error(
                getattr(e, "error_code", None) or "DS000",
                str(e),
                phase=failed_in.value,
                release=self.settings.release,
                status=getattr(e, "status", None)
            )
            result.complete(OperationStatus.FAILED)
            self.logger.error(
                f"Release {self.settings.release} failed during {failed_in.value}: {e}"
            )
            raise

        result.enter(ReconcilePhase.DONE)
        result.message = f"Release {self.settings.release} {result.action.value}"
        result.complete(OperationStatus.SUCCESS)
        return result

    # Remote steps

    async def check_existence(self) -> ExistenceOutcome:
        """Ask the server whether the release exists"""
        release = await self.transport.release_exists(self.settings.release_url)
        if release is None:
            return ReleaseMissing(release_url=self.settings.release_url)
        return ReleaseFound(release=release)

    async def create(self) -> CreationOutcome:
        """Create the release"""
        return await self.transport.create_release(self.settings)

    async def clear_files(self, files: List[RemoteFile]) -> List[str]:
        """
        Delete the given remote files

        Single failures are logged and tolerated, uploads re-register the
        same names anyway. All deletes have settled when this returns.

        Returns:
            Names of the files that were deleted
        """
        release_url = self.settings.release_url

        async def delete(remote_file: RemoteFile) -> str:
            self.logger.debug(f"Deleting {remote_file.name}")
            await self.transport.delete_file(release_url, remote_file.id)
            return remote_file.name

        outcomes = await map_bounded(delete, files, self.concurrency)

        deleted = []
        for remote_file, outcome in zip(files, outcomes):
            if isinstance(outcome, DeploySentryError):
                self.logger.warning(f"Could not delete {remote_file.name}: {outcome}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                deleted.append(outcome)
        return deleted

    # Phase handlers

    async def _on_start(self, result: ReconcileResult) -> ReconcilePhase:
        if not self.settings.release:
            raise MissingRevisionError()
        return ReconcilePhase.CHECKING_EXISTENCE

    async def _on_checking_existence(self, result: ReconcileResult) -> ReconcilePhase:
        outcome = await self.check_existence()

        if isinstance(outcome, ReleaseFound):
            self.logger.info(f"Release {outcome.release.version} exists.")
            return ReconcilePhase.REUSING_RELEASE

        self.logger.info("Release does not exist. Creating.")
        return ReconcilePhase.CREATING_RELEASE

    async def _on_creating_release(self, result: ReconcileResult) -> ReconcilePhase:
        outcome = await self.create()

        if isinstance(outcome, ReleaseConflict):
            result.action = ReleaseAction.CONFLICT
            result.add_warning(
                f"Release {outcome.version} creation answered {outcome.status}, "
                "assuming it is handled elsewhere"
            )
            self.logger.warning(
                f"Creating release {outcome.version} answered {outcome.status}, continuing with upload"
            )
        elif isinstance(outcome, ReleaseCreated):
            result.action = ReleaseAction.CREATED
            self.logger.info(f"Created release {outcome.release.version}.")

        return ReconcilePhase.UPLOADING

    async def _on_reusing_release(self, result: ReconcileResult) -> ReconcilePhase:
        result.action = ReleaseAction.REUSED

        self.logger.debug("Retrieving release files.")
        existing = await self.transport.list_files(self.settings.release_url)
        result.remote_files = existing

        if not self.replace_files:
            self.logger.info("Leaving files alone.")
            return ReconcilePhase.REPORTING

        self.logger.info("Replacing files.")
        result.deleted_files = await self.clear_files(existing)
        return ReconcilePhase.UPLOADING

    async def _on_uploading(self, result: ReconcileResult) -> ReconcilePhase:
        report = await self.uploader.upload(self.settings)
        result.uploaded_files = report.uploaded
        result.remote_files = report.remote_files
        return ReconcilePhase.REPORTING

    async def _on_reporting(self, result: ReconcileResult) -> ReconcilePhase:
        self.logger.info("Files known to sentry for this release")
        for remote_file in result.remote_files:
            self.logger.info(f"✔  {remote_file.name}")
        return ReconcilePhase.DONE
