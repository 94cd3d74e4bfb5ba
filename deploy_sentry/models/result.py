"""Run result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Any

from ..constants import ReconcilePhase, ReleaseAction
from .release import RemoteFile


def _now() -> datetime:
    return datetime.now(timezone.utc)


class OperationStatus(Enum):
    """Overall state of a run"""
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ErrorDetail:
    """A failure with the error code and where it happened"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class Result:
    """Status, diagnostics and timing shared by run results"""

    status: OperationStatus
    message: str = ""
    errors: List[ErrorDetail] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    start_time: datetime = field(default_factory=_now)
    end_time: Optional[datetime] = None

    @property
    def duration(self) -> Optional[float]:
        """Seconds from start to completion, None while running"""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    def add_error(self, code: str, message: str, **context) -> None:
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def complete(self, status: OperationStatus) -> None:
        """Stop the clock and set the final status"""
        self.end_time = _now()
        self.status = status


@dataclass
class UploadReport:
    """Outcome of the upload phase"""

    uploaded: List[str] = field(default_factory=list)
    remote_files: List[RemoteFile] = field(default_factory=list)


@dataclass
class ReconcileResult(Result):
    """Result of a release reconciliation"""

    release_version: Optional[str] = None
    action: Optional[ReleaseAction] = None
    phase: ReconcilePhase = ReconcilePhase.START
    phases: List[ReconcilePhase] = field(default_factory=list)
    deleted_files: List[str] = field(default_factory=list)
    uploaded_files: List[str] = field(default_factory=list)
    remote_files: List[RemoteFile] = field(default_factory=list)

    @property
    def created(self) -> bool:
        """Whether this run created the release"""
        return self.action == ReleaseAction.CREATED

    @property
    def remote_file_names(self) -> List[str]:
        """Names of the files the server knows for this release"""
        return [f.name for f in self.remote_files]

    def enter(self, phase: ReconcilePhase) -> None:
        """Record a state transition"""
        self.phase = phase
        self.phases.append(phase)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "release_version": self.release_version,
            "action": self.action.value if self.action else None,
            "phase": self.phase.value,
            "deleted_files": self.deleted_files,
            "uploaded_files": self.uploaded_files,
            "remote_files": self.remote_file_names,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "duration": self.duration
        }
