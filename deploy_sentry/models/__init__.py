"""Data models for deploy-sentry"""

from .config import ReleaseSettings, PluginConfig
from .release import (
    RemoteFile,
    Release,
    ReleaseFound,
    ReleaseMissing,
    ReleaseCreated,
    ReleaseConflict,
    ExistenceOutcome,
    CreationOutcome,
)
from .result import (
    OperationStatus,
    ErrorDetail,
    Result,
    UploadReport,
    ReconcileResult,
)

__all__ = [
    "ReleaseSettings",
    "PluginConfig",
    "RemoteFile",
    "Release",
    "ReleaseFound",
    "ReleaseMissing",
    "ReleaseCreated",
    "ReleaseConflict",
    "ExistenceOutcome",
    "CreationOutcome",
    "OperationStatus",
    "ErrorDetail",
    "Result",
    "UploadReport",
    "ReconcileResult",
]
