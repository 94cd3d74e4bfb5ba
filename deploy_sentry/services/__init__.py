# deploy_sentry/services/__init__.py
"""Business logic services for deploy-sentry"""

from .config_service import ConfigService
from .upload_service import UploadService
from .release_service import ReleaseReconciler

__all__ = [
    "ConfigService",
    "UploadService",
    "ReleaseReconciler",
]
