"""Utility functions for deploy-sentry"""

from .url_utils import join_url
from .file_utils import (
    is_gzip,
    read_bytes,
    write_bytes,
    gunzipped,
)
from .async_utils import (
    run_async,
    sync_to_async,
    AsyncPool,
    map_bounded,
)

__all__ = [
    "join_url",
    "is_gzip",
    "read_bytes",
    "write_bytes",
    "gunzipped",
    "run_async",
    "sync_to_async",
    "AsyncPool",
    "map_bounded",
]
