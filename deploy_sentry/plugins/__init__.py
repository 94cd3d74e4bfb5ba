"""Deploy lifecycle plugins"""

from .base import (
    HookPoint,
    Plugin,
    PluginContext,
    PluginInfo,
    PluginManager,
    PluginPriority,
)
from .sentry import SentryPlugin

__all__ = [
    "HookPoint",
    "Plugin",
    "PluginContext",
    "PluginInfo",
    "PluginManager",
    "PluginPriority",
    "SentryPlugin",
]
