# deploy_sentry/plugins/base.py
"""Deploy lifecycle hooks and the plugin manager running them"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional

from ..api.exceptions import DeploySentryError


class PluginPriority(Enum):
    """Order of plugins sharing a hook, lower runs first"""
    FIRST = 0
    NORMAL = 50
    LAST = 100


class HookPoint(Enum):
    """Stages of a deploy a plugin can take part in"""
    DEPLOY_PREPARE = "deploy.prepare"
    DEPLOY_UPLOAD = "deploy.upload"
    DEPLOY_POST = "deploy.post"

    @property
    def handler_name(self) -> str:
        """Name of the plugin method handling this stage"""
        return "on_" + self.value.replace(".", "_")


@dataclass
class PluginContext:
    """State shared by the plugins of one hook run"""
    hook_point: HookPoint
    operation: str
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    exceptions: List[Exception] = field(default_factory=list)

    def add_error(self, message: str, exception: Optional[Exception] = None) -> None:
        """Record a failure, keeping the exception for re-raising"""
        self.errors.append(message)
        if exception is not None:
            self.exceptions.append(exception)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def raise_for_errors(self) -> None:
        """Re-raise the first recorded exception

        Errors recorded without an exception are joined into a
        DeploySentryError.
        """
        if self.exceptions:
            raise self.exceptions[0]
        if self.errors:
            raise DeploySentryError("; ".join(self.errors))


@dataclass
class PluginInfo:
    """Plugin metadata"""
    name: str
    version: str
    description: str
    priority: PluginPriority = PluginPriority.NORMAL
    hook_points: List[HookPoint] = field(default_factory=list)
    enabled: bool = True


class Plugin(ABC):
    """Base class of deploy plugins

    Subclasses implement ``on_deploy_prepare``, ``on_deploy_upload`` or
    ``on_deploy_post`` for the stages listed in their info.
    """

    def __init__(self, config: Any = None):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def get_info(self) -> PluginInfo:
        pass

    async def handle_hook(self, context: PluginContext) -> PluginContext:
        """Dispatch the context to the handler of its stage"""
        handler = getattr(self, context.hook_point.handler_name, None)
        if handler is None:
            return context
        return await handler(context)


class PluginManager:
    """Keeps plugins per stage and runs them in priority order"""

    def __init__(self):
        self._plugins: Dict[str, Plugin] = {}
        self._by_hook: Dict[HookPoint, List[Plugin]] = {hp: [] for hp in HookPoint}
        self.logger = logging.getLogger("PluginManager")

    def register(self, plugin: Plugin) -> None:
        """
        Register a plugin for the stages it declares

        A plugin with the same name is replaced.
        """
        info = plugin.get_info()
        if info.name in self._plugins:
            self.logger.warning(f"Replacing plugin {info.name}")
            self.unregister(info.name)

        self._plugins[info.name] = plugin
        for hook_point in info.hook_points:
            plugins = self._by_hook[hook_point]
            plugins.append(plugin)
            plugins.sort(key=lambda p: p.get_info().priority.value)

        self.logger.debug(f"Registered plugin {info.name} {info.version}")

    def unregister(self, name: str) -> None:
        plugin = self._plugins.pop(name, None)
        for plugins in self._by_hook.values():
            if plugin in plugins:
                plugins.remove(plugin)

    def get_plugin(self, name: str) -> Optional[Plugin]:
        return self._plugins.get(name)

    async def execute_hook(self,
                           hook_point: HookPoint,
                           context: PluginContext) -> PluginContext:
        """
        Run every enabled plugin registered for a stage

        Package errors raised by a plugin are recorded on the context and
        end the stage; later plugins do not run.

        Args:
            hook_point: Stage to run
            context: Context handed from plugin to plugin

        Returns:
            The context after the last plugin that ran
        """
        for plugin in self._by_hook[hook_point]:
            info = plugin.get_info()
            if not info.enabled:
                continue

            self.logger.debug(f"{hook_point.value}: {info.name}")
            try:
                context = await plugin.handle_hook(context)
            except DeploySentryError as e:
                self.logger.error(f"{info.name} failed in {hook_point.value}: {e}")
                context.add_error(f"{info.name}: {e}", exception=e)

            if context.failed:
                break

        return context
