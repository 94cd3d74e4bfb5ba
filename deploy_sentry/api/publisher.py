"""Publisher API for sourcemap publishing"""

from typing import Any, Dict, Optional

from ..models import PluginConfig, ReconcileResult
from ..plugins.base import HookPoint, PluginContext, PluginManager
from ..plugins.sentry import SentryPlugin, TransportFactory
from ..utils.async_utils import run_async


class Publisher:
    """Runs the Sentry deploy hooks for one build"""

    def __init__(self,
                 config: PluginConfig,
                 transport_factory: Optional[TransportFactory] = None):
        """
        Initialize publisher

        Args:
            config: Plugin configuration
            transport_factory: Builds the release transport from settings
                (Sentry HTTP transport by default)
        """
        self.config = config
        self.plugin_manager = PluginManager()
        self.plugin_manager.register(SentryPlugin(config, transport_factory))

    async def run_hook(self, hook_point: HookPoint, **data: Any) -> PluginContext:
        """
        Run one lifecycle hook

        Raises:
            DeploySentryError: If a plugin failed during the hook
        """
        context = PluginContext(
            hook_point=hook_point,
            operation=hook_point.value,
            data={"dist_dir": self.config.dist_dir, **data}
        )
        context = await self.plugin_manager.execute_hook(hook_point, context)
        context.raise_for_errors()
        return context

    async def deploy_async(self) -> ReconcileResult:
        """Run prepare, upload and post hooks in order"""
        await self.run_hook(HookPoint.DEPLOY_PREPARE)
        upload = await self.run_hook(HookPoint.DEPLOY_UPLOAD)
        result = upload.data["result"]
        await self.run_hook(HookPoint.DEPLOY_POST, result=result)
        return result

    def tag(self) -> bool:
        """
        Stamp the revision into index.html

        Returns:
            True if the placeholder was replaced
        """
        context = run_async(self.run_hook(HookPoint.DEPLOY_PREPARE))
        return bool(context.data.get("revision_tagged"))

    def upload(self) -> ReconcileResult:
        """
        Synchronize the release with the build output

        Returns:
            ReconcileResult: Reconciliation result

        Raises:
            ConfigError: If the revision is missing
            DiscoveryError: If local files cannot be listed
            TransportError: On network failure
            ProtocolError: On unexpected API responses
        """
        context = run_async(self.run_hook(HookPoint.DEPLOY_UPLOAD))
        return context.data["result"]

    def deploy(self) -> ReconcileResult:
        """Run the whole deploy lifecycle"""
        return run_async(self.deploy_async())


def publish(config: Dict[str, Any], **kwargs) -> ReconcileResult:
    """
    Convenience function to upload sourcemaps for one build

    Args:
        config: Plugin configuration mapping
        **kwargs: Passed to Publisher

    Returns:
        ReconcileResult
    """
    return Publisher(PluginConfig.from_dict(config), **kwargs).upload()
