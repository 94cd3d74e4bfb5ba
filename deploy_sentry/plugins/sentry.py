"""Sentry deploy plugin

Hooks the release reconciler into the deployment lifecycle:

- ``deploy.prepare`` stamps the revision into ``index.html``
- ``deploy.upload`` synchronizes the Sentry release with the build output
- ``deploy.post`` reports where the sourcemaps went
"""

from typing import Callable, Optional

from .base import Plugin, PluginInfo, PluginContext, HookPoint, PluginPriority
from ..__version__ import __version__
from ..api.exceptions import MissingRevisionError
from ..constants import PLUGIN_NAME
from ..core.file_source import GlobFileSource
from ..core.revision_tagger import RevisionTagger
from ..models import PluginConfig, ReleaseSettings
from ..services.release_service import ReleaseReconciler
from ..storage.base import ReleaseTransport
from ..storage.sentry import SentryReleaseTransport
from ..utils.file_utils import gunzipped

TransportFactory = Callable[[ReleaseSettings], ReleaseTransport]


class SentryPlugin(Plugin):
    """Publishes sourcemaps to a Sentry release"""

    def __init__(self,
                 config: PluginConfig,
                 transport_factory: Optional[TransportFactory] = None):
        super().__init__(config)
        self.transport_factory = transport_factory or SentryReleaseTransport.from_settings

    def get_info(self) -> PluginInfo:
        return PluginInfo(
            name=PLUGIN_NAME,
            version=__version__,
            description="Upload sourcemaps to Sentry releases",
            priority=PluginPriority.NORMAL,
            hook_points=[
                HookPoint.DEPLOY_PREPARE,
                HookPoint.DEPLOY_UPLOAD,
                HookPoint.DEPLOY_POST,
            ]
        )

    async def on_deploy_prepare(self, context: PluginContext) -> PluginContext:
        if not self.config.enable_revision_tagging:
            return context

        try:
            tagged = RevisionTagger(self.config.dist_path).tag(self.config.revision_key)
        except MissingRevisionError as e:
            context.add_warning(str(e))
            self.logger.warning(str(e))
            return context

        context.data["revision_tagged"] = tagged
        return context

    async def on_deploy_upload(self, context: PluginContext) -> PluginContext:
        settings = self.config.to_settings()
        source = GlobFileSource(self.config.dist_path, self.config.file_pattern)

        files = await source.discover()
        async with gunzipped(source.resolve(f) for f in files):
            async with self.transport_factory(settings) as transport:
                reconciler = ReleaseReconciler(
                    settings,
                    transport,
                    source,
                    replace_files=self.config.replace_files
                )
                context.data["result"] = await reconciler.run()

        return context

    async def on_deploy_post(self, context: PluginContext) -> PluginContext:
        message = (
            "Uploaded sourcemaps to sentry release: "
            f"{self.config.to_settings().dashboard_url}"
        )
        self.logger.info(message)
        context.data["message"] = message
        return context
