"""Tests for the deploy hooks and the Publisher API."""

import gzip
import os

import pytest

from deploy_sentry import Publisher
from deploy_sentry.api.exceptions import DiscoveryError, ProtocolError, RevisionTagError
from deploy_sentry.constants import ReconcilePhase, REVISION_META_PLACEHOLDER
from deploy_sentry.models import PluginConfig
from deploy_sentry.plugins.base import HookPoint

from conftest import FakeTransport

INDEX = f"<html><head>{REVISION_META_PLACEHOLDER}</head><body></body></html>"


@pytest.fixture
def dist(tmp_path):
    root = tmp_path / "dist"
    root.mkdir()
    (root / "index.html").write_text(INDEX)
    (root / "app.js").write_text("console.log('app');\n")
    (root / "app.js.map").write_text('{"version":3}')
    return root


def make_config(dist, **overrides):
    data = {
        "publicUrl": "~/assets",
        "sentryUrl": "https://sentry.example.com",
        "sentryOrganizationSlug": "acme",
        "sentryProjectSlug": "web",
        "sentryApiKey": "secret",
        "revisionKey": "abcdef",
        "distDir": str(dist),
    }
    data.update(overrides)
    return PluginConfig.from_dict(data, environ={})


class TestRevisionTagging:

    def test_tag_replaces_placeholder(self, dist):
        assert Publisher(make_config(dist)).tag() is True

        content = (dist / "index.html").read_text()
        assert '<meta name="sentry:revision" content="abcdef">' in content
        assert REVISION_META_PLACEHOLDER not in content

    def test_tag_without_placeholder(self, dist):
        (dist / "index.html").write_text("<html></html>")

        assert Publisher(make_config(dist)).tag() is False
        assert (dist / "index.html").read_text() == "<html></html>"

    @pytest.mark.asyncio
    async def test_missing_revision_is_a_warning(self, dist):
        publisher = Publisher(make_config(dist, revisionKey=None))

        context = await publisher.run_hook(HookPoint.DEPLOY_PREPARE)

        assert "revision key" in context.warnings[0]
        assert (dist / "index.html").read_text() == INDEX

    def test_tagging_disabled(self, dist):
        config = make_config(dist, enableRevisionTagging=False)

        assert Publisher(config).tag() is False
        assert (dist / "index.html").read_text() == INDEX

    def test_missing_index_fails(self, dist):
        (dist / "index.html").unlink()

        with pytest.raises(RevisionTagError):
            Publisher(make_config(dist)).tag()


class TestPublisherUpload:

    def test_deploy_runs_every_hook(self, dist):
        transport = FakeTransport()
        publisher = Publisher(make_config(dist), transport_factory=lambda s: transport)

        result = publisher.deploy()

        assert result.phase == ReconcilePhase.DONE
        assert sorted(result.remote_file_names) == ["~/assets/app.js", "~/assets/app.js.map"]
        assert "content=\"abcdef\"" in (dist / "index.html").read_text()

    @pytest.mark.asyncio
    async def test_post_hook_reports_release(self, dist):
        publisher = Publisher(make_config(dist))

        context = await publisher.run_hook(HookPoint.DEPLOY_POST)

        assert context.data["message"] == (
            "Uploaded sourcemaps to sentry release: "
            "https://sentry.example.com/acme/web/releases/abcdef/"
        )

    def test_upload_failure_propagates(self, dist):
        transport = FakeTransport(create_status=500)
        publisher = Publisher(make_config(dist), transport_factory=lambda s: transport)

        with pytest.raises(ProtocolError) as exc_info:
            publisher.upload()

        assert exc_info.value.status == 500

    def test_file_pattern_limits_upload(self, dist):
        transport = FakeTransport()
        config = make_config(dist, filePattern="**/*.map")

        Publisher(config, transport_factory=lambda s: transport).upload()

        assert [c[1] for c in transport.calls_of("upload")] == ["~/assets/app.js.map"]


class TestGzippedAssets:

    def test_uploads_plain_content_and_restores(self, dist):
        plain = b"console.log('zipped');\n"
        compressed = gzip.compress(plain)
        (dist / "app.js").write_bytes(compressed)
        transport = FakeTransport(read_content=True)

        Publisher(make_config(dist), transport_factory=lambda s: transport).upload()

        assert transport.contents["~/assets/app.js"] == plain
        assert (dist / "app.js").read_bytes() == compressed

    def test_restores_after_failure(self, dist):
        compressed = gzip.compress(b"console.log('zipped');\n")
        (dist / "app.js").write_bytes(compressed)
        transport = FakeTransport(fail_uploads=["~/assets/app.js"])

        with pytest.raises(ProtocolError):
            Publisher(make_config(dist), transport_factory=lambda s: transport).upload()

        assert (dist / "app.js").read_bytes() == compressed

    def test_plain_files_untouched(self, dist):
        transport = FakeTransport(read_content=True)

        Publisher(make_config(dist), transport_factory=lambda s: transport).upload()

        assert transport.contents["~/assets/app.js"] == b"console.log('app');\n"

    def test_dangling_symlink_is_discovery_error(self, dist):
        compressed = gzip.compress(b"console.log('zipped');\n")
        (dist / "app.js").write_bytes(compressed)
        os.symlink(dist / "missing.js", dist / "broken.js")
        transport = FakeTransport()

        with pytest.raises(DiscoveryError) as exc_info:
            Publisher(make_config(dist), transport_factory=lambda s: transport).upload()

        assert exc_info.value.path == str(dist / "broken.js")
        assert (dist / "app.js").read_bytes() == compressed
        assert transport.calls == []

    def test_corrupt_gzip_is_discovery_error(self, dist):
        compressed = gzip.compress(b"console.log('zipped');\n")
        corrupt = b"\x1f\x8bnot really gzip"
        (dist / "app.js").write_bytes(compressed)
        (dist / "vendor.js").write_bytes(corrupt)
        transport = FakeTransport()

        with pytest.raises(DiscoveryError) as exc_info:
            Publisher(make_config(dist), transport_factory=lambda s: transport).upload()

        assert exc_info.value.path == str(dist / "vendor.js")
        assert (dist / "app.js").read_bytes() == compressed
        assert (dist / "vendor.js").read_bytes() == corrupt
        assert transport.calls == []
