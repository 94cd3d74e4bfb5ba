"""Tests for configuration models and loading."""

import pytest

from deploy_sentry.api.exceptions import ConfigError
from deploy_sentry.models import PluginConfig, ReleaseSettings
from deploy_sentry.services.config_service import ConfigService
from deploy_sentry.utils.url_utils import join_url

BASE = {
    "publicUrl": "https://cdn.example.com/assets",
    "sentryUrl": "https://sentry.example.com",
    "sentryOrganizationSlug": "acme",
    "sentryProjectSlug": "web",
    "sentryApiKey": "secret",
}


class TestReleaseSettings:

    def test_urls(self, settings):
        assert settings.releases_url == "https://sentry.example.com/api/0/projects/acme/web/releases/"
        assert settings.release_url == "https://sentry.example.com/api/0/projects/acme/web/releases/abcdef/"
        assert settings.files_url == settings.release_url + "files/"
        assert settings.dashboard_url == "https://sentry.example.com/acme/web/releases/abcdef/"

    def test_trailing_slash_on_base_url(self, settings):
        other = ReleaseSettings(
            url="https://sentry.example.com/",
            organization_slug="acme",
            project_slug="web",
            public_url="~/",
            release="abcdef",
        )
        assert other.release_url == settings.release_url

    def test_logical_name(self, settings):
        assert settings.logical_name("js/app.js") == "https://cdn.example.com/assets/js/app.js"

    def test_create_payload_without_commits(self, settings):
        assert settings.create_payload() == {"version": "abcdef"}

    def test_settings_are_immutable(self, settings):
        with pytest.raises(AttributeError):
            settings.release = "other"

    def test_repr_hides_credentials(self, settings):
        assert "secret" not in repr(settings)


class TestJoinUrl:

    @pytest.mark.parametrize("parts,expected", [
        (("https://a.com/", "/b/", "c"), "https://a.com/b/c"),
        (("~/", "app.js"), "~/app.js"),
        (("https://a.com", "x", "/"), "https://a.com/x/"),
        (("https://a.com", None, ""), "https://a.com"),
    ])
    def test_join(self, parts, expected):
        assert join_url(*parts) == expected


class TestPluginConfig:

    def test_defaults(self, clean_env):
        config = PluginConfig.from_dict(BASE)

        assert config.file_pattern == "**/*.{js,map}"
        assert config.enable_revision_tagging is True
        assert config.replace_files is True
        assert config.revision_key is None

    def test_snake_case_keys(self, clean_env):
        config = PluginConfig.from_dict({
            "public_url": "~/",
            "sentry_url": "https://sentry.io",
            "organization_slug": "acme",
            "project_slug": "web",
            "bearer_api_key": "token",
            "replace_files": "false",
        })

        assert config.bearer_api_key == "token"
        assert config.replace_files is False

    def test_environment_fallback(self, clean_env, monkeypatch):
        monkeypatch.setenv("SENTRY_RELEASE", "from-env")
        monkeypatch.setenv("SENTRY_AUTH_TOKEN", "token")

        config = PluginConfig.from_dict({k: v for k, v in BASE.items() if k != "sentryApiKey"})

        assert config.revision_key == "from-env"
        assert config.to_settings().bearer_api_key == "token"

    @pytest.mark.parametrize("missing", ["publicUrl", "sentryUrl", "sentryOrganizationSlug", "sentryProjectSlug"])
    def test_required_keys(self, clean_env, missing):
        data = dict(BASE)
        del data[missing]

        with pytest.raises(ConfigError) as exc_info:
            PluginConfig.from_dict(data)

        assert missing in str(exc_info.value)

    def test_credential_required(self, clean_env):
        data = dict(BASE)
        del data["sentryApiKey"]

        with pytest.raises(ConfigError):
            PluginConfig.from_dict(data)

    @pytest.mark.parametrize("pattern", ["", "/", "//"])
    def test_empty_file_pattern_rejected(self, clean_env, pattern):
        with pytest.raises(ConfigError) as exc_info:
            PluginConfig.from_dict({**BASE, "filePattern": pattern})

        assert "filePattern" in str(exc_info.value)

    def test_commits_must_be_list(self, clean_env):
        with pytest.raises(ConfigError):
            PluginConfig.from_dict({**BASE, "commits": "abcdef"})

    def test_to_settings(self, clean_env):
        config = PluginConfig.from_dict({**BASE, "revisionKey": "abcdef", "commits": [{"id": "abcdef"}]})
        settings = config.to_settings()

        assert settings.release == "abcdef"
        assert settings.commits == ({"id": "abcdef"},)
        assert settings.api_key == "secret"

    def test_to_dict_masks_credentials(self, clean_env):
        assert PluginConfig.from_dict(BASE).to_dict()["sentryApiKey"] == "***"


class TestConfigService:

    def test_loads_yaml_with_env_expansion(self, tmp_path, clean_env, monkeypatch):
        monkeypatch.setenv("MY_SENTRY_KEY", "from-env")
        path = tmp_path / ".deploy-sentry.yaml"
        path.write_text(
            "sentry:\n"
            "  publicUrl: ~/assets\n"
            "  sentryUrl: https://sentry.example.com\n"
            "  sentryOrganizationSlug: acme\n"
            "  sentryProjectSlug: web\n"
            "  sentryApiKey: $MY_SENTRY_KEY\n"
            "  replaceFiles: false\n"
        )

        config = ConfigService(path).load_config({"revisionKey": "abcdef", "distDir": None})

        assert config.api_key == "from-env"
        assert config.replace_files is False
        assert config.revision_key == "abcdef"
        assert config.dist_dir == "dist"

    def test_missing_file_uses_overrides(self, tmp_path, clean_env):
        config = ConfigService(tmp_path / "absent.yaml").load_config(BASE)

        assert config.organization_slug == "acme"

    def test_invalid_yaml(self, tmp_path, clean_env):
        path = tmp_path / "bad.yaml"
        path.write_text("sentry: [unclosed\n")

        with pytest.raises(ConfigError):
            ConfigService(path).load_raw()

    def test_non_mapping(self, tmp_path, clean_env):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            ConfigService(path).load_raw()
