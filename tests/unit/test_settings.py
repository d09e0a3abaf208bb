"""Tests for locators/lib/settings.py - region and profile defaults."""

from __future__ import annotations

import logging

import pytest

from locators.lib.errors import SettingsError
from locators.lib.settings import (
    LocatorSettings,
    expand_env_vars,
    get_config_value,
    load_settings,
)
from locators.lib.uri import Locator


class TestExpandEnvVars:
    """Tests for expand_env_vars()."""

    def test_braced_and_bare(self, monkeypatch):
        monkeypatch.setenv("DEPLOY_REGION", "eu-west-1")
        assert expand_env_vars("${DEPLOY_REGION}") == "eu-west-1"
        assert expand_env_vars("$DEPLOY_REGION-x") == "eu-west-1-x"

    def test_unknown_variable_left_alone(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        assert expand_env_vars("${NOT_SET_ANYWHERE}") == "${NOT_SET_ANYWHERE}"


class TestGetConfigValue:
    """Tests for get_config_value()."""

    def test_option_value(self):
        assert get_config_value({"region": "eu-west-1"}, "region", "AWS_REGION") == "eu-west-1"

    def test_option_beats_env(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        assert get_config_value({"region": "eu-west-1"}, "region", "AWS_REGION") == "eu-west-1"

    def test_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        assert get_config_value({}, "region", "AWS_REGION") == "us-west-2"

    def test_empty_option_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        assert get_config_value({"region": ""}, "region", "AWS_REGION") == "us-west-2"

    def test_expands_option(self, monkeypatch):
        monkeypatch.setenv("DEPLOY_REGION", "sa-east-1")
        assert get_config_value({"region": "${DEPLOY_REGION}"}, "region") == "sa-east-1"

    def test_default(self):
        assert get_config_value(None, "region", "AWS_REGION", "us-east-1") == "us-east-1"

    def test_nothing_set(self):
        assert get_config_value(None, "region") is None


class TestDefaultRegion:
    """Tests for LocatorSettings.default_region()."""

    def test_fragment_first(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        settings = LocatorSettings({"region": "eu-west-1"}, use_aws_config=False)
        loc = Locator.parse("s3://b/k#aws.region=ap-east-1")
        assert settings.default_region(loc) == "ap-east-1"

    def test_host_override(self):
        settings = LocatorSettings(
            {"region": "eu-west-1", "hosts": {"MinIO.internal": {"region": "eu-central-1"}}},
            use_aws_config=False,
        )
        assert settings.default_region(Locator.parse("https://minio.internal/b/k")) == "eu-central-1"
        assert settings.default_region(Locator.parse("https://other.internal/b/k")) == "eu-west-1"

    def test_option_then_env(self, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        loc = Locator.parse("s3://b/k")
        assert LocatorSettings({"region": "eu-west-1"}, use_aws_config=False).default_region(loc) == "eu-west-1"
        assert LocatorSettings(use_aws_config=False).default_region(loc) == "us-west-2"

    def test_aws_default_region_env(self, monkeypatch):
        monkeypatch.setenv("AWS_DEFAULT_REGION", "me-south-1")
        assert LocatorSettings(use_aws_config=False).default_region(None) == "me-south-1"

    def test_fallback(self, settings):
        assert settings.default_region(Locator.parse("s3://b/k")) == "us-east-1"

    def test_fallback_disabled(self):
        settings = LocatorSettings(fallback_region=None, use_aws_config=False)
        assert settings.default_region(Locator.parse("s3://b/k")) is None

    def test_aws_config_default_profile(self, aws_config_file):
        settings = LocatorSettings()
        assert settings.default_region(Locator.parse("s3://b/k")) == "eu-north-1"

    def test_aws_config_named_profile(self, aws_config_file):
        settings = LocatorSettings({"profile": "analytics"})
        assert settings.default_region(Locator.parse("s3://b/k")) == "ap-southeast-2"

    def test_aws_config_profile_without_region(self, aws_config_file):
        settings = LocatorSettings({"profile": "noregion"})
        assert settings.default_region(Locator.parse("s3://b/k")) == "us-east-1"

    def test_aws_config_missing_profile_warns(self, aws_config_file, caplog):
        settings = LocatorSettings({"profile": "missing"})
        with caplog.at_level(logging.WARNING, logger="locators.lib.settings"):
            region = settings.default_region(Locator.parse("s3://b/k"))
        assert region == "us-east-1"
        assert "'missing' not found" in caplog.text

    def test_aws_config_ignored_when_disabled(self, aws_config_file):
        settings = LocatorSettings(use_aws_config=False)
        assert settings.default_region(Locator.parse("s3://b/k")) == "us-east-1"


class TestActiveProfile:
    """Tests for LocatorSettings.active_profile()."""

    def test_fragment_first(self, monkeypatch):
        monkeypatch.setenv("AWS_PROFILE", "from-env")
        settings = LocatorSettings({"profile": "from-options"}, use_aws_config=False)
        assert settings.active_profile(Locator.parse("s3://b/k#aws.profile=dev")) == "dev"

    def test_host_override(self):
        settings = LocatorSettings(
            {"profile": "from-options", "hosts": {"minio.internal": {"profile": "minio"}}},
            use_aws_config=False,
        )
        assert settings.active_profile(Locator.parse("https://minio.internal/b")) == "minio"

    def test_option_then_env(self, monkeypatch):
        monkeypatch.setenv("AWS_PROFILE", "from-env")
        loc = Locator.parse("s3://b/k")
        assert LocatorSettings({"profile": "opt"}, use_aws_config=False).active_profile(loc) == "opt"
        assert LocatorSettings(use_aws_config=False).active_profile(loc) == "from-env"

    def test_none_configured(self, settings):
        assert settings.active_profile(Locator.parse("s3://b/k")) is None

    def test_default_profile_from_aws_config(self, aws_config_file):
        assert LocatorSettings().active_profile(Locator.parse("s3://b/k")) == "default"

    def test_no_aws_config_files(self):
        assert LocatorSettings().active_profile(Locator.parse("s3://b/k")) is None


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_loads_yaml(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DEPLOY_REGION", "eu-west-2")
        path = tmp_path / "locators.yaml"
        path.write_text(
            "region: ${DEPLOY_REGION}\n"
            "profile: analytics\n"
            "hosts:\n"
            "  minio.internal:\n"
            "    region: eu-central-1\n"
        )
        settings = load_settings(path, use_aws_config=False)
        assert settings.default_region(Locator.parse("s3://b/k")) == "eu-west-2"
        assert settings.default_region(Locator.parse("https://minio.internal/b")) == "eu-central-1"
        assert settings.active_profile(None) == "analytics"
        assert settings.use_aws_config is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path).options == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsError, match="not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("region: [unclosed\n")
        with pytest.raises(SettingsError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(SettingsError, match="must contain a mapping"):
            load_settings(path)

    def test_hosts_must_be_mapping(self, tmp_path):
        path = tmp_path / "hosts.yaml"
        path.write_text("hosts:\n  - minio.internal\n")
        with pytest.raises(SettingsError, match="'hosts' must be a mapping") as exc_info:
            load_settings(path)
        assert exc_info.value.field == "hosts"

    def test_host_entry_must_be_mapping(self):
        with pytest.raises(SettingsError, match="minio.internal"):
            LocatorSettings({"hosts": {"minio.internal": "eu-central-1"}})
