"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

from locators.lib.settings import LocatorSettings

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

AWS_ENV_VARS = (
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "AWS_CONFIG_FILE",
    "AWS_SHARED_CREDENTIALS_FILE",
)


@pytest.fixture(autouse=True)
def isolated_aws_env(monkeypatch, tmp_path):
    """Keep the developer's AWS environment and config files out of every test."""
    for name in AWS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-aws-config"))
    monkeypatch.setenv(
        "AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "missing-aws-credentials")
    )


@pytest.fixture
def settings():
    """Settings that never read AWS config files and fall back to us-east-1."""
    return LocatorSettings(use_aws_config=False)


@pytest.fixture
def aws_config_file(tmp_path, monkeypatch):
    """Write a shared AWS config file and point botocore at it."""
    config = tmp_path / "aws-config"
    config.write_text(
        "[default]\n"
        "region = eu-north-1\n"
        "\n"
        "[profile analytics]\n"
        "region = ap-southeast-2\n"
        "\n"
        "[profile noregion]\n"
        "output = json\n"
    )
    monkeypatch.setenv("AWS_CONFIG_FILE", str(config))
    return config
