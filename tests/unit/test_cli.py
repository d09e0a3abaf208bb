"""Tests for the locators command line interface."""

import json
import logging

import pytest

import locators.__main__ as cli
from locators.lib.logging import JSONFormatter


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep the CLI from replacing pytest's log handlers."""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


class TestNormalize:
    """Tests for the default normalize mode."""

    def test_prints_canonical_url_and_info(self, capsys):
        code = cli.main(["s3://my-bucket/data/out.nc", "--no-aws-config"])
        out = capsys.readouterr().out.splitlines()

        assert code == 0
        assert out[0] == "https://s3.us-east-1.amazonaws.com/my-bucket/data/out.nc"
        assert out[1].strip() == (
            "host=s3.us-east-1.amazonaws.com region=us-east-1 bucket=my-bucket "
            "rootkey=data/out.nc profile=no"
        )

    def test_json_output(self, capsys):
        code = cli.main(
            ["https://b.s3.eu-west-1.amazonaws.com/k", "--json", "--no-aws-config"]
        )
        result = json.loads(capsys.readouterr().out)

        assert code == 0
        assert result["canonical"] == "https://s3.eu-west-1.amazonaws.com/b/k"
        assert result["region"] == "eu-west-1"
        assert result["service"] == "s3"

    def test_region_and_profile_overrides(self, capsys):
        code = cli.main(
            ["s3://b/k", "--region", "ap-south-1", "--profile", "dev", "--json", "--no-aws-config"]
        )
        result = json.loads(capsys.readouterr().out)
        assert code == 0
        assert result["region"] == "ap-south-1"
        assert result["profile"] == "dev"

    def test_settings_file(self, tmp_path, capsys):
        path = tmp_path / "locators.yaml"
        path.write_text("region: eu-central-1\n")
        code = cli.main(["s3://b/k", "--settings", str(path), "--json", "--no-aws-config"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["region"] == "eu-central-1"

    def test_env_file(self, tmp_path, capsys, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("AWS_REGION=us-west-1\n")
        # register AWS_REGION so the value loaded from the file is undone afterwards
        monkeypatch.setenv("AWS_REGION", "placeholder")
        monkeypatch.delenv("AWS_REGION")
        code = cli.main(["s3://b/k", "--env-file", str(env_file), "--json", "--no-aws-config"])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["region"] == "us-west-1"

    def test_rejected_url(self, capsys):
        code = cli.main(["https://a.b.c.d.amazonaws.com/x", "s3://b/k", "--no-aws-config"])
        captured = capsys.readouterr()

        assert code == 1
        assert "Error: https://a.b.c.d.amazonaws.com/x" in captured.err
        assert "Suggestion:" in captured.err
        assert "https://s3.us-east-1.amazonaws.com/b/k" in captured.out

    def test_bad_settings_file(self, tmp_path, capsys):
        code = cli.main(["s3://b/k", "--settings", str(tmp_path / "missing.yaml")])
        assert code == 1
        assert "Settings file not found" in capsys.readouterr().err


class TestCheck:
    """Tests for --check mode."""

    def test_yes_and_no(self, capsys):
        code = cli.main(["--check", "s3://b/k", "https://example.com/b/k"])
        out = capsys.readouterr().out.splitlines()
        assert code == 0
        assert out == ["yes  s3://b/k", "no  https://example.com/b/k"]

    def test_json(self, capsys):
        cli.main(["--check", "--json", "https://storage.googleapis.com/b"])
        assert json.loads(capsys.readouterr().out) == {
            "url": "https://storage.googleapis.com/b",
            "storage": True,
        }


class TestUsage:
    """Argument errors exit with status 2."""

    def test_no_urls(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2


class TestJSONFormatter:
    """Tests for the JSON log formatter."""

    def test_formats_record(self):
        record = logging.LogRecord(
            "locators.lib.rebuild", logging.DEBUG, __file__, 1, "Rebuilt %s", ("s3://b/k",), None
        )
        record.error = {"error_type": "MalformedLocatorError"}
        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "DEBUG"
        assert payload["logger"] == "locators.lib.rebuild"
        assert payload["message"] == "Rebuilt s3://b/k"
        assert payload["extra"] == {"error": {"error_type": "MalformedLocatorError"}}
        assert payload["timestamp"].endswith("Z")
