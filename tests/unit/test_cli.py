"""
Tests for the command-line entry point.

get_settings is patched so the real environment never matters.
"""

from unittest.mock import patch

import pytest

from lob import cli
from lob.config.settings import Settings
from lob.infrastructure.storage.client import UploadError


@pytest.fixture
def source_tree(tmp_path):
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_bytes(b"<html></html>")
    return root


def run(argv, **values):
    # Settings are built inside get_settings so validation errors surface there
    with patch.object(cli, "get_settings", side_effect=lambda: Settings(_env_file=None, **values)):
        return cli.main(argv)


REQUIRED = {
    "aws_access_key": "access key",
    "aws_secret_key": "secret key",
    "fog_directory": "some_directory",
}


class TestMain:

    def test_mock_upload_exits_zero(self, source_tree):
        assert run([str(source_tree), "--mock"], **REQUIRED) == 0

    def test_dry_run_exits_zero(self, source_tree):
        assert run([str(source_tree), "--dry-run"], **REQUIRED) == 0

    def test_missing_variable_exits_non_zero(self, source_tree, capsys):
        values = dict(REQUIRED, aws_secret_key="")

        assert run([str(source_tree), "--mock"], **values) == 1
        assert "AWS_SECRET_KEY environment variable required" in capsys.readouterr().err

    def test_missing_variable_reported_at_any_log_level(self, source_tree, capsys):
        """A quiet log level must not hide the configuration error."""
        values = dict(REQUIRED, aws_access_key="", log_level="CRITICAL")

        assert run([str(source_tree), "--mock"], **values) == 1
        assert "AWS_ACCESS_KEY environment variable required" in capsys.readouterr().err

    def test_invalid_log_level_exits_non_zero(self, source_tree, capsys):
        assert run([str(source_tree), "--mock"], **dict(REQUIRED, log_level="verbose")) == 1
        assert "LOG_LEVEL must be one of" in capsys.readouterr().err

    def test_missing_directory_exits_non_zero(self, tmp_path):
        assert run([str(tmp_path / "nope"), "--mock"], **REQUIRED) == 1

    def test_upload_error_exits_non_zero(self, source_tree):
        with patch("lob.core.uploader.Uploader.upload", side_effect=UploadError("boom")):
            assert run([str(source_tree), "--mock"], **REQUIRED) == 1

    def test_directory_argument_is_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])
