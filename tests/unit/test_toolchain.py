"""Tests for Flutter toolchain inspection."""

import subprocess
from unittest.mock import patch

import pytest

from sdksync.errors import ToolchainQueryError
from sdksync.toolchain import FlutterToolchain


def completed(stdout: str | bytes = b"", returncode: int = 0) -> subprocess.CompletedProcess:
    if isinstance(stdout, str):
        stdout = stdout.encode("utf-8")
    return subprocess.CompletedProcess(args=["flutter"], returncode=returncode, stdout=stdout)


class TestIsInstalled:
    """Test the plain installation check."""

    def test_installed(self):
        """Should report installed when flutter --version succeeds."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed()

            assert toolchain.is_installed() is True
            args, kwargs = mock_run.call_args
            assert args[0] == ["flutter", "--version"]
            assert kwargs["stdout"] == subprocess.DEVNULL

    def test_binary_missing(self):
        """Should report not installed when the binary cannot be launched."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("flutter")

            assert toolchain.is_installed() is False

    def test_non_zero_exit(self):
        """Should report not installed on a failing exit status."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(1, ["flutter", "--version"])

            assert toolchain.is_installed() is False

    def test_custom_executable(self):
        """Should run the configured executable."""
        toolchain = FlutterToolchain(executable="/opt/flutter/bin/flutter")

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed()
            toolchain.is_installed()

            assert mock_run.call_args[0][0][0] == "/opt/flutter/bin/flutter"


class TestInstalledSdkVersion:
    """Test reading the bundled Dart SDK version."""

    def test_returns_dart_sdk_version(self, flutter_machine_output):
        """Should return dartSdkVersion from the machine-readable report."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed(flutter_machine_output)

            assert toolchain.get_installed_sdk_version() == "3.5.2"
            assert mock_run.call_args[0][0] == ["flutter", "--version", "--machine"]

    def test_other_fields_ignored(self):
        """Fields other than dartSdkVersion should not be validated."""
        toolchain = FlutterToolchain()
        report = '{"dartSdkVersion": "3.5.2", "frameworkVersion": 3, "channel": null}'

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed(report)

            assert toolchain.get_installed_sdk_version() == "3.5.2"

    def test_non_utf8_output(self):
        """Should raise a query error when the output cannot be decoded."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed(b"\xff\xfe")

            with pytest.raises(ToolchainQueryError, match="not UTF-8"):
                toolchain.get_installed_sdk_version()

    def test_command_fails(self):
        """Should raise when the command cannot be run."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("flutter")

            with pytest.raises(ToolchainQueryError):
                toolchain.get_installed_sdk_version()

    def test_non_zero_exit(self):
        """Should raise when the command exits with an error."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(
                1, ["flutter", "--version", "--machine"]
            )

            with pytest.raises(ToolchainQueryError, match="status 1"):
                toolchain.get_installed_sdk_version()

    def test_malformed_json(self):
        """Should raise on output that is not JSON."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed("Flutter 3.24.3 • channel stable")

            with pytest.raises(ToolchainQueryError, match="Invalid JSON"):
                toolchain.get_installed_sdk_version()

    def test_missing_field(self):
        """Should raise when dartSdkVersion is absent."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed('{"frameworkVersion": "3.24.3"}')

            with pytest.raises(ToolchainQueryError, match="dartSdkVersion"):
                toolchain.get_installed_sdk_version()

    def test_not_an_object(self):
        """Should raise when the JSON is not an object."""
        toolchain = FlutterToolchain()

        with patch("sdksync.toolchain.subprocess.run") as mock_run:
            mock_run.return_value = completed('["3.5.2"]')

            with pytest.raises(ToolchainQueryError):
                toolchain.get_installed_sdk_version()
