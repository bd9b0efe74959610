"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture(autouse=True)
def outside_github_actions(monkeypatch):
    """Run tests as if outside an Actions runner unless a test opts in."""
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    for name in (
        "PUBSPEC_PATH",
        "FAIL_IF_FLUTTER_NOT_INSTALLED",
        "COMMIT_CHANGES",
        "COMMIT_MESSAGE",
        "GH_APP_ID",
        "GH_INSTALLATION_ID",
        "GH_PRIVATE_KEY",
    ):
        monkeypatch.delenv(f"INPUT_{name}", raising=False)


@pytest.fixture
def sample_pubspec():
    """Sample pubspec.yaml content for testing."""
    return """name: example_app
description: An example Flutter app.
version: 1.0.0+1

environment:
  sdk: ">=3.4.0 <4.0.0"
  flutter: ">=3.22.0"

dependencies:
  flutter:
    sdk: flutter
  http: ^1.2.0

dev_dependencies:
  flutter_test:
    sdk: flutter
"""


@pytest.fixture
def pubspec_file(tmp_path, sample_pubspec):
    """Create a temporary pubspec.yaml for testing."""
    pubspec = tmp_path / "pubspec.yaml"
    pubspec.write_text(sample_pubspec)
    return pubspec


@pytest.fixture
def flutter_machine_output():
    """Output of ``flutter --version --machine``."""
    return json.dumps({
        "frameworkVersion": "3.24.3",
        "channel": "stable",
        "repositoryUrl": "https://github.com/flutter/flutter.git",
        "frameworkRevision": "48c8d940e4",
        "frameworkCommitDate": "2025-09-05 13:20:31 -0700",
        "engineRevision": "f63f65892d",
        "dartSdkVersion": "3.5.2",
        "devToolsVersion": "2.39.3",
    })
