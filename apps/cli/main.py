"""CLI application for sdksync."""

import asyncio
import json

import typer
from rich.console import Console

from sdksync.config import SyncConfig, clean_input, input_env_name, parse_flag
from sdksync.errors import FATAL_ERRORS, ManifestError, ManifestWriteError
from sdksync.manifest import PubspecFile
from sdksync.models import SyncResult
from sdksync.reporting import Reporter
from sdksync.sync import SdkSynchronizer
from sdksync.versions import classify_constraint

console = Console(highlight=False)

app = typer.Typer(
    name="sdksync",
    help="sdksync - Keep the Dart SDK constraint in pubspec.yaml in sync with Flutter",
    add_completion=False,
)


def fatal_message(error: Exception) -> str:
    """User-facing message for errors that end the run with status 1."""
    if isinstance(error, ManifestWriteError):
        return (
            "Failed to update dependency in pubspec.yaml. "
            "Please ensure the file is writable and the path is correct."
        )
    if isinstance(error, ManifestError):
        return (
            "Failed to read or parse pubspec.yaml. Please ensure the path is correct "
            "and contains a valid Dart SDK version constraint."
        )
    return "Failed to get Flutter Dart SDK version."


def format_json_result(result: SyncResult) -> str:
    """Format a sync result as JSON."""
    return json.dumps(
        {
            "status": result.status.value,
            "installed_version": result.installed_version,
            "manifest_version": result.manifest_version,
            "semver_delta": result.semver_delta,
            "committed": result.committed,
            "message": result.message,
        },
        indent=2,
    )


def _input_option(name: str, default: str, help_text: str):
    return typer.Option(
        default, f"--{name.replace('_', '-')}", envvar=input_env_name(name), help=help_text
    )


@app.command()
def sync(
    pubspec_path: str = typer.Argument(
        ..., envvar=input_env_name("pubspec_path"), help="Path to pubspec.yaml"
    ),
    fail_if_flutter_not_installed: str = _input_option(
        "fail_if_flutter_not_installed", "false", "Fail when Flutter is missing ('true' to enable)"
    ),
    commit_changes: str = _input_option(
        "commit_changes", "false", "Commit the updated pubspec.yaml ('true' to enable)"
    ),
    commit_message: str = _input_option("commit_message", "", "Commit message"),
    gh_app_id: str = _input_option("gh_app_id", "", "GitHub App ID"),
    gh_installation_id: str = _input_option("gh_installation_id", "", "GitHub App installation ID"),
    gh_private_key: str = _input_option("gh_private_key", "", "GitHub App private key (PEM)"),
    flutter: str = typer.Option("flutter", "--flutter", help="Flutter executable"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without applying"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Update environment.sdk in pubspec.yaml to Flutter's Dart SDK version."""
    reporter = Reporter(console=console, verbose=verbose)
    pubspec_path = clean_input(pubspec_path)
    if not pubspec_path:
        reporter.error("Input required and not supplied: pubspec_path")
        raise typer.Exit(1)

    config = SyncConfig(
        pubspec_path=pubspec_path,
        fail_if_flutter_not_installed=parse_flag(fail_if_flutter_not_installed),
        commit_changes=parse_flag(commit_changes),
        commit_message=clean_input(commit_message),
        gh_app_id=clean_input(gh_app_id),
        gh_installation_id=clean_input(gh_installation_id),
        gh_private_key=clean_input(gh_private_key),
        flutter_executable=clean_input(flutter) or "flutter",
        dry_run=dry_run,
    )
    synchronizer = SdkSynchronizer(config, reporter=reporter)

    try:
        result = asyncio.run(synchronizer.run())
    except FATAL_ERRORS as e:
        reporter.debug(str(e))
        reporter.error(fatal_message(e))
        raise typer.Exit(1)

    if format_type == "json":
        console.print(format_json_result(result), markup=False, soft_wrap=True)

    raise typer.Exit(reporter.exit_code)


@app.command("set-dependency")
def set_dependency(
    pubspec_path: str = typer.Argument(help="Path to pubspec.yaml"),
    name: str = typer.Argument(help="Dependency name"),
    version: str = typer.Argument(help="New version constraint"),
    section: str = typer.Option("dependencies", "--section", help="Top-level section to update"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Set a dependency version in pubspec.yaml."""
    reporter = Reporter(console=console, verbose=verbose)
    try:
        PubspecFile(pubspec_path).set_field(section, name, version)
    except ManifestError as e:
        reporter.debug(f"Failed to update dependency in pubspec.yaml: {e}")
        reporter.error(fatal_message(e))
        raise typer.Exit(1)

    reporter.info(f"Updated {name} {section} version in pubspec.yaml to {version}")


@app.command()
def show(
    pubspec_path: str = typer.Argument(help="Path to pubspec.yaml"),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Print the Dart SDK version recorded in pubspec.yaml."""
    reporter = Reporter(console=console, verbose=verbose)
    pubspec = PubspecFile(pubspec_path)
    try:
        constraint = pubspec.read_sdk_constraint()
        version = pubspec.sdk_version(constraint)
        flutter_constraint = pubspec.read_flutter_constraint()
    except ManifestError as e:
        reporter.debug(str(e))
        reporter.error(fatal_message(e))
        raise typer.Exit(1)

    if format_type == "json":
        console.print(
            json.dumps(
                {
                    "sdk_version": version,
                    "sdk_constraint": constraint,
                    "constraint_type": classify_constraint(constraint),
                    "flutter_constraint": flutter_constraint,
                },
                indent=2,
            ),
            markup=False,
            soft_wrap=True,
        )
    else:
        console.print(version, markup=False)


if __name__ == "__main__":
    app()
