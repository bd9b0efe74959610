"""Dart SDK constraint synchronization."""

from typing import Protocol

from .commit import GitHubAppCommitter
from .config import SyncConfig
from .errors import FATAL_ERRORS, OrchestrationError
from .manifest import PubspecFile
from .models import SyncResult, SyncStatus
from .reporting import Reporter
from .toolchain import FlutterToolchain
from .versions import classify_constraint, semver_delta


class Committer(Protocol):
    async def commit(self, path: str, content: str) -> str: ...


class SdkSynchronizer:
    """Keeps ``environment.sdk`` in pubspec.yaml in line with Flutter's Dart SDK."""

    def __init__(
        self,
        config: SyncConfig,
        reporter: Reporter | None = None,
        toolchain: FlutterToolchain | None = None,
        committer: Committer | None = None,
    ):
        self.config = config
        self.reporter = reporter or Reporter()
        self.toolchain = toolchain or FlutterToolchain(config.flutter_executable, self.reporter)
        self.committer = committer
        self.pubspec = PubspecFile(config.pubspec_path)

    async def run(self) -> SyncResult:
        """Run the synchronization once.

        Manifest and toolchain query errors propagate to the caller, which is
        expected to exit with status 1. Any other error is reported as a
        failure on the reporter.

        The toolchain is queried with blocking subprocess calls made from
        this coroutine, so the event loop is held while Flutter runs. A run
        is one sequential pass; only the GitHub API calls await.
        """
        self.reporter.debug(f"pubspec_path: {self.config.pubspec_path}")
        self.reporter.debug(
            f"fail_if_flutter_not_installed: {self.config.fail_if_flutter_not_installed}"
        )

        if not self.toolchain.is_installed():
            return self._not_installed()

        self.reporter.info("Flutter is installed. Proceeding with Dart SDK version synchronization.")

        try:
            return await self._synchronize()
        except FATAL_ERRORS:
            raise
        except Exception as e:
            self.reporter.set_failed(str(e))
            return SyncResult(status=SyncStatus.FAILED, message=str(e))

    def _not_installed(self) -> SyncResult:
        if self.config.fail_if_flutter_not_installed:
            message = (
                "Flutter is not installed or not found in PATH. Please install Flutter "
                "and ensure it is accessible from the command line."
            )
            self.reporter.set_failed(message)
            return SyncResult(status=SyncStatus.NOT_INSTALLED_FAILED, message=message)

        message = (
            "Flutter is not installed or not found in PATH. "
            "Skipping Dart SDK version synchronization."
        )
        self.reporter.warning(message)
        return SyncResult(status=SyncStatus.NOT_INSTALLED_SKIPPED, message=message)

    async def _synchronize(self) -> SyncResult:
        installed = self.toolchain.get_installed_sdk_version()
        if not installed:
            raise OrchestrationError("Flutter reported an empty Dart SDK version")
        sdk_constraint = self.pubspec.read_sdk_constraint()
        recorded = self.pubspec.sdk_version(sdk_constraint)

        if installed == recorded:
            self.reporter.info(
                f"Dart SDK version in pubspec.yaml ({recorded}) is already up to date with "
                f"Flutter's Dart SDK version ({installed}). No changes needed."
            )
            return SyncResult(
                status=SyncStatus.UP_TO_DATE,
                installed_version=installed,
                manifest_version=recorded,
            )

        delta = semver_delta(recorded, installed)
        result = SyncResult(
            status=SyncStatus.UPDATED,
            installed_version=installed,
            manifest_version=recorded,
            semver_delta=delta,
        )

        if self.config.dry_run:
            self.reporter.info(
                f"Dry run: would update Dart SDK version in pubspec.yaml "
                f"from {recorded} to {installed} ({delta})."
            )
            result.status = SyncStatus.WOULD_UPDATE
            return result

        self.reporter.info(
            f"Updating Dart SDK version in pubspec.yaml from {recorded} to {installed}."
        )
        if classify_constraint(sdk_constraint) == "range":
            self.reporter.debug(
                f"Replacing range constraint '{sdk_constraint}' with a bare version"
            )
        self.pubspec.set_field("environment", "sdk", installed)
        self.reporter.info(f"Updated sdk environment version in pubspec.yaml to {installed}")
        self.reporter.info("Dart SDK version synchronization complete.")

        await self._commit(result)
        return result

    async def _commit(self, result: SyncResult) -> None:
        if not self.config.commit_changes:
            self.reporter.info("Skipping commit as commit_changes is set to false")
            return

        if not self.config.commit_configured:
            self.reporter.warning(
                "One or more required inputs are missing regarding commit. Skipping commit."
            )
            return

        committer = self.committer or GitHubAppCommitter(
            app_id=self.config.gh_app_id,
            installation_id=self.config.gh_installation_id,
            private_key=self.config.gh_private_key,
            message=self.config.commit_message,
        )

        # The manifest stays updated on disk if the commit fails.
        try:
            content = self.pubspec.read_text()
            sha = await committer.commit(self.config.pubspec_path, content)
        except Exception as e:
            self.reporter.debug(f"Commit failed: {e!r}")
            self.reporter.set_failed(f"Failed to commit changes: {e}")
            result.status = SyncStatus.COMMIT_FAILED
            result.message = str(e)
            return

        result.committed = True
        self.reporter.info(f"Changes committed successfully ({sha}).")
