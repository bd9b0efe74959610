"""Flutter toolchain inspection."""

import json
import subprocess

from pydantic import ValidationError

from .errors import ToolchainQueryError
from .models import FlutterVersion
from .reporting import Reporter


class FlutterToolchain:
    """Queries the locally installed Flutter SDK."""

    def __init__(self, executable: str = "flutter", reporter: Reporter | None = None):
        """Initialize toolchain inspector.

        Args:
            executable: Name or path of the flutter binary
            reporter: Reporter for debug traces
        """
        self.executable = executable
        self.reporter = reporter or Reporter()

    def is_installed(self) -> bool:
        """Check whether ``flutter --version`` runs successfully."""
        try:
            subprocess.run(
                [self.executable, "--version"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            self.reporter.debug(f"Flutter check failed: {e}")
            return False
        return True

    def get_version(self) -> FlutterVersion:
        """Run ``flutter --version --machine`` and parse its report."""
        try:
            completed = subprocess.run(
                [self.executable, "--version", "--machine"],
                capture_output=True,
                check=True,
            )
        except OSError as e:
            raise ToolchainQueryError(f"Cannot run {self.executable}: {e}") from e
        except subprocess.CalledProcessError as e:
            raise ToolchainQueryError(
                f"{self.executable} --version --machine exited with status {e.returncode}"
            ) from e

        try:
            report = json.loads(completed.stdout.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ToolchainQueryError(f"Output of {self.executable} is not UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise ToolchainQueryError(f"Invalid JSON from {self.executable}: {e}") from e

        if not isinstance(report, dict):
            raise ToolchainQueryError(f"Unexpected version report from {self.executable}")

        try:
            return FlutterVersion.model_validate(report)
        except ValidationError as e:
            raise ToolchainQueryError(f"No usable dartSdkVersion in version report: {e}") from e

    def get_installed_sdk_version(self) -> str:
        """Get the Dart SDK version bundled with the installed Flutter SDK."""
        return self.get_version().dart_sdk_version
