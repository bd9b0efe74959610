"""pubspec.yaml reading and updating."""

from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidSectionError, ManifestReadError, ManifestWriteError
from .versions import extract_version


class PubspecFile:
    """Accessor for a pubspec.yaml manifest on disk.

    The manifest is loaded fresh on every call. Updates rewrite the whole
    file, so comments and formatting not kept by PyYAML are lost.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read_text(self) -> str:
        """Return the raw manifest content."""
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestReadError(f"Cannot read {self.path}: {e}", str(self.path)) from e

    def load(self) -> Any:
        """Load and parse the manifest document."""
        content = self.read_text()
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ManifestReadError(f"Invalid YAML in {self.path}: {e}", str(self.path)) from e

    def read_sdk_constraint(self) -> str:
        """Read the raw ``environment.sdk`` constraint, e.g. ">=2.12.0 <3.0.0"."""
        sdk_constraint = _environment(self.load()).get("sdk")
        if not isinstance(sdk_constraint, str):
            raise ManifestReadError(
                "Dart SDK version constraint not found in pubspec.yaml", str(self.path)
            )
        return sdk_constraint

    def sdk_version(self, sdk_constraint: str) -> str:
        """Minimum version named by an SDK constraint read from this manifest."""
        version = extract_version(sdk_constraint)
        if not version:
            raise ManifestReadError(
                "Dart SDK version constraint not found in pubspec.yaml", str(self.path)
            )
        return version

    def read_constraint(self) -> str:
        """Read the Dart SDK version from ``environment.sdk``.

        Returns:
            The minimum SDK version, e.g. "2.12.0" for ">=2.12.0 <3.0.0"
        """
        return self.sdk_version(self.read_sdk_constraint())

    def read_flutter_constraint(self) -> str | None:
        """Read the optional ``environment.flutter`` constraint."""
        flutter = _environment(self.load()).get("flutter")
        return flutter if isinstance(flutter, str) else None

    def set_field(self, section_name: str, key: str, value: str) -> None:
        """Set ``section_name.key`` to ``value`` and rewrite the manifest.

        Args:
            section_name: Top-level section, e.g. "dependencies" or "environment"
            key: Key inside the section
            value: New value
        """
        try:
            pubspec = self.load()
        except ManifestReadError as e:
            raise ManifestWriteError(str(e), str(self.path)) from e

        section = _require_section(pubspec, section_name, self.path)
        section[key] = value

        try:
            new_content = yaml.safe_dump(
                pubspec, sort_keys=False, allow_unicode=True, default_flow_style=False
            )
        except yaml.YAMLError as e:
            raise ManifestWriteError(f"Cannot serialize {self.path}: {e}", str(self.path)) from e

        # Output is fully rendered before the file is opened for writing.
        try:
            self.path.write_text(new_content, encoding="utf-8")
        except OSError as e:
            raise ManifestWriteError(f"Cannot write {self.path}: {e}", str(self.path)) from e


def _environment(pubspec: Any) -> dict:
    if not isinstance(pubspec, dict):
        return {}
    environment = pubspec.get("environment")
    return environment if isinstance(environment, dict) else {}


def _require_section(pubspec: Any, section_name: str, path: Path) -> dict:
    """Return the top-level mapping at ``section_name`` or fail."""
    section = pubspec.get(section_name) if isinstance(pubspec, dict) else None
    if not isinstance(section, dict):
        raise InvalidSectionError(section_name, str(path))
    return section


def read_constraint(path: str | Path) -> str:
    """Read the minimum Dart SDK version from a pubspec.yaml file."""
    return PubspecFile(path).read_constraint()


def set_field(path: str | Path, section_name: str, key: str, value: str) -> None:
    """Update ``section_name.key`` in a pubspec.yaml file.

    Used both for dependency versions (``set_field(p, "dependencies", "http",
    "^1.2.0")``) and for the SDK constraint (``set_field(p, "environment", "sdk",
    "3.5.2")``).
    """
    PubspecFile(path).set_field(section_name, key, value)
