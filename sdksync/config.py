"""Run configuration for sdksync."""

from dataclasses import dataclass


def clean_input(value: str | None) -> str:
    """Action inputs are read with surrounding whitespace removed."""
    return (value or "").strip()


def parse_flag(value: str | None) -> bool:
    """Action inputs are true only when exactly "true"."""
    return clean_input(value) == "true"


def input_env_name(name: str) -> str:
    """Environment variable GitHub Actions uses for an action input."""
    return "INPUT_" + name.replace(" ", "_").upper()


@dataclass
class SyncConfig:
    """Inputs of a synchronization run."""

    pubspec_path: str
    fail_if_flutter_not_installed: bool = False
    commit_changes: bool = False
    commit_message: str = ""
    gh_app_id: str = ""
    gh_installation_id: str = ""
    gh_private_key: str = ""
    flutter_executable: str = "flutter"
    dry_run: bool = False

    @property
    def commit_configured(self) -> bool:
        """All settings needed to push a commit are present."""
        return all(
            (self.commit_message, self.gh_app_id, self.gh_installation_id, self.gh_private_key)
        )
