"""Core data models for sdksync."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FlutterVersion(BaseModel):
    """Output of ``flutter --version --machine``; only the Dart SDK version is read."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dart_sdk_version: str = Field(alias="dartSdkVersion")


@dataclass
class RepositoryRef:
    """Repository coordinates a commit is pushed to."""

    owner: str
    repo: str
    branch: str


class SyncStatus(str, Enum):
    """Terminal states of a synchronization run."""

    UP_TO_DATE = "up_to_date"
    UPDATED = "updated"
    WOULD_UPDATE = "would_update"  # dry run
    COMMIT_FAILED = "commit_failed"
    NOT_INSTALLED_SKIPPED = "not_installed_skipped"
    NOT_INSTALLED_FAILED = "not_installed_failed"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Result of one synchronization run."""

    status: SyncStatus
    installed_version: str | None = None
    manifest_version: str | None = None
    semver_delta: str = "unknown"  # major, minor, patch, downgrade, unknown
    committed: bool = False
    message: str | None = None
