"""SDK version constraint helpers."""

import re

from packaging.version import InvalidVersion, Version

# Leftmost dotted-numeric token, optionally preceded by ">=".
_CONSTRAINT_VERSION = re.compile(r"(?:>=\s*)?([\d.]+)")

_EXACT_VERSION = re.compile(r"^\s*\d+(\.\d+)*\s*$")
_RANGE_OPERATORS = re.compile(r"[<>]=?|\^")


def extract_version(constraint: str) -> str | None:
    """Extract the minimum version from an SDK constraint.

    Handles both range constraints (``">=2.12.0 <3.0.0"``) and plain
    version numbers (``"2.12.0"``).

    Args:
        constraint: The constraint string from ``environment.sdk``

    Returns:
        The first dotted-numeric token, or None if there is none
    """
    match = _CONSTRAINT_VERSION.search(constraint)
    if match and match.group(1):
        return match.group(1)
    return None


def classify_constraint(constraint: str) -> str:
    """Classify a constraint as 'exact', 'range' or 'unknown'."""
    if _EXACT_VERSION.match(constraint):
        return "exact"
    if _RANGE_OPERATORS.search(constraint) or constraint.strip() == "any":
        return "range"
    return "unknown"


def semver_delta(old_version: str, new_version: str) -> str:
    """Calculate the semantic version delta between two versions.

    Returns:
        "major", "minor", "patch", "downgrade", or "unknown"
    """
    try:
        old_ver = Version(old_version)
        new_ver = Version(new_version)
    except InvalidVersion:
        return "unknown"

    if new_ver < old_ver:
        return "downgrade"
    if new_ver.major > old_ver.major:
        return "major"
    if new_ver.minor > old_ver.minor:
        return "minor"
    if new_ver.micro > old_ver.micro:
        return "patch"
    return "unknown"
