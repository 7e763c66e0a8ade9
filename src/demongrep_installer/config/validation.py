"""Configuration validation for demongrep-installer.

Unknown keys produce warnings (with suggestions for likely typos); values of
the wrong type or outside their allowed range are errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from demongrep_installer.core.logging import get_logger

LOGGER = get_logger(__name__)

# Valid keys per section
VALID_SECTION_KEYS: Dict[str, Set[str]] = {
    "release": {"owner", "repo", "binary_name", "base_url", "metadata_url"},
    "download": {"max_attempts", "retry_delay", "timeout"},
    "binary": {"search_depth"},
    "install": {"system_dir", "user_dir"},
}


@dataclass
class ConfigValidationIssue:
    """A validation finding for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None
    is_error: bool = False


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationIssue]:
    """Validate a configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for messages.

    Returns:
        List of warnings and errors, in document order.
    """
    issues: List[ConfigValidationIssue] = []

    for key, section in data.items():
        if key not in VALID_SECTION_KEYS:
            issue = ConfigValidationIssue(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, set(VALID_SECTION_KEYS)),
            )
            issues.append(issue)
            _log_warning(issue)
            continue

        if section is None:
            continue

        if not isinstance(section, dict):
            issues.append(ConfigValidationIssue(
                message=f"'{key}' must be a mapping, got {type(section).__name__}",
                source=source,
                key=key,
                is_error=True,
            ))
            continue

        valid_keys = VALID_SECTION_KEYS[key]
        for sub_key in section:
            if sub_key not in valid_keys:
                issue = ConfigValidationIssue(
                    message=f"Unknown key '{key}.{sub_key}'",
                    source=source,
                    key=f"{key}.{sub_key}",
                    suggestion=_suggest_key(sub_key, valid_keys),
                )
                issues.append(issue)
                _log_warning(issue)

    issues.extend(_validate_values(data, source))
    return issues


def _validate_values(data: Dict[str, Any], source: str) -> List[ConfigValidationIssue]:
    """Check types and ranges of known keys."""
    errors: List[ConfigValidationIssue] = []

    def error(key: str, message: str) -> None:
        errors.append(ConfigValidationIssue(
            message=message, source=source, key=key, is_error=True,
        ))

    release = data.get("release")
    if isinstance(release, dict):
        for key in VALID_SECTION_KEYS["release"]:
            value = release.get(key)
            if value is not None and not isinstance(value, str):
                error(f"release.{key}", f"'release.{key}' must be a string")
        for key in ("owner", "repo", "binary_name"):
            if release.get(key) == "":
                error(f"release.{key}", f"'release.{key}' must not be empty")

    download = data.get("download")
    if isinstance(download, dict):
        attempts = download.get("max_attempts")
        if attempts is not None and (
            not _is_int(attempts) or attempts < 1
        ):
            error("download.max_attempts", "'download.max_attempts' must be an integer >= 1")
        delay = download.get("retry_delay")
        if delay is not None and (not _is_number(delay) or delay < 0):
            error("download.retry_delay", "'download.retry_delay' must be a number >= 0")
        timeout = download.get("timeout")
        if timeout is not None and (not _is_number(timeout) or timeout <= 0):
            error("download.timeout", "'download.timeout' must be a number > 0")

    binary = data.get("binary")
    if isinstance(binary, dict):
        depth = binary.get("search_depth")
        if depth is not None and (not _is_int(depth) or depth < 0):
            error("binary.search_depth", "'binary.search_depth' must be an integer >= 0")

    install = data.get("install")
    if isinstance(install, dict):
        for key in ("system_dir", "user_dir"):
            value = install.get(key)
            if value is not None and (not isinstance(value, str) or not value):
                error(f"install.{key}", f"'install.{key}' must be a non-empty path")

    return errors


def _is_int(value: Any) -> bool:
    # bool is an int subclass; "true" is never a valid count
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _suggest_key(key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a likely typo."""
    matches = get_close_matches(key, sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(issue: ConfigValidationIssue) -> None:
    message = f"{issue.source}: {issue.message}"
    if issue.suggestion:
        message += f" (did you mean '{issue.suggestion}'?)"
    LOGGER.warning(message)
