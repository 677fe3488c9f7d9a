"""Configuration validation for autossl.

Validates known configuration keys and warns on unknown keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from autossl.core.logging import get_logger

LOGGER = get_logger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Config cannot be used
    WARNING = "warning"  # Likely mistake but config usable


@dataclass
class ConfigValidationIssue:
    """A validation issue for configuration with severity."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "runtime",
    "dump",
}

# Valid keys under runtime section
VALID_RUNTIME_KEYS: Set[str] = {
    "cache_dir",
    "retention",
}

# Valid keys under dump section
VALID_DUMP_KEYS: Set[str] = {
    "output",
    "checksum",
}


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationIssue]:
    """Validate a configuration dictionary.

    Unknown keys produce warnings; values of the wrong type produce errors.

    Args:
        data: Config dictionary to validate.
        source: Source file path for messages.

    Returns:
        List of validation issues.
    """
    issues: List[ConfigValidationIssue] = []

    if not isinstance(data, dict):  # type: ignore[unreachable]
        issues.append(_error(f"Config must be a mapping, got {type(data).__name__}", source))
        return issues  # type: ignore[unreachable]

    _check_unknown_keys(data, VALID_TOP_LEVEL_KEYS, source, "", issues)

    runtime = data.get("runtime")
    if runtime is not None:
        if not isinstance(runtime, dict):
            issues.append(_error(
                f"'runtime' must be a mapping, got {type(runtime).__name__}", source, "runtime"
            ))
        else:
            _check_unknown_keys(runtime, VALID_RUNTIME_KEYS, source, "runtime.", issues)

            cache_dir = runtime.get("cache_dir")
            if cache_dir is not None and not isinstance(cache_dir, str):
                issues.append(_error(
                    "'runtime.cache_dir' must be a string", source, "runtime.cache_dir"
                ))

            retention = runtime.get("retention")
            if retention is not None:
                if isinstance(retention, bool) or not isinstance(retention, int):
                    issues.append(_error(
                        "'runtime.retention' must be an integer", source, "runtime.retention"
                    ))
                elif retention < 0:
                    issues.append(_error(
                        "'runtime.retention' must not be negative", source, "runtime.retention"
                    ))

    dump = data.get("dump")
    if dump is not None:
        if not isinstance(dump, dict):
            issues.append(_error(
                f"'dump' must be a mapping, got {type(dump).__name__}", source, "dump"
            ))
        else:
            _check_unknown_keys(dump, VALID_DUMP_KEYS, source, "dump.", issues)

            output = dump.get("output")
            if output is not None and not isinstance(output, str):
                issues.append(_error("'dump.output' must be a string", source, "dump.output"))

            checksum = dump.get("checksum")
            if checksum is not None and not isinstance(checksum, bool):
                issues.append(_error("'dump.checksum' must be a boolean", source, "dump.checksum"))

    return issues


def _error(message: str, source: str, key: Optional[str] = None) -> ConfigValidationIssue:
    return ConfigValidationIssue(
        message=message,
        source=source,
        severity=ValidationSeverity.ERROR,
        key=key,
    )


def _check_unknown_keys(
    section: Dict[str, Any],
    valid_keys: Set[str],
    source: str,
    prefix: str,
    issues: List[ConfigValidationIssue],
) -> None:
    for key in section.keys():
        if key not in valid_keys:
            issue = ConfigValidationIssue(
                message=f"Unknown key '{prefix}{key}'",
                source=source,
                severity=ValidationSeverity.WARNING,
                key=f"{prefix}{key}",
                suggestion=_suggest_key(str(key), valid_keys),
            )
            issues.append(issue)
            _log_warning(issue)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(issue: ConfigValidationIssue) -> None:
    """Log a validation warning."""
    msg = f"{issue.message} in {issue.source}"
    if issue.suggestion:
        msg += f" (did you mean '{issue.suggestion}'?)"
    LOGGER.warning(msg)
