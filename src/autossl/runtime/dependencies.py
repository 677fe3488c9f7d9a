"""Host tool validation for the bundled bash runtime.

The bash scripts call out to smallstep and system tools. This module checks
that those tools are present and executable on PATH.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from autossl.core.logging import get_logger

LOGGER = get_logger(__name__)


class ToolStatus(str, Enum):
    """Status of a host tool."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


@dataclass(frozen=True)
class Dependency:
    """A host tool used by the bash runtime."""

    name: str
    required: bool
    purpose: str


# Tools probed by the doctor command
DEPENDENCIES: Sequence[Dependency] = (
    Dependency("step", True, "certificate issuance and renewal"),
    Dependency("step-ca", True, "CA server operations"),
    Dependency("curl", True, "CA health and certificate downloads"),
    Dependency("ssh", False, "remote enrollment workflows"),
    Dependency("systemctl", False, "service and renewal timers"),
)


@dataclass
class DependencyStatus:
    """Result of probing one dependency."""

    dependency: Dependency
    status: ToolStatus
    path: Optional[Path] = None

    @property
    def found(self) -> bool:
        return self.status == ToolStatus.PRESENT

    def to_dict(self) -> Dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, object] = {
            "name": self.dependency.name,
            "required": self.dependency.required,
            "found": self.found,
            "status": self.status.value,
            "purpose": self.dependency.purpose,
        }
        if self.path is not None:
            data["path"] = str(self.path)
        return data


def validate_tool(path: Path) -> ToolStatus:
    """Validate a single tool binary.

    Args:
        path: Path to the tool binary.

    Returns:
        ToolStatus indicating whether the tool is present and executable.
    """
    if not path.exists():
        return ToolStatus.MISSING

    if not os.access(path, os.X_OK):
        return ToolStatus.NOT_EXECUTABLE

    return ToolStatus.PRESENT


def probe_dependencies(
    dependencies: Sequence[Dependency] = DEPENDENCIES,
    search_path: Optional[str] = None,
) -> List[DependencyStatus]:
    """Look up every dependency on PATH.

    Args:
        dependencies: Tools to look up.
        search_path: Optional PATH string; defaults to the environment.
    """
    results = []
    for dep in dependencies:
        found = shutil.which(dep.name, path=search_path)
        if found is None:
            LOGGER.debug(f"{dep.name}: not found on PATH")
            results.append(DependencyStatus(dep, ToolStatus.MISSING))
            continue
        path = Path(found)
        results.append(DependencyStatus(dep, validate_tool(path), path))
    return results


def missing_required(statuses: Sequence[DependencyStatus]) -> List[DependencyStatus]:
    """Return required dependencies that are not usable."""
    return [s for s in statuses if s.dependency.required and not s.found]
