"""Doctor command implementation."""

from __future__ import annotations

import json
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autossl.config.models import AutosslConfig

from autossl.cli.commands import Command
from autossl.cli.exit_codes import EXIT_FAILURE, EXIT_SUCCESS
from autossl.runtime.dependencies import missing_required, probe_dependencies


class DoctorCommand(Command):
    """Checks host tools used by the bash runtime."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "doctor"

    def execute(self, args: Namespace, config: "AutosslConfig") -> int:
        """Execute the doctor command.

        Args:
            args: Parsed command-line arguments.
            config: autossl configuration (unused).

        Returns:
            Exit code: 0 if every required tool is usable, 1 otherwise.
        """
        statuses = probe_dependencies()

        if getattr(args, "json", False):
            print(json.dumps([s.to_dict() for s in statuses], indent=2))
        else:
            for status in statuses:
                state = "ok" if status.found else status.status.value
                required = "required" if status.dependency.required else "optional"
                detail = str(status.path) if status.path else status.dependency.purpose
                print(f"{status.dependency.name:<10}  {state:<14}  {required:<8}  {detail}")

        return EXIT_FAILURE if missing_required(statuses) else EXIT_SUCCESS
