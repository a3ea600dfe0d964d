"""Simulator preference commands — ``defaults write`` against the simulator's own domain."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from loguru import logger

from simsettings.errors import CommandExecutionFailed

if TYPE_CHECKING:
    from loguru import Logger


class CommandRunner:
    """Runs a command, waits for it, reports its exit code without judging it."""

    def __init__(self, log: Logger | None = None) -> None:
        self._log = log or logger

    def run(self, command: list[str]) -> int:
        try:
            proc = subprocess.run(command, capture_output=True)  # noqa: S603
        except OSError as e:
            raise CommandExecutionFailed(f"Failed to run {command}: {e}", cause=e) from e

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            self._log.warning(f"{command[0]} exited with {proc.returncode}: {stderr}")
        else:
            self._log.debug(f"Ran {' '.join(command)}")
        return proc.returncode


class SimulatorDefaults:
    """
    The simulator app's preferences, as set from its Hardware menu.

    These are not files under the content-and-settings folder; they go
    through ``defaults write <domain> <key> <value>``.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        defaults_command: str = "defaults",
        domain: str = "com.apple.iphonesimulator",
    ) -> None:
        self._runner = runner or CommandRunner()
        self._defaults_command = defaults_command
        self._domain = domain

    def write(self, key: str, value: str) -> int:
        command = [self._defaults_command, "write", self._domain, key, f'"{value}"']
        return self._runner.run(command)
