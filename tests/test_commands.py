"""Tests for the simulator defaults command."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock

import pytest

from simsettings.core.commands import CommandRunner, SimulatorDefaults
from simsettings.errors import CommandExecutionFailed, ErrorKind


class TestCommandRunner:
    def test_returns_exit_code(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []

        def fake_run(command, **kwargs):
            calls.append(command)
            return subprocess.CompletedProcess(command, 3, stdout=b"", stderr=b"nope")

        monkeypatch.setattr("simsettings.core.commands.subprocess.run", fake_run)
        log = MagicMock()

        assert CommandRunner(log=log).run(["defaults", "write", "x", "k", '"v"']) == 3
        assert calls == [["defaults", "write", "x", "k", '"v"']]
        log.warning.assert_called_once()

    def test_spawn_failure(self) -> None:
        with pytest.raises(CommandExecutionFailed) as exc_info:
            CommandRunner(log=MagicMock()).run(["/nonexistent/defaults-binary", "write"])
        assert exc_info.value.kind == ErrorKind.COMMAND_EXECUTION_FAILED
        assert isinstance(exc_info.value.cause, OSError)


class TestSimulatorDefaults:
    def test_quotes_value(self) -> None:
        runner = MagicMock()
        runner.run.return_value = 0
        SimulatorDefaults(runner).write("SimulateDevice", "iPad (Retina)")
        runner.run.assert_called_once_with(
            ["defaults", "write", "com.apple.iphonesimulator", "SimulateDevice", '"iPad (Retina)"']
        )

    def test_custom_command_and_domain(self) -> None:
        runner = MagicMock()
        SimulatorDefaults(runner, defaults_command="/usr/bin/defaults", domain="com.example.sim").write(
            "SimulateSDKRoot", "/sdk"
        )
        command = runner.run.call_args.args[0]
        assert command[:3] == ["/usr/bin/defaults", "write", "com.example.sim"]


def test_undecodable_stderr_still_returns_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 4, stdout=b"", stderr=b"\xff\xfe oops")

    monkeypatch.setattr("simsettings.core.commands.subprocess.run", fake_run)
    log = MagicMock()

    assert CommandRunner(log=log).run(["defaults", "write", "x", "k", '"v"']) == 4
    assert "�" in log.warning.call_args.args[0]
