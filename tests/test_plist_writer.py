"""Tests for the atomic plist writer and its encoders."""

from __future__ import annotations

import json
import plistlib
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from simsettings.config import Config
from simsettings.core.plist_writer import (
    AtomicPlistWriter,
    PlistlibEncoder,
    PlutilEncoder,
    create_encoder,
)
from simsettings.errors import (
    CommandExecutionFailed,
    ConversionFailed,
    ConverterUnavailable,
    DestinationAlreadyExists,
    ErrorKind,
    SettingsError,
)

DOCUMENT = {"KeyboardCapsLock": False, "AppleLanguages": ["fr"], "Nested": {"Key": "value"}}


@pytest.fixture
def fake_plutil(tmp_path: Path) -> Path:
    """An executable file standing in for /usr/bin/plutil."""
    path = tmp_path / "bin" / "plutil"
    path.parent.mkdir()
    path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    path.chmod(0o755)
    return path


@pytest.fixture
def destination(tmp_path: Path) -> Path:
    return tmp_path / "content" / "Library" / "Preferences" / "com.apple.Preferences.plist"


class FakePlutil:
    """Records plutil invocations; on success writes a binary plist like the real tool."""

    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.calls: list[list[str]] = []
        self.staged: dict = {}

    def __call__(self, command, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(command)
        destination, staging = Path(command[4]), Path(command[5])
        self.staged = json.loads(staging.read_text(encoding="utf-8"))
        if self.returncode == 0:
            destination.write_bytes(plistlib.dumps(self.staged, fmt=plistlib.FMT_BINARY))
        return subprocess.CompletedProcess(command, self.returncode, stdout=b"", stderr=b"boom")


class TestPlutilWriter:
    def test_success_writes_destination(
        self, fake_plutil: Path, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = FakePlutil()
        monkeypatch.setattr("simsettings.core.plist_writer.subprocess.run", fake)

        AtomicPlistWriter(PlutilEncoder(fake_plutil)).write(DOCUMENT, destination)

        assert destination.is_file()
        assert plistlib.loads(destination.read_bytes()) == DOCUMENT
        assert list(destination.parent.iterdir()) == [destination]

    def test_command_line(
        self, fake_plutil: Path, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = FakePlutil()
        monkeypatch.setattr("simsettings.core.plist_writer.subprocess.run", fake)

        AtomicPlistWriter(PlutilEncoder(fake_plutil)).write(DOCUMENT, destination)

        (command,) = fake.calls
        assert command[:4] == [str(fake_plutil), "-convert", "binary1", "-o"]
        assert command[4] == str(destination.absolute())
        assert fake.staged == DOCUMENT

    def test_staging_file_removed(
        self, fake_plutil: Path, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = FakePlutil()
        monkeypatch.setattr("simsettings.core.plist_writer.subprocess.run", fake)

        AtomicPlistWriter(PlutilEncoder(fake_plutil)).write(DOCUMENT, destination)

        staging = Path(fake.calls[0][5])
        assert not staging.exists()

    def test_nonzero_exit(
        self, fake_plutil: Path, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = FakePlutil(returncode=1)
        monkeypatch.setattr("simsettings.core.plist_writer.subprocess.run", fake)

        with pytest.raises(ConversionFailed) as exc_info:
            AtomicPlistWriter(PlutilEncoder(fake_plutil)).write(DOCUMENT, destination)

        assert exc_info.value.exit_code == 1
        assert exc_info.value.kind == ErrorKind.CONVERSION_FAILED
        assert not destination.exists()
        assert not Path(fake.calls[0][5]).exists()

    def test_partial_output_removed_on_failure(
        self, fake_plutil: Path, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def half_written(command, **kwargs):
            Path(command[4]).write_bytes(b"bplist00")
            return subprocess.CompletedProcess(command, 2, stdout=b"", stderr=b"")

        monkeypatch.setattr("simsettings.core.plist_writer.subprocess.run", half_written)

        with pytest.raises(ConversionFailed):
            AtomicPlistWriter(PlutilEncoder(fake_plutil)).write(DOCUMENT, destination)
        assert not destination.exists()

    def test_spawn_failure(
        self, fake_plutil: Path, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def cannot_spawn(command, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("simsettings.core.plist_writer.subprocess.run", cannot_spawn)

        with pytest.raises(CommandExecutionFailed) as exc_info:
            AtomicPlistWriter(PlutilEncoder(fake_plutil)).write(DOCUMENT, destination)
        assert isinstance(exc_info.value.cause, PermissionError)
        assert not destination.exists()

    def test_missing_converter(self, tmp_path: Path, destination: Path) -> None:
        encoder = PlutilEncoder(tmp_path / "no-such-plutil")
        with pytest.raises(ConverterUnavailable):
            AtomicPlistWriter(encoder).write(DOCUMENT, destination)
        assert not destination.exists()

    def test_converter_is_a_directory(self, tmp_path: Path, destination: Path) -> None:
        with pytest.raises(ConverterUnavailable):
            AtomicPlistWriter(PlutilEncoder(tmp_path)).write(DOCUMENT, destination)


class TestDestinationGuard:
    def test_existing_file_untouched(self, destination: Path) -> None:
        destination.parent.mkdir(parents=True)
        original = b"\x00live preferences\xff"
        destination.write_bytes(original)
        encoder = MagicMock()

        with pytest.raises(DestinationAlreadyExists) as exc_info:
            AtomicPlistWriter(encoder).write(DOCUMENT, destination)

        assert exc_info.value.kind == ErrorKind.DESTINATION_ALREADY_EXISTS
        assert destination.read_bytes() == original
        encoder.ensure_available.assert_not_called()
        encoder.convert.assert_not_called()

    def test_second_write_refused(self, destination: Path) -> None:
        writer = AtomicPlistWriter(PlistlibEncoder())
        writer.write(DOCUMENT, destination)
        first = destination.read_bytes()

        with pytest.raises(DestinationAlreadyExists):
            writer.write({"Other": True}, destination)
        assert destination.read_bytes() == first

    def test_parent_created(self, destination: Path) -> None:
        assert not destination.parent.exists()
        AtomicPlistWriter(PlistlibEncoder()).write(DOCUMENT, destination)
        assert destination.parent.is_dir()

    def test_unavailable_converter_checked_after_guard(self, destination: Path) -> None:
        encoder = MagicMock()
        encoder.ensure_available.side_effect = ConverterUnavailable("Cannot access plutil")

        with pytest.raises(ConverterUnavailable):
            AtomicPlistWriter(encoder).write(DOCUMENT, destination)
        encoder.convert.assert_not_called()


class TestPlistlibEncoder:
    def test_binary_output(self, destination: Path) -> None:
        AtomicPlistWriter(PlistlibEncoder()).write(DOCUMENT, destination)
        raw = destination.read_bytes()
        assert raw.startswith(b"bplist00")
        assert plistlib.loads(raw) == DOCUMENT

    def test_exclusive_create(self, tmp_path: Path) -> None:
        staging = tmp_path / "staged.json"
        staging.write_text(json.dumps(DOCUMENT), encoding="utf-8")
        destination = tmp_path / "out.plist"
        destination.write_bytes(b"existing")

        with pytest.raises(DestinationAlreadyExists):
            PlistlibEncoder().convert(staging, destination)
        assert destination.read_bytes() == b"existing"


class TestUnexpectedFailures:
    def test_undecodable_stderr(
        self, fake_plutil: Path, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def garbled(command, **kwargs):
            Path(command[4]).write_bytes(b"bplist00")
            return subprocess.CompletedProcess(command, 1, stdout=b"", stderr=b"\xff\xfe bad")

        monkeypatch.setattr("simsettings.core.plist_writer.subprocess.run", garbled)

        with pytest.raises(ConversionFailed) as exc_info:
            AtomicPlistWriter(PlutilEncoder(fake_plutil), log=MagicMock()).write(
                DOCUMENT, destination
            )
        assert exc_info.value.exit_code == 1
        assert not destination.exists()

    def test_foreign_exception_wrapped_and_discarded(self, destination: Path) -> None:
        def half_then_crash(staging: Path, target: Path) -> None:
            target.write_bytes(b"bplist00")
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

        encoder = MagicMock()
        encoder.convert.side_effect = half_then_crash

        with pytest.raises(SettingsError) as exc_info:
            AtomicPlistWriter(encoder, log=MagicMock()).write(DOCUMENT, destination)

        assert exc_info.value.kind == ErrorKind.COMMAND_EXECUTION_FAILED
        assert isinstance(exc_info.value.cause, UnicodeDecodeError)
        assert not destination.exists()

    def test_destination_stat_failure(
        self, destination: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        original_exists = Path.exists

        def locked_exists(self, *args, **kwargs):
            if self == destination:
                raise PermissionError(13, "Permission denied")
            return original_exists(self, *args, **kwargs)

        monkeypatch.setattr(Path, "exists", locked_exists)
        encoder = MagicMock()

        with pytest.raises(CommandExecutionFailed) as exc_info:
            AtomicPlistWriter(encoder, log=MagicMock()).write(DOCUMENT, destination)
        assert isinstance(exc_info.value.cause, PermissionError)
        encoder.convert.assert_not_called()


class TestCreateEncoder:
    @pytest.fixture
    def config_dir(self, tmp_path: Path) -> Path:
        return tmp_path / "config"

    def _config(self, config_dir: Path, encoder: str) -> Config:
        config_dir.mkdir()
        (config_dir / "config.json").write_text(
            json.dumps({"plist": {"encoder": encoder}}), encoding="utf-8"
        )
        return Config(config_dir=config_dir)

    def test_plutil_default(self, config_dir: Path) -> None:
        assert isinstance(create_encoder(Config(config_dir=config_dir)), PlutilEncoder)

    def test_plistlib(self, config_dir: Path) -> None:
        assert isinstance(create_encoder(self._config(config_dir, "plistlib")), PlistlibEncoder)

    def test_unknown_falls_back(self, config_dir: Path) -> None:
        assert isinstance(create_encoder(self._config(config_dir, "xml")), PlutilEncoder)
