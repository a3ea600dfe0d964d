"""Atomic plist writer — stage a preference document as JSON, encode it to a binary plist.

A write either creates the destination in one step or leaves nothing behind.
Existing destinations are never overwritten: the simulator must not be running
while its preferences change, so a file already in place means the folder is
not in the state we expect.
"""

from __future__ import annotations

import json
import os
import plistlib
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from simsettings.errors import (
    CommandExecutionFailed,
    ConversionFailed,
    ConverterUnavailable,
    DestinationAlreadyExists,
    SettingsError,
)

if TYPE_CHECKING:
    from loguru import Logger

    from simsettings.config import Config
    from simsettings.core.documents import PreferenceDocument

DEFAULT_PLUTIL = Path("/usr/bin/plutil")


class BinaryPlistEncoder(Protocol):
    """Turns a staged JSON document into a binary plist at a destination path."""

    def ensure_available(self) -> None: ...

    def convert(self, staging: Path, destination: Path) -> None: ...


class PlutilEncoder:
    """Shells out to ``plutil -convert binary1``."""

    def __init__(self, plutil: Path = DEFAULT_PLUTIL) -> None:
        self._plutil = Path(plutil)

    def ensure_available(self) -> None:
        if not self._plutil.is_file() or not os.access(self._plutil, os.X_OK):
            raise ConverterUnavailable(f"Cannot access {self._plutil}")

    def convert(self, staging: Path, destination: Path) -> None:
        command = [
            str(self._plutil),
            "-convert",
            "binary1",
            "-o",
            str(destination.absolute()),
            str(staging.absolute()),
        ]
        try:
            proc = subprocess.run(command, capture_output=True)  # noqa: S603
        except OSError as e:
            raise CommandExecutionFailed(f"Failed to run {command}: {e}", cause=e) from e

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            logger.debug(f"plutil stderr: {stderr}")
            raise ConversionFailed(
                f"Conversion to binary plist failed. exitCode={proc.returncode}",
                exit_code=proc.returncode,
            )


class PlistlibEncoder:
    """In-process encoder for hosts without ``plutil``."""

    def ensure_available(self) -> None:
        return None

    def convert(self, staging: Path, destination: Path) -> None:
        try:
            with open(staging, encoding="utf-8") as f:
                document = json.load(f)
            payload = plistlib.dumps(document, fmt=plistlib.FMT_BINARY)
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            raise ConversionFailed(f"Cannot encode {staging} as binary plist: {e}", cause=e) from e
        except OSError as e:
            raise CommandExecutionFailed(f"Cannot read staged document {staging}: {e}", cause=e) from e

        try:
            with open(destination, "xb") as f:
                f.write(payload)
        except FileExistsError as e:
            raise DestinationAlreadyExists(
                f"{destination} already exists. Cannot create it.", cause=e
            ) from e
        except OSError as e:
            raise CommandExecutionFailed(f"Cannot write {destination}: {e}", cause=e) from e


def create_encoder(config: Config) -> BinaryPlistEncoder:
    """Pick the encoder named in the configuration."""
    name = config.encoder
    if name == "plistlib":
        return PlistlibEncoder()
    if name != "plutil":
        logger.warning(f"Unknown plist encoder '{name}', falling back to plutil")
    return PlutilEncoder(config.plutil_path)


class AtomicPlistWriter:
    """Writes preference documents as binary plists, refusing to clobber existing files."""

    def __init__(self, encoder: BinaryPlistEncoder, log: Logger | None = None) -> None:
        self._encoder = encoder
        self._log = log or logger

    def write(self, document: PreferenceDocument, destination: Path) -> None:
        """
        Create *destination* from *document*.

        Raises DestinationAlreadyExists, ConverterUnavailable, ConversionFailed
        or CommandExecutionFailed; on any of them no destination file remains
        that was not there before.
        """
        try:
            exists = destination.exists() or destination.is_symlink()
        except OSError as e:
            raise CommandExecutionFailed(f"Cannot inspect {destination}: {e}", cause=e) from e
        if exists:
            raise DestinationAlreadyExists(f"{destination} already exists. Cannot create it.")

        # make sure the folder is ready for the plist file
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CommandExecutionFailed(f"Cannot create {destination.parent}: {e}", cause=e) from e

        self._encoder.ensure_available()

        staging = self._stage(document)
        try:
            self._encoder.convert(staging, destination)
        except DestinationAlreadyExists:
            raise
        except SettingsError:
            self._discard(destination)
            raise
        except Exception as e:
            self._discard(destination)
            raise CommandExecutionFailed(f"Conversion of {destination} failed: {e}", cause=e) from e
        finally:
            self._cleanup(staging)

        self._log.info(f"Wrote {destination}")

    def _stage(self, document: PreferenceDocument) -> Path:
        """Write the document as indented JSON to a fresh temp file."""
        try:
            fd, name = tempfile.mkstemp(prefix="global", suffix=".json")
        except OSError as e:
            raise CommandExecutionFailed(f"Cannot create staging file: {e}", cause=e) from e

        staging = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
        except OSError as e:
            self._cleanup(staging)
            raise CommandExecutionFailed(f"Cannot stage preference document: {e}", cause=e) from e
        return staging

    def _discard(self, destination: Path) -> None:
        """Remove a destination a failed conversion may have left behind."""
        try:
            destination.unlink(missing_ok=True)
        except OSError as e:
            self._log.warning(f"Cannot remove partial {destination}: {e}")

    def _cleanup(self, staging: Path) -> None:
        try:
            staging.unlink(missing_ok=True)
        except OSError as e:
            self._log.debug(f"Leftover staging file {staging}: {e}")
