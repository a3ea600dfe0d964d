"""Simulator settings — one SDK's content-and-settings folder and the preferences in it.

The simulator must not be running while any of these operations run: it reads
and writes the same files and nothing here locks them.
"""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from simsettings.core import documents
from simsettings.core.commands import SimulatorDefaults
from simsettings.core.path_resolver import (
    resolve_browser_preference_file,
    resolve_content_directory,
    resolve_global_preference_file,
    resolve_keyboard_preference_file,
    resolve_location_clients_file,
)
from simsettings.core.plist_writer import AtomicPlistWriter, PlutilEncoder
from simsettings.core.reset import ResetResult, reset_content_directory
from simsettings.core.variations import simulate_device_value
from simsettings.errors import PreferencesUnavailable
from simsettings.models.instance import SimulatorInstance

if TYPE_CHECKING:
    from loguru import Logger


class SimulatorSettings:
    """Preference mutations and reset for one simulator SDK version."""

    def __init__(
        self,
        sdk_version: str,
        *,
        exact_sdk_version: str | None = None,
        simulator_root: Path | None = None,
        writer: AtomicPlistWriter | None = None,
        simulator_defaults: SimulatorDefaults | None = None,
        template_loader: documents.TemplateLoader | None = None,
        log: Logger | None = None,
    ) -> None:
        exact = exact_sdk_version or sdk_version
        self._instance = SimulatorInstance(
            requested_version=sdk_version,
            exact_version=exact,
            content_dir=resolve_content_directory(exact, simulator_root),
        )
        self._log = log or logger.bind(sdk=exact)
        self._writer = writer or AtomicPlistWriter(PlutilEncoder(), log=self._log)
        self._defaults = simulator_defaults or SimulatorDefaults()
        self._template_loader = template_loader or documents.load_global_preferences_template

    # ── Paths ──

    @property
    def instance(self) -> SimulatorInstance:
        return self._instance

    @property
    def exact_sdk_version(self) -> str:
        return self._instance.exact_version

    @property
    def content_dir(self) -> Path:
        return self._instance.content_dir

    @property
    def global_preference_file(self) -> Path:
        return resolve_global_preference_file(self.content_dir)

    # ── Preference files ──

    def set_location_preference(self, authorized: bool, bundle_id: str) -> None:
        """Write the location clients file for *bundle_id*, replacing any other app's grant."""
        document = documents.build_location_document(bundle_id, authorized)
        self._writer.write(document, resolve_location_clients_file(self.content_dir))

    def set_keyboard_options(self) -> None:
        """
        The default keyboard options aren't good for automation: they capitalize
        the first letter of sentences, autocorrect, etc. Turn all of that off so
        typed text arrives unchanged.
        """
        document = documents.build_keyboard_document()
        self._writer.write(document, resolve_keyboard_preference_file(self.content_dir))

    def set_browser_warning_option(self) -> None:
        document = documents.build_browser_warning_document()
        self._writer.write(document, resolve_browser_preference_file(self.content_dir))

    def set_locale(self, locale: str, language: str) -> None:
        """
        Set the simulator locale, e.g. ``set_locale("fr_FR", "fr")``.

        Needs a clean folder, i.e. right after ``reset_content_and_settings()``.
        """
        document = documents.build_locale_document(self._template_loader, locale, language)
        self._writer.write(document, self.global_preference_file)

    # ── Simulator app preferences ──

    def set_hardware_variation(self, device: str, variation: str, target_version: str) -> None:
        """
        Make the simulator start as the given hardware (retina or not, screen size).

        Same as the simulator's Hardware > Device menu. The ``defaults`` exit
        code is logged, not checked.
        """
        value = simulate_device_value(device, variation, target_version)
        self._defaults.write("SimulateDevice", value)
        self._log.info(f"SimulateDevice set to {value}")

    # ── Reset ──

    def reset_content_and_settings(self) -> ResetResult:
        """Best-effort wipe of the content-and-settings folder; inspect the result's warnings."""
        return reset_content_directory(self.content_dir, log=self._log)

    # ── Reading back ──

    def read_global_preferences(self) -> documents.PreferenceDocument:
        """Decode the global preference plist (binary or XML)."""
        path = self.global_preference_file
        try:
            with open(path, "rb") as f:
                return plistlib.load(f)
        except FileNotFoundError as e:
            raise PreferencesUnavailable(f"No global preferences at {path}", cause=e) from e
        except (plistlib.InvalidFileException, ValueError, OSError) as e:
            raise PreferencesUnavailable(f"Cannot read {path}: {e}", cause=e) from e
