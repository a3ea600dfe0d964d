"""Settings context — service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from simsettings.core.settings import SimulatorSettings

if TYPE_CHECKING:
    from simsettings.config import Config
    from simsettings.core.commands import SimulatorDefaults
    from simsettings.core.documents import TemplateLoader
    from simsettings.core.plist_writer import AtomicPlistWriter


@dataclass
class SettingsContext:
    """
    Shared collaborators for every simulator version handled in one run.

    Entry points build one of these and ask it for per-SDK facades instead
    of wiring writers and command runners themselves.
    """

    config: Config
    writer: AtomicPlistWriter
    simulator_defaults: SimulatorDefaults
    template_loader: TemplateLoader

    def settings_for(self, sdk_version: str) -> SimulatorSettings:
        return SimulatorSettings(
            sdk_version,
            simulator_root=self.config.simulator_root,
            writer=self.writer,
            simulator_defaults=self.simulator_defaults,
            template_loader=self.template_loader,
        )
