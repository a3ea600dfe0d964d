"""Entry point — wires services and prints each SDK's global preferences."""

from __future__ import annotations

import json
import sys
from functools import partial

from simsettings.config import get_config
from simsettings.context import SettingsContext
from simsettings.core.commands import CommandRunner, SimulatorDefaults
from simsettings.core.documents import load_global_preferences_template
from simsettings.core.plist_writer import AtomicPlistWriter, create_encoder
from simsettings.errors import SettingsError
from simsettings.logger import setup_logger


def create_context() -> SettingsContext:
    """Wire all services and return a SettingsContext."""
    config = get_config()

    # Logger
    setup_logger(config.data_dir / "logs", level=config.log_level)

    writer = AtomicPlistWriter(create_encoder(config))
    simulator_defaults = SimulatorDefaults(
        CommandRunner(),
        defaults_command=config.defaults_command,
        domain=config.simulator_domain,
    )
    template_loader = partial(load_global_preferences_template, config.template_path)

    return SettingsContext(
        config=config,
        writer=writer,
        simulator_defaults=simulator_defaults,
        template_loader=template_loader,
    )


def main(argv: list[str] | None = None) -> int:
    """Print ``globalPreferences <sdk> (<exact sdk>): <json>`` per SDK version."""
    ctx = create_context()
    sdk_versions = argv if argv else ctx.config.sdk_versions

    for sdk_version in sdk_versions:
        settings = ctx.settings_for(sdk_version)
        try:
            preferences = settings.read_global_preferences()
            global_preferences = json.dumps(preferences, indent=2, default=str)
        except SettingsError:
            global_preferences = "not available"
        print(
            f"globalPreferences {sdk_version} ({settings.exact_sdk_version}): {global_preferences}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
