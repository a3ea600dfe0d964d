"""Device variation checks — which simulated hardware exists for which SDK."""

from __future__ import annotations

import re

from simsettings.errors import IncompatibleConfiguration
from simsettings.models.device import (
    VARIATION_REGISTRY,
    DeviceType,
    DeviceVariation,
    Version,
    VariationEntry,
)

_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")


def parse_version(version: str) -> Version | None:
    """``"7.0.3"`` → ``(7, 0, 3)``; anything else → None."""
    version = version.strip()
    if not _VERSION_RE.match(version):
        return None
    return tuple(int(p) for p in version.split("."))


def _lookup(device: str, variation: str) -> VariationEntry | None:
    try:
        key = (DeviceType(device), DeviceVariation(variation))
    except ValueError:
        return None
    return VARIATION_REGISTRY.get(key)


def is_compatible(device: str, variation: str, target_version: str) -> bool:
    """True if the simulator can emulate *device*/*variation* on *target_version*."""
    entry = _lookup(device, variation)
    if entry is None:
        return False
    version = parse_version(target_version)
    if version is None:
        return False
    return entry.supports(version)


def canonical_identifier(device: str, variation: str) -> str:
    """Value the simulator's ``SimulateDevice`` preference expects, e.g. ``iPad (Retina)``."""
    entry = _lookup(device, variation)
    if entry is None:
        raise IncompatibleConfiguration(str(device), str(variation), "any")
    return entry.label


def simulate_device_value(device: str, variation: str, target_version: str) -> str:
    """Validate the combination and return its identifier, or raise IncompatibleConfiguration."""
    if not is_compatible(device, variation, target_version):
        raise IncompatibleConfiguration(str(device), str(variation), target_version)
    return canonical_identifier(device, variation)
