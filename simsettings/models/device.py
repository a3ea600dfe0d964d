"""Simulated hardware models — device classes, variations and their registry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

Version = tuple[int, ...]


class DeviceType(StrEnum):
    """Device class the simulator can emulate."""

    IPHONE = "iphone"
    IPAD = "ipad"


class DeviceVariation(StrEnum):
    """Screen size / density / architecture variant of a device class."""

    REGULAR = "regular"
    RETINA = "retina"
    RETINA35 = "retina35"
    RETINA4 = "retina4"
    RETINA4_64 = "retina4_64"
    RETINA_64 = "retina_64"


@dataclass(frozen=True)
class VariationEntry:
    """One valid (device, variation) pair and the SDK range it exists in."""

    device: DeviceType
    variation: DeviceVariation
    label: str
    min_version: Version | None = None  # inclusive
    max_version: Version | None = None  # exclusive

    def supports(self, version: Version) -> bool:
        if self.min_version is not None and _compare(version, self.min_version) < 0:
            return False
        if self.max_version is not None and _compare(version, self.max_version) >= 0:
            return False
        return True


def _compare(a: Version, b: Version) -> int:
    """Compare versions with missing components read as zero, so (7,) == (7, 0)."""
    width = max(len(a), len(b))
    a = a + (0,) * (width - len(a))
    b = b + (0,) * (width - len(b))
    return (a > b) - (a < b)


_ENTRIES = (
    VariationEntry(DeviceType.IPHONE, DeviceVariation.REGULAR, "iPhone", max_version=(7, 0)),
    VariationEntry(DeviceType.IPHONE, DeviceVariation.RETINA35, "iPhone (Retina 3.5-inch)"),
    VariationEntry(
        DeviceType.IPHONE, DeviceVariation.RETINA4, "iPhone (Retina 4-inch)", min_version=(6, 0)
    ),
    VariationEntry(
        DeviceType.IPHONE,
        DeviceVariation.RETINA4_64,
        "iPhone (Retina 4-inch 64-bit)",
        min_version=(7, 0),
    ),
    VariationEntry(DeviceType.IPAD, DeviceVariation.REGULAR, "iPad"),
    VariationEntry(DeviceType.IPAD, DeviceVariation.RETINA, "iPad (Retina)"),
    VariationEntry(
        DeviceType.IPAD, DeviceVariation.RETINA_64, "iPad (Retina 64-bit)", min_version=(7, 0)
    ),
)

# (device, variation) → entry
VARIATION_REGISTRY: dict[tuple[DeviceType, DeviceVariation], VariationEntry] = {
    (e.device, e.variation): e for e in _ENTRIES
}
