"""Simulator instance model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SimulatorInstance:
    """One simulator SDK version and the content-and-settings folder it owns."""

    requested_version: str
    exact_version: str
    content_dir: Path
