"""
Configuration & Constants
=========================
This module serves as the central registry for importer-wide constants and the
runtime configuration of an import session.

Exports:
    DEFAULT_ARC_SEGMENTS (int): Number of segments used to tessellate arcs and circles.
    TWO_PI (float): Full turn in radians.
    HALF_PI (float): Quarter turn in radians (default end angle of arcs).
    ImporterConfig: Dataclass holding the per-session settings.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, asdict
from typing import Any, Dict

from scene2d.errors import ConfigError


# Global Constants
DEFAULT_ARC_SEGMENTS: int = 10
TWO_PI: float = 2.0 * math.pi
HALF_PI: float = 0.5 * math.pi


@dataclass(frozen=True)
class ImporterConfig:
    """
    Settings of one import session.

    Attributes:
        arc_segments: Number of equal divisions used by the tessellation engine
            for every arc, circle and disk ring.
    """
    arc_segments: int = DEFAULT_ARC_SEGMENTS

    def __post_init__(self) -> None:
        if not isinstance(self.arc_segments, numbers.Integral) or isinstance(self.arc_segments, bool):
            raise ConfigError(f"arc_segments must be an integer, got {self.arc_segments!r}")
        if self.arc_segments < 1:
            raise ConfigError(f"arc_segments must be >= 1, got {self.arc_segments}")
        object.__setattr__(self, "arc_segments", int(self.arc_segments))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> ImporterConfig:
        unknown = set(data) - {"arc_segments"}
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
        return ImporterConfig(
            arc_segments=data.get("arc_segments", DEFAULT_ARC_SEGMENTS)
        )
