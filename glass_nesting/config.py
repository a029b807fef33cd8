# glass_nesting/config.py
# Centralized defaults and configuration helpers.
# Keeps "magic numbers" (gap, margin, grid resolution, floors) in one place.

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import InvalidInput
from .types import Sheet


@dataclass(frozen=True)
class Defaults:
    # Typical float glass jumbo sheet (adjust to your supplier)
    default_sheet_w: float = 3210.0
    default_sheet_h: float = 2250.0
    default_thickness: float = 6.0

    # Free rectangles smaller than this (mm, either side) are dropped
    min_free_rect: float = 10.0

    # Grid resolution for the largest-waste scan (mm)
    waste_grid_resolution: float = 50.0

    # Pieces whose y-centers differ by at most this are cut in the same row (mm)
    row_tolerance: float = 10.0

    # Scoring wheel feed (mm/min) used for cut paths and time estimates
    default_cut_speed: float = 100.0


DEFAULTS = Defaults()


# camelCase aliases accepted by PlacementOptions.from_dict
_OPTION_ALIASES = {
    "allowRotation": "allow_rotation",
    "allowFlipping": "allow_flipping",
    "minimumGap": "minimum_gap",
    "edgeMargin": "edge_margin",
    "timeLimit": "time_limit",
    "qualityTarget": "quality_target",
}


@dataclass(frozen=True)
class PlacementOptions:
    """
    Options shared by all placement strategies.

    allow_rotation  -- also try the 90° orientation of each piece
    allow_flipping  -- accepted but a no-op (a flipped rectangle is the same rectangle)
    minimum_gap     -- clearance between placed pieces, mm (kerf)
    edge_margin     -- clearance reserved along the sheet border, mm
    time_limit      -- soft budget in seconds; only the genetic strategy checks it
    quality_target  -- 0..1; genetic stops once utilization >= quality_target * 100
    """
    allow_rotation: bool = True
    allow_flipping: bool = False
    minimum_gap: float = 2.0
    edge_margin: float = 5.0
    time_limit: float = 300.0
    quality_target: float = 0.85

    def validate(self) -> "PlacementOptions":
        if self.minimum_gap < 0:
            raise InvalidInput(f"minimum_gap must be >= 0 (got {self.minimum_gap})")
        if self.edge_margin < 0:
            raise InvalidInput(f"edge_margin must be >= 0 (got {self.edge_margin})")
        if self.time_limit <= 0:
            raise InvalidInput(f"time_limit must be > 0 (got {self.time_limit})")
        if not (0.0 <= self.quality_target <= 1.0):
            raise InvalidInput(f"quality_target must be within [0, 1] (got {self.quality_target})")
        return self

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "PlacementOptions":
        """Return a copy with overrides applied (snake_case or camelCase keys)."""
        if not overrides:
            return self
        return replace(self, **_normalize_option_keys(overrides))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PlacementOptions":
        return cls().merged(data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _normalize_option_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name: f.type for f in fields(PlacementOptions)}
    out: Dict[str, Any] = {}
    for key, value in data.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in known:
            raise InvalidInput(f"Unknown placement option: {key}")
        if name in ("allow_rotation", "allow_flipping"):
            if not isinstance(value, bool):
                raise InvalidInput(f"Invalid value for {key}: expected true/false, got {value!r}")
            out[name] = value
        else:
            if isinstance(value, bool):
                raise InvalidInput(f"Invalid value for {key}: expected a number, got {value!r}")
            try:
                out[name] = float(value)
            except (TypeError, ValueError):
                raise InvalidInput(f"Invalid value for {key}: {value!r}") from None
    return out


def usable_bounds(sheet: Sheet, options: PlacementOptions) -> Tuple[float, float, float, float]:
    """(x0, y0, x1, y1) of the sheet interior left after the edge margin."""
    m = options.edge_margin
    return m, m, sheet.width - m, sheet.height - m


def make_default_sheet(
    name: str = "Float",
    *,
    width: Optional[float] = None,
    height: Optional[float] = None,
    thickness: Optional[float] = None,
    price_per_area: Optional[float] = None,
) -> Sheet:
    """
    Convenience factory for a typical jumbo float glass sheet.
    """
    return Sheet(
        width=float(width if width is not None else DEFAULTS.default_sheet_w),
        height=float(height if height is not None else DEFAULTS.default_sheet_h),
        thickness=float(thickness if thickness is not None else DEFAULTS.default_thickness),
        price_per_area=price_per_area,
        name=name,
    )


def parse_sheet_text(sheet_text: str) -> Tuple[float, float]:
    """
    Parse '3210x2250' -> (3210.0, 2250.0)
    """
    s = sheet_text.lower().replace(" ", "")
    if "x" not in s:
        raise InvalidInput("sheet_text must be like '3210x2250'")
    a, b = s.split("x", 1)
    return float(a), float(b)
