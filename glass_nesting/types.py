# glass_nesting/types.py
# Core data structures for glass sheet nesting.
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .errors import InvalidInput

# Tolerance for float comparisons on mm coordinates
EPS = 1e-6


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class Sheet:
    """Stock glass sheet (mm). price_per_area is currency per m², used only for reporting."""
    width: float
    height: float
    thickness: float = 6.0
    price_per_area: Optional[float] = None
    name: str = "Glass"

    @property
    def area(self) -> float:
        return self.width * self.height

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Sheet":
        price = data.get("price_per_area", data.get("pricePerArea", data.get("price_per_sqm")))
        return cls(
            width=float(data["width"]),
            height=float(data["height"]),
            thickness=float(data.get("thickness", 6.0)),
            price_per_area=float(price) if price is not None else None,
            name=str(data.get("name") or "Glass"),
        )


def _whole_quantity(design_id: Any, data: Mapping[str, Any]) -> int:
    """Quantity from a raw design dict; must be present and a whole number."""
    for key in ("quantity", "qty", "count"):
        if key in data:
            raw = data[key]
            break
    else:
        raise InvalidInput(f"Design {design_id}: quantity is required")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f"Design {design_id}: invalid quantity {raw!r}") from None
    if isinstance(raw, bool) or not value.is_integer():
        raise InvalidInput(f"Design {design_id}: quantity must be a whole number (got {raw!r})")
    return int(value)


@dataclass(frozen=True)
class DesignEntry:
    """One line of an order: a design and how many pieces of it to cut."""
    design_id: str
    quantity: int
    width: float
    height: float
    thickness: float = 6.0
    priority: int = 1
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or f"Design {self.design_id}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DesignEntry":
        did = data.get("design_id", data.get("designId", data.get("id")))
        if did is None or str(did).strip() == "":
            raise InvalidInput(f"Design entry missing design_id: {dict(data)}")
        return cls(
            design_id=str(did),
            quantity=_whole_quantity(did, data),
            width=float(data["width"]),
            height=float(data["height"]),
            thickness=float(data.get("thickness", 6.0)),
            priority=int(data.get("priority", 1)),
            name=str(data.get("name") or ""),
        )


# ----------------------------
# Pieces
# ----------------------------

@dataclass
class Piece:
    """
    A single physical rectangle to cut (one unit of a DesignEntry).

    width/height are the design dimensions; the occupied rectangle on the sheet
    swaps them when rotation == 90.
    """
    uid: str
    design_id: str
    name: str
    width: float
    height: float
    thickness: float
    area: float
    priority: int = 1

    placed: bool = False
    x: float = 0.0
    y: float = 0.0
    rotation: int = 0
    flipped: bool = False

    @property
    def placed_width(self) -> float:
        return self.height if self.rotation == 90 else self.width

    @property
    def placed_height(self) -> float:
        return self.width if self.rotation == 90 else self.height

    def footprint(self) -> Tuple[float, float, float, float]:
        """(x, y, w, h) of the occupied rectangle, rotation applied."""
        return self.x, self.y, self.placed_width, self.placed_height

    def orientations(self, allow_rotation: bool) -> List[Tuple[float, float, int]]:
        out = [(self.width, self.height, 0)]
        if allow_rotation and self.width != self.height:
            out.append((self.height, self.width, 90))
        return out

    def fresh_copy(self) -> "Piece":
        """Independent copy with placement state cleared."""
        return replace(self, placed=False, x=0.0, y=0.0, rotation=0, flipped=False)

    def place(self, x: float, y: float, rotation: int = 0) -> None:
        self.x = x
        self.y = y
        self.rotation = rotation
        self.placed = True


def expand_designs(entries: Iterable[DesignEntry]) -> List[Piece]:
    """Expand quantities into individually placeable pieces (stable order)."""
    out: List[Piece] = []
    for e in entries:
        if e.quantity < 1:
            raise InvalidInput(f"quantity must be >= 1 for design {e.design_id} (got {e.quantity})")
        if e.width <= 0 or e.height <= 0:
            raise InvalidInput(f"Invalid size for design {e.design_id}: {e.width}x{e.height}")
        for k in range(1, e.quantity + 1):
            out.append(
                Piece(
                    uid=f"{e.design_id}-{k}",
                    design_id=e.design_id,
                    name=e.label,
                    width=e.width,
                    height=e.height,
                    thickness=e.thickness,
                    area=e.width * e.height,
                    priority=e.priority,
                )
            )
    return out


# ----------------------------
# Geometry
# ----------------------------

@dataclass(frozen=True)
class FreeRect:
    """Axis-aligned unplaced region of the sheet (sheet coordinates, mm)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def fits(self, w: float, h: float) -> bool:
        return w <= self.width + EPS and h <= self.height + EPS

    def intersects(self, x: float, y: float, w: float, h: float) -> bool:
        # positive-area intersection only; touching edges do not count
        return not (self.right <= x or x + w <= self.x or self.top <= y or y + h <= self.y)

    def contains(self, other: "FreeRect") -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and self.right >= other.right
            and self.top >= other.top
        )


# ----------------------------
# Outputs
# ----------------------------

@dataclass(frozen=True)
class PlacementResult:
    """What every placement strategy returns."""
    placed: Tuple[Piece, ...]
    unplaced: Tuple[Piece, ...]
    leftover: Tuple[FreeRect, ...] = ()
    meta: Mapping[str, Any] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.placed) + len(self.unplaced)

    @property
    def used_area(self) -> float:
        return sum(p.area for p in self.placed)


@dataclass
class CutPath:
    """
    One straight cut segment.
    Only `order` changes after creation (rewritten by the path-ordering pass).
    """
    id: str
    orientation: str  # "horizontal" or "vertical"
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    order: int = 0
    tool_type: str = "straight"
    speed: float = 100.0  # mm/min
    pieces: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.orientation not in ("horizontal", "vertical"):
            raise ValueError("CutPath.orientation must be 'horizontal' or 'vertical'")

    @property
    def start(self) -> Tuple[float, float]:
        return self.start_x, self.start_y

    @property
    def end(self) -> Tuple[float, float]:
        return self.end_x, self.end_y

    def length(self) -> float:
        return math.hypot(self.end_x - self.start_x, self.end_y - self.start_y)


# ----------------------------
# Helper utilities
# ----------------------------

def rects_conflict(
    a: Tuple[float, float, float, float],
    b: Tuple[float, float, float, float],
    gap: float,
) -> bool:
    """True if two (x, y, w, h) rectangles are closer than `gap` (overlap of gap/2-expanded rects)."""
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return not (
        ax + aw + gap <= bx + EPS
        or bx + bw + gap <= ax + EPS
        or ay + ah + gap <= by + EPS
        or by + bh + gap <= ay + EPS
    )


def check_no_overlap(pieces: List[Piece], gap: float = 0.0) -> None:
    """
    Simple validator: raise if any two placed pieces violate the gap.
    This is useful for unit tests and sanity checks.
    """
    for i in range(len(pieces)):
        a = pieces[i]
        fa = a.footprint()
        for j in range(i + 1, len(pieces)):
            b = pieces[j]
            fb = b.footprint()
            if rects_conflict(fa, fb, gap):
                raise ValueError(
                    f"Overlap (gap={gap}): {a.uid} {fa} with {b.uid} {fb}"
                )
