# glass_nesting/metrics.py
# Statistics for a finished placement:
# - piece counts (placed / unplaced)
# - used / waste area and rates
# - material efficiency and density
# - largest empty rectangle (grid approximation)
# - cutting length and estimated cutting time from cut paths
#
# These metrics are strategy-agnostic: they work for any placement result.

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Sequence

from .config import DEFAULTS
from .cutpaths import total_cut_length
from .types import CutPath, Piece, PlacementResult, Sheet


@dataclass(frozen=True)
class Statistics:
    total_pieces: int
    placed_pieces: int
    unplaced_pieces: int
    sheet_area: float
    total_piece_area: float
    used_area: float
    waste_area: float
    utilization_rate: float
    waste_rate: float
    material_efficiency: float
    density: float
    largest_waste: float
    cutting_length: float = 0.0
    cutting_time: float = 0.0  # minutes

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_used_area(placed: Iterable[Piece]) -> float:
    return sum(p.area for p in placed)


def _occupancy_grid(
    placed: Sequence[Piece],
    sheet: Sheet,
    resolution: float,
) -> List[List[bool]]:
    """occupied[row][col] for the grid point at (col*res, row*res)."""
    cols = int(-(-sheet.width // resolution))
    rows = int(-(-sheet.height // resolution))
    rects = [p.footprint() for p in placed]

    grid: List[List[bool]] = []
    for r in range(rows):
        y = r * resolution
        row: List[bool] = []
        for c in range(cols):
            x = c * resolution
            row.append(any(rx <= x < rx + rw and ry <= y < ry + rh for rx, ry, rw, rh in rects))
        grid.append(row)
    return grid


def largest_waste_area(
    placed: Sequence[Piece],
    sheet: Sheet,
    resolution: float = DEFAULTS.waste_grid_resolution,
) -> float:
    """
    Largest empty axis-aligned rectangle, approximated on a grid.

    For every free grid cell grow a rectangle to the right, then upward while the
    whole row span stays free; keep the largest area. Cells are sampled at their
    lower-left corner, so precision is bounded by `resolution` (a known limitation;
    the exact largest-empty-rectangle problem is not worth solving here).
    """
    if resolution <= 0:
        raise ValueError("resolution must be > 0")
    grid = _occupancy_grid(placed, sheet, resolution)
    rows = len(grid)
    cols = len(grid[0]) if rows else 0

    def cell_w(c: int) -> float:
        return min(resolution, sheet.width - c * resolution)

    def cell_h(r: int) -> float:
        return min(resolution, sheet.height - r * resolution)

    best = 0.0
    for r in range(rows):
        for c in range(cols):
            if grid[r][c]:
                continue
            c_end = c
            while c_end < cols and not grid[r][c_end]:
                c_end += 1
            r_end = r + 1
            while r_end < rows and not any(grid[r_end][c:c_end]):
                r_end += 1
            width = sum(cell_w(k) for k in range(c, c_end))
            height = sum(cell_h(k) for k in range(r, r_end))
            best = max(best, width * height)
    return best


def compute_cutting_length(cut_paths: Iterable[CutPath]) -> float:
    """Sum of all cut segment lengths (mm)."""
    return total_cut_length(list(cut_paths))


def estimate_cutting_time(cut_paths: Iterable[CutPath]) -> float:
    """Minutes needed to run all segments at their own speed (mm/min)."""
    total = 0.0
    for c in cut_paths:
        speed = c.speed if c.speed > 0 else DEFAULTS.default_cut_speed
        total += c.length() / speed
    return total


def compute_statistics(
    result: PlacementResult,
    sheet: Sheet,
    pieces: Sequence[Piece],
    cut_paths: Sequence[CutPath] = (),
    *,
    resolution: float = DEFAULTS.waste_grid_resolution,
) -> Statistics:
    """
    Compute and return all key statistics for a placement.
    `pieces` is the full catalog, including pieces that were not placed.
    """
    sheet_area = sheet.area
    total_piece_area = sum(p.area for p in pieces)
    used = compute_used_area(result.placed)
    if used - sheet_area > 1e-6:
        # Overlaps could cause this too, but should be prevented upstream.
        raise ValueError(f"Used area exceeds sheet area (used={used} > sheet={sheet_area}).")

    waste = sheet_area - used
    utilization = used / sheet_area * 100.0 if sheet_area > 0 else 0.0
    n_placed = len(result.placed)

    return Statistics(
        total_pieces=len(pieces),
        placed_pieces=n_placed,
        unplaced_pieces=len(pieces) - n_placed,
        sheet_area=sheet_area,
        total_piece_area=total_piece_area,
        used_area=used,
        waste_area=waste,
        utilization_rate=utilization,
        waste_rate=100.0 - utilization,
        material_efficiency=used / total_piece_area * 100.0 if total_piece_area > 0 else 0.0,
        density=n_placed / sheet_area * 1_000_000 if sheet_area > 0 else 0.0,
        largest_waste=largest_waste_area(result.placed, sheet, resolution),
        cutting_length=compute_cutting_length(cut_paths),
        cutting_time=estimate_cutting_time(cut_paths),
    )
