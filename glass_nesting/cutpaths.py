# glass_nesting/cutpaths.py
# Cut path generation for a placed layout:
# - order pieces row by row (rows = y-centers within a tolerance), left to right
# - four straight segments per piece, offset outward by half the gap (kerf)
# - nearest-neighbor ordering of segments to keep idle tool travel short
#
# The ordering is a greedy heuristic, not an optimal tour.

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .config import DEFAULTS
from .types import CutPath, Piece

Point = Tuple[float, float]


def sort_pieces_for_cutting(
    placed: Sequence[Piece],
    row_tolerance: float = DEFAULTS.row_tolerance,
) -> List[Piece]:
    """
    Group pieces into rows (y-center within `row_tolerance` of the row's first
    piece), rows bottom to top, pieces left to right inside a row.
    """
    by_center = sorted(placed, key=lambda p: (p.y + p.placed_height / 2, p.x))
    rows: List[List[Piece]] = []
    anchor = 0.0
    for p in by_center:
        yc = p.y + p.placed_height / 2
        if not rows or yc - anchor > row_tolerance:
            rows.append([p])
            anchor = yc
        else:
            rows[-1].append(p)

    out: List[Piece] = []
    for row in rows:
        out.extend(sorted(row, key=lambda p: p.x))
    return out


def generate_cut_paths(
    placed: Sequence[Piece],
    gap: float = 0.0,
    *,
    speed: float = DEFAULTS.default_cut_speed,
) -> List[CutPath]:
    """
    Four segments per piece tracing its outline counter-clockwise
    (bottom, right, top, left), pushed outward by gap / 2.
    Returned in generation order; see order_cut_paths for the tool order.
    """
    m = gap / 2.0
    paths: List[CutPath] = []
    n = 0

    def add(orientation: str, sx: float, sy: float, ex: float, ey: float, uid: str) -> None:
        nonlocal n
        n += 1
        paths.append(
            CutPath(
                id=f"cut-{n}",
                orientation=orientation,
                start_x=sx,
                start_y=sy,
                end_x=ex,
                end_y=ey,
                order=n,
                speed=speed,
                pieces=(uid,),
            )
        )

    for p in sort_pieces_for_cutting(placed):
        x0, y0 = p.x - m, p.y - m
        x1, y1 = p.x + p.placed_width + m, p.y + p.placed_height + m
        add("horizontal", x0, y0, x1, y0, p.uid)  # bottom
        add("vertical", x1, y0, x1, y1, p.uid)    # right
        add("horizontal", x1, y1, x0, y1, p.uid)  # top
        add("vertical", x0, y1, x0, y0, p.uid)    # left

    return paths


def order_cut_paths(paths: Sequence[CutPath], start: Point = (0.0, 0.0)) -> List[CutPath]:
    """
    Nearest-neighbor tour: from the tool position pick the segment whose start
    point is closest, move the tool to its end point, repeat.
    Rewrites `order` to 1..N on the segments and returns them in that order.
    """
    remaining = list(paths)
    ordered: List[CutPath] = []
    cx, cy = start

    while remaining:
        best_i = 0
        best_d = math.inf
        for i, c in enumerate(remaining):
            d = math.hypot(c.start_x - cx, c.start_y - cy)
            if d < best_d:
                best_d = d
                best_i = i
        chosen = remaining.pop(best_i)
        chosen.order = len(ordered) + 1
        ordered.append(chosen)
        cx, cy = chosen.end_x, chosen.end_y

    return ordered


def travel_distance(paths: Sequence[CutPath], start: Point = (0.0, 0.0)) -> float:
    """Idle (non-cutting) tool travel when running `paths` in the given sequence."""
    total = 0.0
    cx, cy = start
    for c in paths:
        total += math.hypot(c.start_x - cx, c.start_y - cy)
        cx, cy = c.end_x, c.end_y
    return total


def build_cut_plan(placed: Sequence[Piece], gap: float = 0.0, start: Point = (0.0, 0.0)) -> List[CutPath]:
    """generate_cut_paths + order_cut_paths."""
    return order_cut_paths(generate_cut_paths(placed, gap), start)


def total_cut_length(paths: Sequence[CutPath]) -> float:
    return sum(c.length() for c in paths)
