# glass_nesting/solver_greedy.py
# Greedy first-fit heuristic: a fast baseline.
# Same free-rectangle bookkeeping as BLF, but takes the first position that fits
# instead of searching for the lowest-left one.

from __future__ import annotations

from typing import Optional, Sequence

from .config import PlacementOptions
from .logger import Logger, get_logger
from .solver_bottomleft import pack_in_order
from .types import Piece, PlacementResult, Sheet


def greedy_order(pieces: Sequence[Piece]) -> list:
    """Priority ascending, then area descending (stable)."""
    return sorted(pieces, key=lambda p: (p.priority, -p.area))


def solve_greedy(
    pieces: Sequence[Piece],
    sheet: Sheet,
    options: PlacementOptions,
    logger: Optional[Logger] = None,
) -> PlacementResult:
    work = [p.fresh_copy() for p in pieces]
    placed, unplaced, space = pack_in_order(greedy_order(work), sheet, options, first_fit=True)
    (logger or get_logger()).debug("greedy packed", placed=len(placed), unplaced=len(unplaced))

    return PlacementResult(
        placed=tuple(placed),
        unplaced=tuple(unplaced),
        leftover=space.snapshot(),
        meta={"strategy": "greedy", "free_rects": len(space.rects)},
    )
