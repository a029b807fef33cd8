# glass_nesting/solver_bottomleft.py
# Bottom-Left-Fill (BLF) heuristic for single-sheet nesting.
#
# Free space is tracked as a list of (possibly overlapping) free rectangles.
# Each piece is anchored at the lower-left corner of a free rectangle; the
# candidate with the smallest x + y wins. After a placement every free
# rectangle touching the placed piece (grown by the gap) is split into up to
# four residual rectangles.

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .config import DEFAULTS, PlacementOptions, usable_bounds
from .logger import Logger, get_logger
from .types import EPS, FreeRect, Piece, PlacementResult, Sheet

# (x, y, w, h, rotation)
Candidate = Tuple[float, float, float, float, int]


class FreeSpace:
    """Mutable set of free rectangles for one sheet."""

    def __init__(self, x0: float, y0: float, x1: float, y1: float, min_size: float = DEFAULTS.min_free_rect):
        self.min_size = min_size
        self.rects: List[FreeRect] = []
        if x1 - x0 > 0 and y1 - y0 > 0:
            self.rects.append(FreeRect(x0, y0, x1 - x0, y1 - y0))

    @classmethod
    def for_sheet(cls, sheet: Sheet, options: PlacementOptions) -> "FreeSpace":
        return cls(*usable_bounds(sheet, options))

    def find_bottom_left(self, orientations: Sequence[Tuple[float, float, int]]) -> Optional[Candidate]:
        """Lowest x + y anchor over all free rects and orientations (first found wins ties)."""
        best: Optional[Candidate] = None
        best_score = float("inf")
        for f in self.rects:
            for w, h, rot in orientations:
                if f.fits(w, h):
                    score = f.x + f.y
                    if score < best_score:
                        best_score = score
                        best = (f.x, f.y, w, h, rot)
        return best

    def find_first_fit(self, orientations: Sequence[Tuple[float, float, int]]) -> Optional[Candidate]:
        for f in self.rects:
            for w, h, rot in orientations:
                if f.fits(w, h):
                    return f.x, f.y, w, h, rot
        return None

    def occupy(self, x: float, y: float, w: float, h: float, gap: float = 0.0) -> None:
        """Remove the placed rectangle (grown by `gap`) from the free space."""
        left, bottom = x - gap, y - gap
        right, top = x + w + gap, y + h + gap

        kept: List[FreeRect] = []
        residuals: List[FreeRect] = []
        for f in self.rects:
            if not f.intersects(left, bottom, right - left, top - bottom):
                kept.append(f)
                continue
            residuals.extend(_split(f, left, bottom, right, top))

        kept.extend(r for r in residuals if r.width >= self.min_size and r.height >= self.min_size)
        self.rects = _prune_contained(kept)

    def snapshot(self) -> Tuple[FreeRect, ...]:
        return tuple(self.rects)


def _split(f: FreeRect, left: float, bottom: float, right: float, top: float) -> List[FreeRect]:
    parts = [
        FreeRect(f.x, f.y, left - f.x, f.height),        # left of
        FreeRect(right, f.y, f.right - right, f.height),  # right of
        FreeRect(f.x, f.y, f.width, bottom - f.y),        # below
        FreeRect(f.x, top, f.width, f.top - top),         # above
    ]
    return [r for r in parts if r.width > EPS and r.height > EPS]


def _prune_contained(rects: List[FreeRect]) -> List[FreeRect]:
    """
    Drop rectangles fully inside another one (keep the first of identical twins).

    Whatever fits a contained rectangle also fits its container at an x + y no
    larger, so the best BLF score is unchanged. The tie-break can still differ:
    when a contained rectangle shares its container's corner, sits earlier in
    the list and fits only the rotated piece, it would have won the tie with the
    rotated placement. After pruning the container is scanned and the unrotated
    placement wins. First-fit scans in list order, so its pick may change too.
    """
    out: List[FreeRect] = []
    for i, r in enumerate(rects):
        redundant = False
        for j, o in enumerate(rects):
            if i != j and o.contains(r) and (o != r or j < i):
                redundant = True
                break
        if not redundant:
            out.append(r)
    return out


def pack_in_order(
    ordered: Sequence[Piece],
    sheet: Sheet,
    options: PlacementOptions,
    *,
    first_fit: bool = False,
) -> Tuple[List[Piece], List[Piece], FreeSpace]:
    """
    Place pieces one by one in the given order. Pieces are mutated in place,
    so callers pass their own copies.
    Returns (placed, unplaced, free_space).
    """
    space = FreeSpace.for_sheet(sheet, options)
    placed: List[Piece] = []
    unplaced: List[Piece] = []

    for piece in ordered:
        orientations = piece.orientations(options.allow_rotation)
        if first_fit:
            cand = space.find_first_fit(orientations)
        else:
            cand = space.find_bottom_left(orientations)

        if cand is None:
            unplaced.append(piece)
            continue

        x, y, w, h, rot = cand
        piece.place(x, y, rot)
        placed.append(piece)
        space.occupy(x, y, w, h, options.minimum_gap)

    return placed, unplaced, space


def solve_bottomleft(
    pieces: Sequence[Piece],
    sheet: Sheet,
    options: PlacementOptions,
    logger: Optional[Logger] = None,
) -> PlacementResult:
    """
    Bottom-Left-Fill: largest area first, each piece at the free-rect corner
    with minimal x + y. Deterministic; ignores options.time_limit.
    """
    work = [p.fresh_copy() for p in pieces]
    ordered = sorted(work, key=lambda p: -p.area)  # stable: ties keep input order

    placed, unplaced, space = pack_in_order(ordered, sheet, options)
    (logger or get_logger()).debug("blf packed", placed=len(placed), unplaced=len(unplaced), free_rects=len(space.rects))

    return PlacementResult(
        placed=tuple(placed),
        unplaced=tuple(unplaced),
        leftover=space.snapshot(),
        meta={"strategy": "blf", "free_rects": len(space.rects)},
    )
