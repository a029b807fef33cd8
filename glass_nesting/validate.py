# glass_nesting/validate.py
# Validation utilities:
# - check placed pieces fit within the sheet interior (edge margin applied)
# - check no two placed pieces come closer than the minimum gap
# - check piece conservation and cut path ordering
#
# Useful both during development and to sanity-check strategy output.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .config import PlacementOptions, usable_bounds
from .types import EPS, CutPath, Piece, PlacementResult, Sheet, check_no_overlap


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    piece_uid: Optional[str] = None


def _fits(sheet: Sheet, options: PlacementOptions, p: Piece) -> bool:
    x0, y0, x1, y1 = usable_bounds(sheet, options)
    x, y, w, h = p.footprint()
    return x >= x0 - EPS and y >= y0 - EPS and x + w <= x1 + EPS and y + h <= y1 + EPS


def validate_placements(sheet: Sheet, options: PlacementOptions, placed: Iterable[Piece]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for p in placed:
        if not p.placed:
            issues.append(ValidationIssue(level="ERROR", message="Piece reported as placed but not marked placed", piece_uid=p.uid))
        if p.rotation not in (0, 90):
            issues.append(ValidationIssue(level="ERROR", message=f"Unsupported rotation {p.rotation}", piece_uid=p.uid))
        if not _fits(sheet, options, p):
            x, y, w, h = p.footprint()
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=(
                        f"Piece out of usable bounds: x={x}, y={y}, w={w}, h={h}, "
                        f"sheet={sheet.width}x{sheet.height}, margin={options.edge_margin}"
                    ),
                    piece_uid=p.uid,
                )
            )
    return issues


def validate_no_overlap(placed: Iterable[Piece], gap: float) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    try:
        check_no_overlap(list(placed), gap)
    except ValueError as e:
        issues.append(ValidationIssue(level="ERROR", message=str(e)))
    return issues


def validate_cut_paths(paths: Sequence[CutPath]) -> List[ValidationIssue]:
    """
    Lightweight cut validation:
    - order fields form the contiguous sequence 1..N in list order
    - segments are axis-aligned and match their orientation
    """
    issues: List[ValidationIssue] = []
    for k, c in enumerate(paths, start=1):
        if c.order != k:
            issues.append(ValidationIssue(level="ERROR", message=f"Cut {c.id} has order {c.order}, expected {k}"))
        if c.orientation == "horizontal" and abs(c.start_y - c.end_y) > EPS:
            issues.append(ValidationIssue(level="ERROR", message=f"Horizontal cut {c.id} is not horizontal"))
        if c.orientation == "vertical" and abs(c.start_x - c.end_x) > EPS:
            issues.append(ValidationIssue(level="ERROR", message=f"Vertical cut {c.id} is not vertical"))
    return issues


def validate_result(
    result: PlacementResult,
    sheet: Sheet,
    options: PlacementOptions,
    total_pieces: Optional[int] = None,
    cut_paths: Optional[Sequence[CutPath]] = None,
) -> List[ValidationIssue]:
    """
    Validate an entire placement result.
    Returns a list of issues (empty if OK).
    """
    issues: List[ValidationIssue] = []
    issues.extend(validate_placements(sheet, options, result.placed))
    issues.extend(validate_no_overlap(result.placed, options.minimum_gap))

    if total_pieces is not None and result.total != total_pieces:
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Piece count mismatch: placed+unplaced={result.total}, expected {total_pieces}",
            )
        )

    if cut_paths is not None:
        issues.extend(validate_cut_paths(cut_paths))

    if result.unplaced:
        issues.append(ValidationIssue(level="WARN", message=f"{len(result.unplaced)} piece(s) did not fit on the sheet"))

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "\n".join(f"[{e.level}] piece={e.piece_uid} :: {e.message}" for e in errs)
        raise ValueError("Validation failed:\n" + msg)
