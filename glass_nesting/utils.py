# glass_nesting/utils.py
# Small utilities used across the project:
# - timing context manager
# - stable sorting helper for readable output
# - simple JSON export for optimization records (placements + cuts + statistics)
#
# Keeps dependencies minimal (stdlib only).

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, List

from .types import Piece

if TYPE_CHECKING:
    from .session import OptimizationRecord


@contextmanager
def timer(label: str = "timer") -> Iterator[Dict[str, float]]:
    """
    Usage:
      with timer("optimize") as t:
          ...
      print(t["seconds"])
    """
    t0 = time.perf_counter()
    payload: Dict[str, float] = {}
    try:
        yield payload
    finally:
        payload["seconds"] = time.perf_counter() - t0


def _to_jsonable(obj: Any) -> Any:
    """Convert dataclasses and other objects to JSON-serializable structures."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_jsonable(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


def _piece_to_dict(p: Piece) -> Dict[str, Any]:
    return {
        "id": p.uid,
        "design_id": p.design_id,
        "name": p.name,
        "width": p.width,
        "height": p.height,
        "thickness": p.thickness,
        "area": p.area,
        "priority": p.priority,
        "placed": p.placed,
        "x": p.x,
        "y": p.y,
        "rotation": p.rotation,
        "flipped": p.flipped,
    }


def record_to_dict(record: "OptimizationRecord") -> Dict[str, Any]:
    """
    Convert an OptimizationRecord to a JSON-friendly dict.
    Shape follows the usual API response: sheet, placed/unplaced pieces,
    statistics, ordered cut paths.
    """
    return {
        "id": record.id,
        "algorithm": record.algorithm,
        "timestamp": record.created_at,
        "execution_time": record.execution_time,
        "sheet": _to_jsonable(record.sheet),
        "options": record.options.to_dict(),
        "designs": _to_jsonable(list(record.designs)),
        "placed_pieces": [_piece_to_dict(p) for p in sort_pieces_readable(list(record.result.placed))],
        "unplaced_pieces": [_piece_to_dict(p) for p in record.result.unplaced],
        "statistics": record.statistics.to_dict(),
        "cut_paths": [
            {
                "id": c.id,
                "type": c.orientation,
                "start_x": c.start_x,
                "start_y": c.start_y,
                "end_x": c.end_x,
                "end_y": c.end_y,
                "length": c.length(),
                "order": c.order,
                "tool_type": c.tool_type,
                "speed": c.speed,
                "pieces": list(c.pieces),
            }
            for c in record.cut_paths
        ],
        "meta": _to_jsonable(record.result.meta),
    }


def save_record_json(record: "OptimizationRecord", path: str | Path, *, indent: int = 2) -> Path:
    """Save an optimization record into JSON for debugging/integration."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(record_to_dict(record), f, ensure_ascii=False, indent=indent)
    return path


def sort_pieces_readable(pieces: List[Piece]) -> List[Piece]:
    """
    Stable readable ordering: by y, then x, then uid.
    Helpful for debugging diffs.
    """
    return sorted(pieces, key=lambda p: (p.y, p.x, p.uid))
