# glass_nesting/io_json.py
# Load an optimization job from JSON into (Sheet, [DesignEntry], PlacementOptions).
#
# Expected JSON shape (camelCase keys are accepted too):
# {
#   "sheet":   {"width": 3210, "height": 2250, "thickness": 6, "price_per_area": 38.5},
#   "designs": [{"design_id": "W1", "width": 800, "height": 600, "quantity": 4, "priority": 1}, ...],
#   "options": {"minimum_gap": 3, "edge_margin": 10},
#   "algorithm": "blf"
# }
#
# "sheet" may also be a string like "3210x2250".

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import PlacementOptions, parse_sheet_text
from .errors import InvalidInput
from .types import DesignEntry, Sheet


@dataclass(frozen=True)
class JobSpec:
    sheet: Sheet
    designs: List[DesignEntry]
    options: PlacementOptions
    algorithm: Optional[str] = None


def _parse_sheet(raw: Any) -> Sheet:
    if isinstance(raw, str):
        w, h = parse_sheet_text(raw)
        return Sheet(width=w, height=h)
    if isinstance(raw, Mapping):
        try:
            return Sheet.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid sheet definition {dict(raw)}: {e}") from e
    raise InvalidInput("JSON missing 'sheet' (object with width/height or 'WxH' string).")


def parse_job(data: Mapping[str, Any]) -> JobSpec:
    """
    Convert an already-decoded job dict into a JobSpec.
    - "designs" may also be called "items" or "pieces".
    - Unknown option keys are rejected.
    """
    sheet = _parse_sheet(data.get("sheet"))

    items = data.get("designs") or data.get("items") or data.get("pieces") or []
    if not items:
        raise InvalidInput("JSON missing 'designs'.")

    designs: List[DesignEntry] = []
    for it in items:
        try:
            designs.append(DesignEntry.from_dict(it))
        except InvalidInput:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid design entry {it}: {e}") from e

    options = PlacementOptions.from_dict(data.get("options") or data.get("settings") or {}).validate()
    algorithm = data.get("algorithm")
    return JobSpec(sheet=sheet, designs=designs, options=options, algorithm=str(algorithm) if algorithm else None)


def load_job_json(path: str | Path) -> JobSpec:
    """Read a job file from disk; see parse_job for the accepted shape."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise InvalidInput("Job JSON must be an object at the top level.")
    return parse_job(data)


def job_to_dict(job: JobSpec) -> Dict[str, Any]:
    """Inverse of parse_job (used to write sample jobs)."""
    out: Dict[str, Any] = {
        "sheet": {
            "width": job.sheet.width,
            "height": job.sheet.height,
            "thickness": job.sheet.thickness,
            "name": job.sheet.name,
        },
        "designs": [
            {
                "design_id": d.design_id,
                "name": d.name,
                "width": d.width,
                "height": d.height,
                "thickness": d.thickness,
                "quantity": d.quantity,
                "priority": d.priority,
            }
            for d in job.designs
        ],
        "options": job.options.to_dict(),
    }
    if job.sheet.price_per_area is not None:
        out["sheet"]["price_per_area"] = job.sheet.price_per_area
    if job.algorithm:
        out["algorithm"] = job.algorithm
    return out


def save_job_json(job: JobSpec, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(job_to_dict(job), f, ensure_ascii=False, indent=2)
    return path
