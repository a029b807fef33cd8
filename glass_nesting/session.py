# glass_nesting/session.py
# High-level optimization session that ties together:
# - input validation
# - piece catalog expansion
# - placement strategy (blf / greedy / genetic)
# - cut path generation + ordering
# - statistics
# - result validation and an in-memory history
#
# This is meant to be called from your own scripts or an API layer.
# Example:
#   from glass_nesting.session import OptimizationSession
#   session = OptimizationSession()
#   record = session.optimize(designs, sheet, algorithm="blf", options={"minimum_gap": 3})

from __future__ import annotations

import threading
import uuid
from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from functools import partial
from types import MappingProxyType
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .config import PlacementOptions
from .cutpaths import build_cut_plan
from .errors import AlgorithmFailure, InvalidInput
from .logger import Logger, get_logger
from .metrics import Statistics, compute_statistics
from .solver_bottomleft import solve_bottomleft
from .solver_genetic import GeneticParams, solve_genetic
from .solver_greedy import solve_greedy
from .types import CutPath, DesignEntry, Piece, PlacementResult, Sheet, expand_designs
from .utils import timer
from .validate import raise_on_errors, validate_result

# strategy(pieces, sheet, options, logger=run_logger) -> PlacementResult
Strategy = Callable[..., PlacementResult]
DesignLike = Union[DesignEntry, Mapping[str, Any]]

ALGORITHMS = ("blf", "genetic", "greedy")


@dataclass(frozen=True)
class OptimizationRecord:
    """
    Output of one optimization run.

    The record and its result are frozen and `result.meta` is a read-only mapping.
    The Piece and CutPath objects inside are owned by the record: consumers read
    them and must not mutate them.
    """
    id: str
    algorithm: str
    sheet: Sheet
    designs: Tuple[DesignEntry, ...]
    result: PlacementResult
    statistics: Statistics
    cut_paths: Tuple[CutPath, ...]
    execution_time: float  # seconds
    created_at: str        # ISO-8601, UTC
    options: PlacementOptions

    @property
    def placed_pieces(self) -> Tuple[Piece, ...]:
        return self.result.placed

    @property
    def unplaced_pieces(self) -> Tuple[Piece, ...]:
        return self.result.unplaced

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "algorithm": self.algorithm,
            "timestamp": self.created_at,
            "utilization_rate": self.statistics.utilization_rate,
            "waste_rate": self.statistics.waste_rate,
            "execution_time": self.execution_time,
            "piece_count": self.statistics.total_pieces,
        }


@dataclass(frozen=True)
class Comparison:
    rows: Tuple[Dict[str, Any], ...]
    best_utilization: int  # index into rows
    best_efficiency: int
    fastest: int


def _coerce_designs(designs: Optional[Sequence[DesignLike]]) -> Tuple[DesignEntry, ...]:
    if not designs:
        raise InvalidInput("No designs provided for optimization")
    out: List[DesignEntry] = []
    for d in designs:
        if isinstance(d, DesignEntry):
            out.append(d)
        elif isinstance(d, Mapping):
            try:
                out.append(DesignEntry.from_dict(d))
            except (KeyError, TypeError, ValueError) as e:
                if isinstance(e, InvalidInput):
                    raise
                raise InvalidInput(f"Invalid design entry {dict(d)}: {e}") from e
        else:
            raise InvalidInput(f"Unsupported design entry type: {type(d).__name__}")
    return tuple(out)


def _coerce_sheet(sheet: Union[Sheet, Mapping[str, Any], None]) -> Sheet:
    if sheet is None:
        raise InvalidInput("No sheet specified for optimization")
    if isinstance(sheet, Mapping):
        try:
            sheet = Sheet.from_dict(sheet)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid sheet {dict(sheet)}: {e}") from e
    if sheet.width <= 0 or sheet.height <= 0:
        raise InvalidInput(f"Invalid sheet size: {sheet.width}x{sheet.height}")
    return sheet


class OptimizationSession:
    """
    Owns the default settings, the strategy table and the run history.
    One session can serve concurrent callers: runs share no state, and the
    history append is guarded by a lock.
    """

    def __init__(
        self,
        options: Optional[PlacementOptions] = None,
        *,
        genetic_params: Optional[GeneticParams] = None,
        history_limit: Optional[int] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._settings = (options or PlacementOptions()).validate()
        self.log = logger or get_logger()
        self.strategies: Dict[str, Strategy] = {
            "blf": solve_bottomleft,
            "genetic": partial(solve_genetic, params=genetic_params or GeneticParams()),
            "greedy": solve_greedy,
        }
        self._history: Deque[OptimizationRecord] = deque(maxlen=history_limit)
        self._lock = threading.Lock()

    # --- settings ---

    @property
    def settings(self) -> PlacementOptions:
        return self._settings

    def update_settings(self, **overrides: Any) -> PlacementOptions:
        self._settings = self._settings.merged(overrides).validate()
        return self._settings

    # --- history ---

    @property
    def history(self) -> Tuple[OptimizationRecord, ...]:
        with self._lock:
            return tuple(self._history)

    @property
    def current(self) -> Optional[OptimizationRecord]:
        with self._lock:
            return self._history[-1] if self._history else None

    def history_summary(self) -> List[Dict[str, Any]]:
        return [r.summary() for r in self.history]

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()

    # --- main entry ---

    def optimize(
        self,
        designs: Optional[Sequence[DesignLike]],
        sheet: Union[Sheet, Mapping[str, Any], None],
        algorithm: str = "blf",
        options: Union[PlacementOptions, Mapping[str, Any], None] = None,
        *,
        validate: bool = True,
    ) -> OptimizationRecord:
        """
        Run one optimization end-to-end and append the record to the history.

        Raises InvalidInput before any placement work for bad requests, and
        AlgorithmFailure if anything goes wrong while placing.
        """
        entries = _coerce_designs(designs)
        sheet = _coerce_sheet(sheet)
        strategy = self.strategies.get(algorithm)
        if strategy is None:
            raise InvalidInput(f"Unknown algorithm: {algorithm}")
        if isinstance(options, PlacementOptions):
            opts = options.validate()
        else:
            opts = self._settings.merged(options).validate()
        pieces = expand_designs(entries)

        run_id = uuid.uuid4().hex
        log = self.log.child(run=run_id[:8])
        log.info(
            "optimization started",
            algorithm=algorithm,
            pieces=len(pieces),
            sheet=f"{sheet.width:g}x{sheet.height:g}",
        )

        with timer("optimize") as t:
            try:
                result = strategy(pieces, sheet, opts, logger=log)
                cut_paths = build_cut_plan(result.placed, opts.minimum_gap)
                if validate:
                    issues = validate_result(result, sheet, opts, total_pieces=len(pieces), cut_paths=cut_paths)
                    raise_on_errors(issues)
                stats = compute_statistics(result, sheet, pieces, cut_paths)
            except InvalidInput:
                raise
            except Exception as e:
                log.error("optimization failed", error=repr(e))
                raise AlgorithmFailure.wrap(e) from e

        record = OptimizationRecord(
            id=run_id,
            algorithm=algorithm,
            sheet=sheet,
            designs=entries,
            result=replace(result, meta=MappingProxyType(dict(result.meta))),
            statistics=stats,
            cut_paths=tuple(cut_paths),
            execution_time=t["seconds"],
            created_at=datetime.now(timezone.utc).isoformat(),
            options=opts,
        )

        if stats.unplaced_pieces:
            log.warn("pieces could not be placed", unplaced=stats.unplaced_pieces, total=stats.total_pieces)
        log.info(
            "optimization completed",
            utilization=stats.utilization_rate,
            placed=stats.placed_pieces,
            seconds=record.execution_time,
        )

        with self._lock:
            self._history.append(record)
        return record


def compare_optimizations(records: Sequence[OptimizationRecord]) -> Comparison:
    """Side-by-side numbers plus the best utilization, best efficiency and fastest run."""
    if not records or len(records) < 2:
        raise InvalidInput("At least two optimizations required for comparison")

    rows = tuple(
        {
            "id": r.id,
            "algorithm": r.algorithm,
            "utilization_rate": r.statistics.utilization_rate,
            "waste_rate": r.statistics.waste_rate,
            "placed_pieces": r.statistics.placed_pieces,
            "execution_time": r.execution_time,
            "material_efficiency": r.statistics.material_efficiency,
        }
        for r in records
    )
    idx = range(len(rows))
    return Comparison(
        rows=rows,
        best_utilization=max(idx, key=lambda i: (rows[i]["utilization_rate"], -i)),
        best_efficiency=max(idx, key=lambda i: (rows[i]["material_efficiency"], -i)),
        fastest=min(idx, key=lambda i: (rows[i]["execution_time"], i)),
    )


def optimize(
    designs: Optional[Sequence[DesignLike]],
    sheet: Union[Sheet, Mapping[str, Any], None],
    algorithm: str = "blf",
    options: Union[PlacementOptions, Mapping[str, Any], None] = None,
    **session_kwargs: Any,
) -> OptimizationRecord:
    """One-shot convenience wrapper around a throwaway OptimizationSession."""
    return OptimizationSession(**session_kwargs).optimize(designs, sheet, algorithm, options)
