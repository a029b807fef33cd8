# glass_nesting/__init__.py
"""
Glass sheet nesting package (single sheet, rectangular pieces).

Current state:
- Three interchangeable placement strategies on one stock sheet:
  - bottom-left fill over a free-rectangle list
  - greedy first-fit in priority order
  - genetic search over piece positions (seeded from the two above)
- edge margin + minimum gap (kerf) honored by every strategy
- optional 90° rotation per run
- utilization / waste statistics incl. a grid-approximated largest waste area
- four-segment cut paths per piece with nearest-neighbor ordering
- session object with run history and side-by-side comparison
- matplotlib visualization of a layout
"""

from .errors import AlgorithmFailure, InvalidInput, NestingError

from .types import (
    Sheet,
    DesignEntry,
    Piece,
    FreeRect,
    PlacementResult,
    CutPath,
    expand_designs,
)

from .config import PlacementOptions, make_default_sheet

from .metrics import Statistics, compute_statistics, largest_waste_area

from .cutpaths import build_cut_plan, generate_cut_paths, order_cut_paths, sort_pieces_for_cutting

from .solver_bottomleft import solve_bottomleft
from .solver_greedy import solve_greedy
from .solver_genetic import GeneticParams, solve_genetic

from .session import (
    Comparison,
    OptimizationRecord,
    OptimizationSession,
    compare_optimizations,
    optimize,
)

from .plotting import (
    PlotStyle,
    plot_record,
    show_record,
    save_record_png,
)

__all__ = [
    # errors
    "NestingError",
    "InvalidInput",
    "AlgorithmFailure",
    # types
    "Sheet",
    "DesignEntry",
    "Piece",
    "FreeRect",
    "PlacementResult",
    "CutPath",
    "expand_designs",
    # config
    "PlacementOptions",
    "make_default_sheet",
    # metrics
    "Statistics",
    "compute_statistics",
    "largest_waste_area",
    # cut paths
    "build_cut_plan",
    "generate_cut_paths",
    "order_cut_paths",
    "sort_pieces_for_cutting",
    # strategies
    "solve_bottomleft",
    "solve_greedy",
    "GeneticParams",
    "solve_genetic",
    # session
    "Comparison",
    "OptimizationRecord",
    "OptimizationSession",
    "compare_optimizations",
    "optimize",
    # plotting
    "PlotStyle",
    "plot_record",
    "show_record",
    "save_record_png",
]
