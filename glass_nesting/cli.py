# glass_nesting/cli.py
# Command-line runner for a JSON job (sheet + designs + options).
#
# Usage:
#   python -m glass_nesting --job job.json
#   python -m glass_nesting --job job.json --algorithm genetic --time 30 --target 0.9 --seed 7
#
# Exports:
#   python -m glass_nesting --job job.json --out out/ --png layout.png --no_plot

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from .costing import record_material_cost
from .errors import NestingError
from .io_json import load_job_json
from .logger import get_logger, set_verbose
from .plotting import PlotStyle, save_record_png
from .session import ALGORITHMS, OptimizationSession
from .solver_genetic import GeneticParams
from .utils import save_record_json


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Glass sheet nesting optimizer (single sheet, rectangular pieces).")
    p.add_argument("--job", type=str, required=True, help="Path to job JSON (sheet/designs/options)")
    p.add_argument("--algorithm", type=str, default="", choices=["", *ALGORITHMS], help="Placement strategy (default: job's or blf)")

    # Option overrides (unset = keep the job's value)
    p.add_argument("--gap", type=float, default=None, help="Minimum gap between pieces (mm)")
    p.add_argument("--margin", type=float, default=None, help="Edge margin (mm)")
    p.add_argument("--no_rotation", action="store_true", help="Disable 90° rotation")
    p.add_argument("--time", type=float, default=None, help="Time limit (seconds, genetic only)")
    p.add_argument("--target", type=float, default=None, help="Quality target 0..1 (genetic only)")

    # Genetic tuning
    p.add_argument("--seed", type=int, default=None, help="Random seed for the genetic strategy")
    p.add_argument("--population", type=int, default=50, help="Genetic: population size")
    p.add_argument("--generations", type=int, default=100, help="Genetic: max generations")

    # Output
    p.add_argument("--out", type=str, default="", help="Output directory for the JSON record (optional)")
    p.add_argument("--prefix", type=str, default="result", help="Export filename prefix")
    p.add_argument("--png", type=str, default="", help="Save plot as PNG file (optional)")

    # Plot
    p.add_argument("--no_plot", action="store_true", help="Do not show matplotlib plot")
    p.add_argument("--no_labels", action="store_true", help="Hide piece labels in plot")
    p.add_argument("--cuts", action="store_true", help="Draw cut paths in plot")

    p.add_argument("--verbose", action="store_true", help="Print strategy progress")
    return p


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if args.gap is not None:
        out["minimum_gap"] = args.gap
    if args.margin is not None:
        out["edge_margin"] = args.margin
    if args.no_rotation:
        out["allow_rotation"] = False
    if args.time is not None:
        out["time_limit"] = args.time
    if args.target is not None:
        out["quality_target"] = args.target
    return out


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    set_verbose(bool(args.verbose))
    log = get_logger()

    job_path = Path(args.job)
    if not job_path.exists():
        raise SystemExit(f"Job JSON not found: {job_path}")

    try:
        job = load_job_json(job_path)
        algorithm = args.algorithm or job.algorithm or "blf"
        session = OptimizationSession(
            job.options,
            genetic_params=GeneticParams(
                population_size=int(args.population),
                max_generations=int(args.generations),
                seed=args.seed,
            ),
        )
        record = session.optimize(job.designs, job.sheet, algorithm, _overrides(args))
    except NestingError as e:
        log.error("job failed", error=str(e))
        raise SystemExit(1) from e

    s = record.statistics
    print(f"Algorithm: {record.algorithm}")
    print(f"Sheet: {record.sheet.width:g}x{record.sheet.height:g} mm  margin={record.options.edge_margin:g}  gap={record.options.minimum_gap:g}")
    print(f"Pieces placed: {s.placed_pieces}/{s.total_pieces}")
    print(f"Utilization: {s.utilization_rate:.2f}%  waste: {s.waste_rate:.2f}%")
    print(f"Material efficiency: {s.material_efficiency:.2f}%")
    print(f"Largest waste area: {s.largest_waste:,.0f} mm²")
    print(f"Cut paths: {len(record.cut_paths)}  length={s.cutting_length:,.0f} mm  time≈{s.cutting_time:.1f} min")
    print(f"Execution time: {record.execution_time:.3f} s")

    cost = record_material_cost(record)
    if cost is not None:
        print(
            f"Material cost: sheet={cost.sheet_cost:.2f}  used={cost.used_cost:.2f}  "
            f"waste={cost.waste_cost:.2f} ({cost.waste_share * 100:.1f}%)"
        )

    for p in record.unplaced_pieces:
        print(f"- unplaced: {p.uid} ({p.width:g}x{p.height:g})")

    style = PlotStyle(show_labels=not args.no_labels, show_cuts=bool(args.cuts))

    if args.out.strip():
        outp = Path(args.out.strip())
        path = save_record_json(record, outp / f"{args.prefix}.json")
        print(f"Exported JSON to: {path}")

    if args.png.strip():
        png_path = args.png.strip()
        save_record_png(record, png_path, style=style)
        print(f"Layout saved to: {png_path}")

    if not args.no_plot:
        from .plotting import show_record
        show_record(record, style=style)


if __name__ == "__main__":
    main()
