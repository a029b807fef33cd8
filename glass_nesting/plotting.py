# glass_nesting/plotting.py
# Minimal matplotlib visualization of one optimization record:
# sheet outline, edge margin frame, placed pieces and (optionally) the ordered cut paths.

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

if TYPE_CHECKING:
    from .session import OptimizationRecord


@dataclass(frozen=True)
class PlotStyle:
    show_labels: bool = True
    show_dims: bool = True
    show_margin_frame: bool = True
    show_cuts: bool = False
    show_cut_order: bool = False
    show_grid: bool = False
    font_size: int = 7
    padding_mm: int = 40  # empty margin around the sheet in drawing units


def _hash_color(key: str) -> Tuple[float, float, float]:
    """Deterministic pastel-ish color from a string."""
    h = 2166136261
    for ch in key.encode("utf-8"):
        h ^= ch
        h *= 16777619
        h &= 0xFFFFFFFF
    # map to [0.4..0.9] so glass stays light
    r = 0.4 + ((h >> 0) & 0xFF) / 255 * 0.5
    g = 0.4 + ((h >> 8) & 0xFF) / 255 * 0.5
    b = 0.4 + ((h >> 16) & 0xFF) / 255 * 0.5
    return (r, g, b)


def _title(record: "OptimizationRecord") -> str:
    s = record.statistics
    sh = record.sheet
    bits = [
        f"{sh.name} {sh.width:g}×{sh.height:g}",
        record.algorithm,
        f"placed {s.placed_pieces}/{s.total_pieces}",
        f"utilization {s.utilization_rate:.1f}%",
    ]
    if record.cut_paths:
        bits.append(f"cut {s.cutting_length:,.0f} mm")
    return " | ".join(bits)


def plot_record(
    record: "OptimizationRecord",
    style: Optional[PlotStyle] = None,
    figsize: Optional[Tuple[float, float]] = None,
) -> plt.Figure:
    """
    Draw the sheet with its placed pieces in one matplotlib figure.
    Coordinates are sheet coordinates in mm, origin at the bottom-left corner.
    """
    style = style or PlotStyle()
    sheet = record.sheet
    W, H = sheet.width, sheet.height

    if figsize is None:
        # keep the sheet aspect ratio, ~8 inches wide
        figsize = (8.0, max(3.0, 8.0 * H / W))

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.add_patch(Rectangle((0, 0), W, H, fill=False, linewidth=1.2))

    m = record.options.edge_margin
    if style.show_margin_frame and m > 0:
        ax.add_patch(Rectangle((m, m), W - 2 * m, H - 2 * m, fill=False, linewidth=0.8, linestyle="--"))

    for p in record.result.placed:
        x, y, w, h = p.footprint()
        rect = Rectangle((x, y), w, h, facecolor=_hash_color(p.design_id), edgecolor="black", linewidth=0.8, alpha=0.85)
        ax.add_patch(rect)

        if style.show_labels or style.show_dims:
            lines: List[str] = []
            if style.show_labels:
                lines.append(p.uid)
            if style.show_dims:
                lines.append(f"{p.width:g}×{p.height:g}" + (" R" if p.rotation == 90 else ""))
            ax.text(
                x + w / 2,
                y + h / 2,
                "\n".join(lines),
                ha="center",
                va="center",
                fontsize=style.font_size,
                color="black",
            )

    if style.show_cuts:
        for c in record.cut_paths:
            ax.plot([c.start_x, c.end_x], [c.start_y, c.end_y], linewidth=0.6, color="red")
            if style.show_cut_order:
                ax.text(
                    (c.start_x + c.end_x) / 2,
                    (c.start_y + c.end_y) / 2,
                    str(c.order),
                    fontsize=max(4, style.font_size - 2),
                    color="red",
                )

    ax.set_title(_title(record), fontsize=10)
    ax.set_aspect("equal", adjustable="box")

    pad = style.padding_mm
    ax.set_xlim(-pad, W + pad)
    ax.set_ylim(-pad, H + pad)
    if style.show_grid:
        ax.grid(True, linewidth=0.3)
    else:
        ax.grid(False)
    ax.tick_params(labelbottom=False, labelleft=False, bottom=False, left=False)

    fig.tight_layout()
    return fig


def show_record(record: "OptimizationRecord", style: Optional[PlotStyle] = None) -> None:
    """Convenience wrapper: plot and show."""
    plot_record(record, style=style)
    plt.show()


def save_record_png(
    record: "OptimizationRecord",
    path: str,
    style: Optional[PlotStyle] = None,
    dpi: int = 150,
) -> None:
    """Save the layout figure to PNG."""
    fig = plot_record(record, style=style)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
