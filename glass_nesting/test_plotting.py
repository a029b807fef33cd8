# glass_nesting/test_plotting.py
#   pytest glass_nesting/test_plotting.py

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt

from glass_nesting.logger import Logger
from glass_nesting.plotting import PlotStyle, plot_record, save_record_png
from glass_nesting.session import OptimizationSession
from glass_nesting.types import DesignEntry, Sheet


def _record():
    session = OptimizationSession(logger=Logger(enabled=False))
    return session.optimize(
        [DesignEntry("A", 3, 500, 300), DesignEntry("B", 2, 200, 700)],
        Sheet(2000, 1200),
        "blf",
    )


def test_plot_draws_every_piece() -> None:
    record = _record()
    fig = plot_record(record, PlotStyle(show_margin_frame=True))
    ax = fig.axes[0]

    # sheet outline + margin frame + one patch per placed piece
    assert len(ax.patches) == 2 + record.statistics.placed_pieces
    assert "blf" in ax.get_title()
    plt.close(fig)


def test_plot_with_cuts() -> None:
    record = _record()
    fig = plot_record(record, PlotStyle(show_cuts=True, show_cut_order=True, show_labels=False))
    assert len(fig.axes[0].lines) == len(record.cut_paths)
    plt.close(fig)


def test_save_png(tmp_path) -> None:
    path = tmp_path / "layout.png"
    save_record_png(_record(), str(path))
    assert path.exists()
    assert path.stat().st_size > 0
