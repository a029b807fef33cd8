# glass_nesting/sample_data.py
# Utilities to generate sample / random design lists for quick benchmarking and tuning.
# Helps compare strategies on realistic glass order mixes without real order data.

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple

from .types import DesignEntry


@dataclass(frozen=True)
class RandomDesignsConfig:
    seed: int = 123
    n_unique: int = 12
    qty_range: Tuple[int, int] = (1, 4)

    # size ranges (mm)
    w_range: Tuple[int, int] = (200, 1200)
    h_range: Tuple[int, int] = (200, 1000)

    # probability a design is a tall door/partition panel
    p_tall: float = 0.15
    tall_w_range: Tuple[int, int] = (600, 1000)
    tall_h_range: Tuple[int, int] = (1500, 2100)

    # probability a design is a narrow strip (transoms, shelves)
    p_strip: float = 0.20
    strip_w_range: Tuple[int, int] = (600, 1600)
    strip_h_range: Tuple[int, int] = (80, 250)

    # chance a design gets priority 2 instead of 1
    p_low_priority: float = 0.25

    thickness: float = 6.0


def generate_random_designs(cfg: RandomDesignsConfig) -> List[DesignEntry]:
    """
    Generate a list of DesignEntry with quantities, sizes and priorities.
    Designed to resemble glazing orders: a few tall panels, some strips, mostly windows.
    """
    rnd = random.Random(cfg.seed)
    designs: List[DesignEntry] = []

    for i in range(cfg.n_unique):
        r = rnd.random()

        if r < cfg.p_tall:
            w = rnd.randint(*cfg.tall_w_range)
            h = rnd.randint(*cfg.tall_h_range)
        elif r < cfg.p_tall + cfg.p_strip:
            w = rnd.randint(*cfg.strip_w_range)
            h = rnd.randint(*cfg.strip_h_range)
        else:
            w = rnd.randint(*cfg.w_range)
            h = rnd.randint(*cfg.h_range)

        designs.append(
            DesignEntry(
                design_id=f"D{i+1:02d}",
                quantity=rnd.randint(*cfg.qty_range),
                width=float(w),
                height=float(h),
                thickness=cfg.thickness,
                priority=2 if rnd.random() < cfg.p_low_priority else 1,
                name=f"Design D{i+1:02d}",
            )
        )

    return designs

