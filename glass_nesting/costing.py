# glass_nesting/costing.py
# Material cost utilities:
# - price of the whole sheet, of the glass that ends up in pieces, and of the waste
#
# Notes:
# - Sheet.price_per_area is currency per m²; areas in this project are mm².
# - If the sheet carries no price, an explicit price can be passed instead.

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .session import OptimizationRecord

MM2_PER_M2 = 1_000_000.0


@dataclass(frozen=True)
class MaterialCost:
    price_per_area: float  # per m²
    sheet_area_m2: float
    used_area_m2: float
    waste_area_m2: float
    sheet_cost: float
    used_cost: float
    waste_cost: float

    @property
    def waste_share(self) -> float:
        """Fraction of the sheet cost spent on waste (0..1)."""
        return self.waste_cost / self.sheet_cost if self.sheet_cost > 0 else 0.0


def compute_material_cost(
    sheet_area: float,
    used_area: float,
    price_per_area: float,
) -> MaterialCost:
    if price_per_area < 0:
        raise ValueError(f"price_per_area must be >= 0 (got {price_per_area})")
    if used_area - sheet_area > 1e-6:
        raise ValueError(f"used_area {used_area} exceeds sheet_area {sheet_area}")

    sheet_m2 = sheet_area / MM2_PER_M2
    used_m2 = used_area / MM2_PER_M2
    waste_m2 = max(0.0, sheet_m2 - used_m2)

    return MaterialCost(
        price_per_area=price_per_area,
        sheet_area_m2=sheet_m2,
        used_area_m2=used_m2,
        waste_area_m2=waste_m2,
        sheet_cost=sheet_m2 * price_per_area,
        used_cost=used_m2 * price_per_area,
        waste_cost=waste_m2 * price_per_area,
    )


def record_material_cost(
    record: "OptimizationRecord",
    price_per_area: Optional[float] = None,
) -> Optional[MaterialCost]:
    """
    Cost breakdown for one optimization record.
    Returns None when neither the sheet nor the caller provides a price.
    """
    price = price_per_area if price_per_area is not None else record.sheet.price_per_area
    if price is None:
        return None
    stats = record.statistics
    return compute_material_cost(stats.sheet_area, stats.used_area, price)
