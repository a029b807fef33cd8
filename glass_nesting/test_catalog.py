# glass_nesting/test_catalog.py
# Catalog expansion, input parsing and option handling.
#   pytest glass_nesting/test_catalog.py

from __future__ import annotations

import pytest

from glass_nesting.config import PlacementOptions, make_default_sheet, parse_sheet_text, usable_bounds
from glass_nesting.errors import InvalidInput
from glass_nesting.types import CutPath, DesignEntry, Piece, Sheet, check_no_overlap, expand_designs, rects_conflict


def test_expand_designs_ids_and_order() -> None:
    pieces = expand_designs(
        [
            DesignEntry("A", 2, 300, 200, priority=2),
            DesignEntry("B", 1, 100, 100, name="Shelf"),
        ]
    )

    assert [p.uid for p in pieces] == ["A-1", "A-2", "B-1"]
    assert pieces[0].area == 60000
    assert pieces[0].priority == 2
    assert pieces[0].name == "Design A"
    assert pieces[2].name == "Shelf"
    assert not any(p.placed for p in pieces)


def test_expand_designs_rejects_bad_quantity() -> None:
    with pytest.raises(InvalidInput):
        expand_designs([DesignEntry("A", 0, 100, 100)])
    with pytest.raises(InvalidInput):
        expand_designs([DesignEntry("A", -3, 100, 100)])


def test_expand_designs_rejects_bad_size() -> None:
    with pytest.raises(InvalidInput):
        expand_designs([DesignEntry("A", 1, 0, 100)])


def test_design_from_dict_accepts_aliases() -> None:
    d = DesignEntry.from_dict({"designId": 7, "qty": "3", "width": "400", "height": 250, "priority": 0})
    assert d.design_id == "7"
    assert d.quantity == 3
    assert d.width == 400.0
    assert d.priority == 0

    with pytest.raises(InvalidInput):
        DesignEntry.from_dict({"width": 1, "height": 1})


def test_sheet_from_dict() -> None:
    s = Sheet.from_dict({"width": 3210, "height": 2250, "pricePerArea": 38.5})
    assert s.area == 3210 * 2250
    assert s.price_per_area == 38.5
    assert s.thickness == 6.0


def test_piece_rotation_swaps_footprint() -> None:
    p = expand_designs([DesignEntry("A", 1, 300, 100)])[0]
    assert p.orientations(True) == [(300, 100, 0), (100, 300, 90)]
    assert p.orientations(False) == [(300, 100, 0)]

    p.place(10, 20, 90)
    assert p.footprint() == (10, 20, 100, 300)

    fresh = p.fresh_copy()
    assert not fresh.placed
    assert fresh.rotation == 0
    assert p.placed  # caller copy untouched


def test_square_piece_has_single_orientation() -> None:
    p = expand_designs([DesignEntry("S", 1, 200, 200)])[0]
    assert len(p.orientations(True)) == 1


def test_rects_conflict_with_gap() -> None:
    a = (0.0, 0.0, 100.0, 100.0)
    assert not rects_conflict(a, (100.0, 0.0, 50.0, 50.0), 0.0)   # touching
    assert rects_conflict(a, (100.0, 0.0, 50.0, 50.0), 2.0)       # too close
    assert not rects_conflict(a, (102.0, 0.0, 50.0, 50.0), 2.0)   # exactly the gap
    assert rects_conflict(a, (50.0, 50.0, 10.0, 10.0), 0.0)       # overlap


def test_check_no_overlap_raises() -> None:
    a = Piece("a", "a", "a", 100, 100, 6, 10000)
    b = Piece("b", "b", "b", 100, 100, 6, 10000)
    a.place(0, 0)
    b.place(50, 0)
    with pytest.raises(ValueError):
        check_no_overlap([a, b])


def test_cut_path_orientation_checked() -> None:
    with pytest.raises(ValueError):
        CutPath("c", "diagonal", 0, 0, 1, 1)
    assert CutPath("c", "vertical", 0, 0, 0, 30).length() == 30


def test_options_defaults_and_validation() -> None:
    o = PlacementOptions()
    assert o.allow_rotation is True
    assert o.allow_flipping is False
    assert o.minimum_gap == 2.0
    assert o.edge_margin == 5.0
    assert o.time_limit == 300.0
    assert o.quality_target == 0.85

    for bad in ({"minimum_gap": -1}, {"edge_margin": -0.5}, {"time_limit": 0}, {"quality_target": 1.5}):
        with pytest.raises(InvalidInput):
            o.merged(bad).validate()


def test_options_merge_camel_case() -> None:
    o = PlacementOptions().merged({"minimumGap": 3, "allowRotation": False, "edge_margin": 0})
    assert o.minimum_gap == 3.0
    assert o.allow_rotation is False
    assert o.edge_margin == 0.0
    assert PlacementOptions.from_dict(o.to_dict()) == o

    with pytest.raises(InvalidInput):
        PlacementOptions().merged({"kerf": 3})


def test_usable_bounds_and_defaults() -> None:
    sheet = make_default_sheet()
    assert (sheet.width, sheet.height) == (3210.0, 2250.0)
    assert usable_bounds(sheet, PlacementOptions(edge_margin=10)) == (10, 10, 3200.0, 2240.0)
    assert parse_sheet_text("2000 x 1000") == (2000.0, 1000.0)
    with pytest.raises(InvalidInput):
        parse_sheet_text("2000")


@pytest.mark.parametrize("qty", [1.9, "2.5", "many", None, True])
def test_design_from_dict_rejects_fractional_quantity(qty) -> None:
    with pytest.raises(InvalidInput):
        DesignEntry.from_dict({"design_id": "A", "quantity": qty, "width": 100, "height": 100})


def test_design_from_dict_requires_quantity() -> None:
    with pytest.raises(InvalidInput, match="quantity is required"):
        DesignEntry.from_dict({"design_id": "A", "width": 100, "height": 100})
    assert DesignEntry.from_dict({"design_id": "A", "count": 4.0, "width": 100, "height": 100}).quantity == 4


@pytest.mark.parametrize(
    "bad",
    [{"allowRotation": "false"}, {"allow_flipping": 0}, {"minimumGap": "abc"}, {"edgeMargin": None}, {"timeLimit": True}],
)
def test_options_reject_mistyped_values(bad) -> None:
    key = next(iter(bad))
    with pytest.raises(InvalidInput, match=f"Invalid value for {key}"):
        PlacementOptions().merged(bad)
