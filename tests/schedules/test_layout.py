from __future__ import annotations

import random
from datetime import date, timedelta

from src.workboard.workboard.core.constants import HEADER_HEIGHT, MIN_GRID_HEIGHT, ROW_HEIGHT, ROW_MARGIN
from src.workboard.workboard.schedules.layout import (
    bar_geometry,
    build_week_layout,
    clamp_to_week,
    grid_min_height,
    pack_rows,
)
from src.workboard.workboard.schedules.model import WeekWindow
from src.workboard.workboard.schedules.normalizer import normalize

from .fakes import make_item

MON = date(2026, 2, 2)
TUE = MON + timedelta(days=1)
WED = MON + timedelta(days=2)
SUN = MON + timedelta(days=6)
WEEK = WeekWindow.containing(WED)


def _rows(layout) -> dict[str, int]:
    return {b.interval.item.item_id: b.interval.row_index for b in layout.bars}


def test_week_window_is_monday_to_sunday():
    assert WEEK.start == MON
    assert WEEK.end == SUN
    assert len(WEEK.days()) == 7


def test_two_rows_when_long_item_overlaps_two_short_ones():
    items = [
        make_item("1", MON, MON),
        make_item("2", MON, WED),
        make_item("3", TUE, TUE),
    ]

    layout = build_week_layout(items, WEEK)
    rows = _rows(layout)

    assert layout.total_rows == 2
    assert rows["1"] == rows["3"]
    assert rows["2"] != rows["1"]
    # Longer item wins the tie on the same start day.
    assert rows["2"] == 0


def test_item_starting_in_previous_week_is_clipped_to_monday():
    item = make_item("1", MON - timedelta(days=5), WED)

    [iv] = clamp_to_week(normalize([item]), WEEK)

    assert iv.clamped_start == MON
    assert iv.clamped_end == WED
    assert iv.day_offset == 0
    assert iv.day_span == 3


def test_item_covering_whole_week_spans_seven_days():
    item = make_item("1", MON - timedelta(days=3), SUN + timedelta(days=10))

    [iv] = clamp_to_week(normalize([item]), WEEK)

    assert (iv.day_offset, iv.day_span) == (0, 7)


def test_items_outside_week_produce_no_interval():
    items = [
        make_item("before", MON - timedelta(days=10), MON - timedelta(days=1)),
        make_item("after", SUN + timedelta(days=1), SUN + timedelta(days=3)),
    ]

    assert clamp_to_week(normalize(items), WEEK) == []


def test_item_inside_week_keeps_its_dates():
    item = make_item("1", TUE, WED)

    [iv] = clamp_to_week(normalize([item]), WEEK)

    assert iv.clamped_start == TUE
    assert iv.clamped_end == WED
    assert (iv.day_offset, iv.day_span) == (1, 2)


def test_empty_input_yields_zero_rows():
    placed, total = pack_rows([])
    assert placed == []
    assert total == 0

    layout = build_week_layout([], WEEK)
    assert layout.total_rows == 0
    assert layout.min_height_px == MIN_GRID_HEIGHT


def test_same_day_items_stack_one_per_row():
    items = [make_item(str(i), WED, WED) for i in range(5)]

    layout = build_week_layout(items, WEEK)

    assert layout.total_rows == 5
    assert sorted(_rows(layout).values()) == [0, 1, 2, 3, 4]


def test_adjacent_items_share_a_row():
    items = [make_item("a", MON, TUE), make_item("b", WED, SUN)]

    layout = build_week_layout(items, WEEK)

    assert layout.total_rows == 1


def test_random_layouts_never_overlap_within_a_row():
    rng = random.Random(20260202)
    for _ in range(50):
        items = []
        for i in range(rng.randint(0, 15)):
            start = MON + timedelta(days=rng.randint(-6, 8))
            items.append(make_item(str(i), start, start + timedelta(days=rng.randint(0, 6))))

        layout = build_week_layout(items, WEEK)
        by_row: dict[int, list] = {}
        for bar in layout.bars:
            by_row.setdefault(bar.interval.row_index, []).append(bar.interval)

        for row in by_row.values():
            row.sort(key=lambda iv: iv.clamped_start)
            for a, b in zip(row, row[1:]):
                assert a.clamped_end < b.clamped_start

        assert layout.total_rows == len(by_row)
        assert _rows(build_week_layout(items, WEEK)) == _rows(layout)


def test_repeated_layout_runs_are_identical():
    items = [make_item(str(i), MON + timedelta(days=i % 3), WED + timedelta(days=i % 4)) for i in range(8)]

    first = build_week_layout(items, WEEK)
    second = build_week_layout(items, WEEK)

    assert _rows(first) == _rows(second)
    assert first.total_rows == second.total_rows


def test_bar_geometry():
    geo = bar_geometry(day_offset=2, day_span=3, row_index=1)

    assert abs(geo.left_pct - 200 / 7) < 1e-9
    assert abs(geo.width_pct - 300 / 7) < 1e-9
    assert geo.top_px == HEADER_HEIGHT + (ROW_HEIGHT + ROW_MARGIN) + 10
    assert geo.height_px == ROW_HEIGHT
    assert geo.css()["width"].endswith("- 8px)")
    assert geo.css()["left"].endswith("+ 4px)")


def test_grid_min_height_grows_with_rows():
    assert grid_min_height(0) == MIN_GRID_HEIGHT
    assert grid_min_height(20) == 21 * (ROW_HEIGHT + ROW_MARGIN) + 50
