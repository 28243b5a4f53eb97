"""Weekly grid layout.

Pipeline: normalized items -> week clamping -> greedy row packing -> pixel
geometry. Everything here is pure; the same input always produces the same
rows, which keeps bars from jumping around between re-renders.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Sequence

from ..common.datetime_utils import days_between
from ..core.constants import (
    BAR_GUTTER_PX,
    BAR_TOP_OFFSET,
    DAYS_PER_WEEK,
    GRID_BOTTOM_PADDING,
    HEADER_HEIGHT,
    MIN_GRID_HEIGHT,
    ROW_HEIGHT,
    ROW_MARGIN,
)
from .model import BarGeometry, Interval, PlacedBar, ScheduleItem, WeekLayout, WeekWindow
from .normalizer import normalize


def clamp_to_week(
    normalized: Iterable[tuple[ScheduleItem, date, date]],
    window: WeekWindow,
) -> list[Interval]:
    out: list[Interval] = []
    for item, start, end in normalized:
        clamped_start = max(start, window.start)
        clamped_end = min(end, window.end)
        if clamped_start > clamped_end:
            continue

        out.append(
            Interval(
                item=item,
                start=start,
                end=end,
                clamped_start=clamped_start,
                clamped_end=clamped_end,
                day_offset=days_between(window.start, clamped_start),
                day_span=days_between(clamped_start, clamped_end) + 1,
            )
        )
    return out


def pack_rows(intervals: Sequence[Interval]) -> tuple[list[Interval], int]:
    """Assign each interval the first row that is free at its clamped start.

    Order: unclamped start ascending, then longer visible span first.
    ``row_ends[i]`` holds the clamped end of the last interval put in row i.
    """

    ordered = sorted(intervals, key=lambda iv: (iv.start, -iv.day_span))

    row_ends: list[date] = []
    placed: list[Interval] = []
    for iv in ordered:
        row_index = -1
        for i, row_end in enumerate(row_ends):
            if row_end < iv.clamped_start:
                row_index = i
                break

        if row_index == -1:
            row_index = len(row_ends)
            row_ends.append(iv.clamped_end)
        else:
            row_ends[row_index] = iv.clamped_end

        placed.append(replace(iv, row_index=row_index))

    return placed, len(row_ends)


def bar_geometry(day_offset: int, day_span: int, row_index: int) -> BarGeometry:
    return BarGeometry(
        left_pct=day_offset * 100 / DAYS_PER_WEEK,
        width_pct=day_span * 100 / DAYS_PER_WEEK,
        inset_px=BAR_GUTTER_PX,
        top_px=HEADER_HEIGHT + row_index * (ROW_HEIGHT + ROW_MARGIN) + BAR_TOP_OFFSET,
        height_px=ROW_HEIGHT,
    )


def grid_min_height(total_rows: int) -> int:
    return max(MIN_GRID_HEIGHT, (total_rows + 1) * (ROW_HEIGHT + ROW_MARGIN) + GRID_BOTTOM_PADDING)


def build_week_layout(items: Iterable[ScheduleItem], window: WeekWindow) -> WeekLayout:
    intervals = clamp_to_week(normalize(items), window)
    placed, total_rows = pack_rows(intervals)
    bars = [PlacedBar(interval=iv, geometry=bar_geometry(iv.day_offset, iv.day_span, iv.row_index)) for iv in placed]
    return WeekLayout(window=window, bars=bars, total_rows=total_rows, min_height_px=grid_min_height(total_rows))
