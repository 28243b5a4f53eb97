from datetime import date, datetime

import pytest

from src.workboard.workboard.common.datetime_utils import (
    coerce_date,
    parse_iso_date,
    start_of_week,
    week_of_month,
)
from src.workboard.workboard.schedules.model import WeekWindow


def test_parse_accepts_plain_and_legacy_iso_strings():
    assert parse_iso_date("2026-02-03") == date(2026, 2, 3)
    assert parse_iso_date("2026-02-03T00:00:00.000Z") == date(2026, 2, 3)


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        parse_iso_date("03/02/2026")


def test_coerce_date():
    assert coerce_date(None) is None
    assert coerce_date("") is None
    assert coerce_date(datetime(2026, 2, 3, 15, 0)) == date(2026, 2, 3)
    assert coerce_date(date(2026, 2, 3)) == date(2026, 2, 3)
    with pytest.raises(TypeError):
        coerce_date(20260203)


def test_start_of_week_is_monday():
    assert start_of_week(date(2026, 2, 8)) == date(2026, 2, 2)
    assert start_of_week(date(2026, 2, 2)) == date(2026, 2, 2)


def test_week_of_month_counts_partial_first_week():
    # 2026-02-01 is a Sunday, so it sits in week 1 with the last days of January.
    assert week_of_month(date(2026, 2, 1)) == 1
    assert week_of_month(date(2026, 2, 2)) == 2
    assert week_of_month(date(2026, 2, 28)) == 5


def test_week_navigation():
    window = WeekWindow.containing(date(2026, 2, 4))
    assert window.shift(-1).start == date(2026, 1, 26)
    assert window.shift(1).end == date(2026, 2, 15)
    assert window.contains(date(2026, 2, 8))
    assert not window.contains(date(2026, 2, 9))

