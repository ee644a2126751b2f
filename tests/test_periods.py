from datetime import date

import pytest

from evaluations.periods import (
    add_months,
    calculate_period,
    fiscal_year_range,
    get_all_periods,
    get_period_info,
    get_period_months,
    get_quarterly_groups,
    months_between,
    next_quarter,
    period_label,
    previous_month,
    previous_quarter,
    quarter_months,
    quarter_of_month,
)


def test_add_months_crosses_year_boundaries():
    assert add_months(2025, 11, 3) == (2026, 2)
    assert add_months(2025, 1, -1) == (2024, 12)
    assert previous_month(2025, 1) == (2024, 12)


def test_period_label_is_zero_padded():
    assert period_label(2025, 4) == "2025-04"


def test_calculate_period_first_period():
    info = calculate_period(date(2020, 7, 15), date(2020, 9, 1))
    assert info.period_number == 1
    assert info.period_name == "Period 1"
    assert info.start_date == date(2020, 7, 1)
    assert info.end_date == date(2021, 6, 30)
    assert info.current_month == 3
    assert info.quarter_number == 1
    assert info.quarter_name == "Q1"


def test_calculate_period_later_period_and_quarter():
    info = calculate_period("2020-07-01", "2025-04-10")
    assert info.period_number == 5
    assert info.start_date == date(2024, 7, 1)
    assert info.end_date == date(2025, 6, 30)
    assert info.current_month == 10
    assert info.quarter_number == 4


def test_calculate_period_rejects_dates_before_establishment():
    with pytest.raises(ValueError):
        calculate_period(date(2020, 7, 1), date(2020, 6, 30))


def test_period_months_and_quarter_groups():
    months = get_period_months(date(2020, 10, 1), 2)
    assert months[0]["label"] == "2021-10"
    assert months[-1]["label"] == "2022-09"
    assert months[3]["quarter_name"] == "Q2"

    groups = get_quarterly_groups(date(2020, 10, 1), 2)
    assert [g["quarter_number"] for g in groups] == [1, 2, 3, 4]
    assert [m["label"] for m in groups[3]["months"]] == ["2022-07", "2022-08", "2022-09"]


def test_get_period_info_rejects_zero():
    with pytest.raises(ValueError):
        get_period_info(date(2020, 1, 1), 0)


def test_get_all_periods_up_to_today():
    periods = get_all_periods(date(2022, 4, 1), today=date(2025, 5, 1))
    assert [p.period_name for p in periods] == ["Period 1", "Period 2", "Period 3", "Period 4"]
    assert len(get_all_periods(date(2022, 4, 1), max_periods=2)) == 2


def test_fiscal_year_range_july_start():
    fy = fiscal_year_range(date(2026, 3, 5))
    assert fy.start_date == date(2025, 7, 1)
    assert fy.end_date == date(2026, 6, 30)
    assert fy.label == "2025-2026"
    assert fy.contains(2025, 12)
    assert not fy.contains(2026, 7)

    assert fiscal_year_range(date(2025, 7, 1)).start_year == 2025


def test_fiscal_year_range_calendar_year():
    fy = fiscal_year_range(date(2025, 8, 1), start_month=1)
    assert fy.label == "2025"
    assert fy.end_date == date(2025, 12, 31)


def test_quarters():
    assert quarter_months(3) == [7, 8, 9]
    assert quarter_of_month(12) == 4
    assert previous_quarter(2025, 1) == (2024, 4)
    assert next_quarter(2025, 4) == (2026, 1)
    with pytest.raises(ValueError):
        quarter_months(5)


def test_months_between_inclusive():
    assert months_between(date(2025, 11, 20), date(2026, 1, 3)) == [(2025, 11), (2025, 12), (2026, 1)]
    assert months_between(date(2025, 2, 1), date(2025, 1, 1)) == []
