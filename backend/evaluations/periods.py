# ===========================================================
# evaluations/periods.py
# ===========================================================
# Calendar helpers for company periods (counted from the
# establishment month), fiscal years and quarters.
# ===========================================================

from dataclasses import dataclass, field
from datetime import date, timedelta


def _as_date(value):
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


def add_months(year, month, count):
    """(year, month) shifted by `count` months."""
    index = year * 12 + (month - 1) + count
    return index // 12, index % 12 + 1


def month_end(year, month):
    next_year, next_month = add_months(year, month, 1)
    return date(next_year, next_month, 1) - timedelta(days=1)


def period_label(year, month):
    """Evaluation period key, e.g. 2025-04."""
    return f"{year:04d}-{month:02d}"


def quarter_name(quarter):
    return f"Q{quarter}"


# -----------------------------------------------------------
# Company periods
# -----------------------------------------------------------
@dataclass
class PeriodInfo:
    period_number: int
    period_name: str
    start_date: date
    end_date: date
    current_month: int = None
    quarter_number: int = None
    quarter_name: str = None


def _period_bounds(establishment, period_number):
    start_year = establishment.year + period_number - 1
    start = date(start_year, establishment.month, 1)
    end_year, end_month = add_months(start_year, establishment.month, 11)
    return start, month_end(end_year, end_month)


def calculate_period(establishment_date, target_date=None):
    """
    Period containing `target_date`. Period 1 starts on the first day
    of the establishment month and every period spans 12 months.
    """
    establishment = _as_date(establishment_date)
    target = _as_date(target_date) or date.today()

    months_passed = (target.year - establishment.year) * 12 + (target.month - establishment.month)
    if months_passed < 0:
        raise ValueError("Target date is before the company establishment month.")

    period_number = months_passed // 12 + 1
    month_in_period = months_passed % 12 + 1
    quarter = (month_in_period - 1) // 3 + 1
    start, end = _period_bounds(establishment, period_number)

    return PeriodInfo(
        period_number=period_number,
        period_name=f"Period {period_number}",
        start_date=start,
        end_date=end,
        current_month=month_in_period,
        quarter_number=quarter,
        quarter_name=quarter_name(quarter),
    )


def get_period_info(establishment_date, period_number):
    if period_number < 1:
        raise ValueError("Period numbers start at 1.")
    establishment = _as_date(establishment_date)
    start, end = _period_bounds(establishment, period_number)
    return PeriodInfo(
        period_number=period_number,
        period_name=f"Period {period_number}",
        start_date=start,
        end_date=end,
    )


def get_period_months(establishment_date, period_number):
    """The 12 months of a period with their quarter within the period."""
    info = get_period_info(establishment_date, period_number)
    months = []
    for index in range(12):
        year, month = add_months(info.start_date.year, info.start_date.month, index)
        quarter = index // 3 + 1
        months.append({
            "year": year,
            "month": month,
            "label": period_label(year, month),
            "quarter_number": quarter,
            "quarter_name": quarter_name(quarter),
        })
    return months


def get_quarterly_groups(establishment_date, period_number):
    months = get_period_months(establishment_date, period_number)
    return [
        {
            "quarter_number": quarter,
            "quarter_name": quarter_name(quarter),
            "months": [
                {"year": m["year"], "month": m["month"], "label": m["label"]}
                for m in months
                if m["quarter_number"] == quarter
            ],
        }
        for quarter in range(1, 5)
    ]


def get_all_periods(establishment_date, max_periods=None, today=None):
    total = max_periods or calculate_period(establishment_date, today).period_number
    return [get_period_info(establishment_date, number) for number in range(1, total + 1)]


# -----------------------------------------------------------
# Fiscal years (dashboards / analytics)
# -----------------------------------------------------------
@dataclass
class FiscalYear:
    start_year: int
    start_month: int
    start_date: date
    end_date: date
    months: list = field(default_factory=list)

    @property
    def label(self):
        if self.start_month == 1:
            return str(self.start_year)
        return f"{self.start_year}-{self.start_year + 1}"

    def contains(self, year, month):
        return (year, month) in self.months


def fiscal_year_range(today=None, start_month=7):
    """Fiscal year containing `today`; with the default July start, 2025-07 .. 2026-06."""
    today = _as_date(today) or date.today()
    start_year = today.year if today.month >= start_month else today.year - 1
    months = [add_months(start_year, start_month, index) for index in range(12)]
    end_year, end_month = months[-1]
    return FiscalYear(
        start_year=start_year,
        start_month=start_month,
        start_date=date(start_year, start_month, 1),
        end_date=month_end(end_year, end_month),
        months=months,
    )


# -----------------------------------------------------------
# Calendar quarters & navigation
# -----------------------------------------------------------
def quarter_months(quarter):
    if quarter not in (1, 2, 3, 4):
        raise ValueError("Quarter must be between 1 and 4.")
    first = (quarter - 1) * 3 + 1
    return [first, first + 1, first + 2]


def quarter_of_month(month):
    return (month - 1) // 3 + 1


def previous_month(year, month):
    return add_months(year, month, -1)


def next_month(year, month):
    return add_months(year, month, 1)


def previous_quarter(year, quarter):
    return (year - 1, 4) if quarter == 1 else (year, quarter - 1)


def next_quarter(year, quarter):
    return (year + 1, 1) if quarter == 4 else (year, quarter + 1)


def months_between(start_date, end_date):
    """(year, month) pairs from start_date's month to end_date's month inclusive."""
    start_date, end_date = _as_date(start_date), _as_date(end_date)
    months = []
    year, month = start_date.year, start_date.month
    while (year, month) <= (end_date.year, end_date.month):
        months.append((year, month))
        year, month = add_months(year, month, 1)
    return months
