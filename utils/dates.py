# utils/dates.py
"""
Calendar-month helpers.

Months travel through the API as "YYYY-MM" strings and are stored as the
first day of the month (date).
"""
import calendar
import re
from datetime import date

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

_MONTH_RE = re.compile(MONTH_PATTERN)


def parse_month(value: str) -> date:
     """Parse "YYYY-MM" into the first day of that month."""
     if not value or not _MONTH_RE.match(value):
          raise ValueError(f"Invalid month '{value}', expected YYYY-MM")
     year, month = value.split("-")
     return date(int(year), int(month), 1)


def format_month(value: date) -> str:
     return value.strftime("%Y-%m")


def month_bounds(value: date) -> tuple[date, date]:
     """First and last day of the month containing value."""
     first_day = value.replace(day=1)
     last_day = value.replace(day=calendar.monthrange(value.year, value.month)[1])
     return first_day, last_day


def add_months(value: date, months: int) -> date:
     """First day of the month `months` after (or before) value's month."""
     index = value.year * 12 + (value.month - 1) + months
     return date(index // 12, index % 12 + 1, 1)


def month_span(start: date, end: date) -> list[date]:
     """Every month from start to end inclusive, as first-of-month dates."""
     months = []
     current = start.replace(day=1)
     last = end.replace(day=1)
     while current <= last:
          months.append(current)
          current = add_months(current, 1)
     return months


def short_month_label(value: date) -> str:
     """Jan, Feb, ..."""
     return calendar.month_abbr[value.month]


def long_month_label(value: date) -> str:
     """January 2026"""
     return f"{calendar.month_name[value.month]} {value.year}"
