import calendar
from datetime import date


def days_in_month(year: int, month: int) -> list[date | None]:
    """Calendar cells for a Sun-Sat grid: leading None padding, then each day."""
    first = date(year, month, 1)
    # date.weekday(): Monday=0 .. Sunday=6; grid starts on Sunday
    padding = (first.weekday() + 1) % 7
    _, count = calendar.monthrange(year, month)
    days: list[date | None] = [None] * padding
    days.extend(date(year, month, d) for d in range(1, count + 1))
    return days


def is_weekday(d: date) -> bool:
    return d.weekday() < 5


def is_past_date(d: date, today: date | None = None) -> bool:
    """True if ``d`` is strictly before today (local system time)."""
    return d < (today or date.today())


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"
