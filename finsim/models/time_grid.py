"""
Monthly time grid for the household simulation.

This module converts calendar dates into integer month offsets from the
mortgage start date and produces the per-month dates and labels used in the
simulation log. Dates are parsed once per pass, never inside the monthly loop.
"""

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

# Month offset used when a risk date is missing or cannot be parsed: the event
# is treated as having already happened.
ALREADY_ELAPSED = -1


def parse_iso_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parse an ISO calendar date, tolerating a trailing time component.

    Args:
        value: ISO date string (``2027-06-01`` or ``2027-06-01T00:00:00``),
            a date, or None

    Returns:
        The parsed date, or None if the value is missing or invalid
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def month_diff(start: date, target: date) -> int:
    """Whole calendar months from ``start`` to ``target`` (days are ignored)."""
    return (target.year - start.year) * 12 + (target.month - start.month)


def add_months(start: date, months: int) -> date:
    """First day of the month ``months`` after the month of ``start``."""
    total = start.year * 12 + (start.month - 1) + months
    return date(total // 12, total % 12 + 1, 1)


class MonthGrid(BaseModel):
    """Fixed-length monthly grid anchored on the mortgage start date."""

    start_date: date = Field(..., description="Mortgage start date")
    horizon_months: int = Field(
        default=240, ge=1, le=1200, description="Number of simulated months"
    )

    def resolve_offset(self, value: Union[str, date, None]) -> int:
        """
        Convert a calendar date into a month offset from the start date.

        Args:
            value: ISO date string or date

        Returns:
            Month offset, or ALREADY_ELAPSED when the value is unusable
        """
        target = parse_iso_date(value)
        if target is None:
            return ALREADY_ELAPSED
        return month_diff(self.start_date, target)

    def month_date(self, month_index: int) -> date:
        """Calendar date (first of month) of a simulation month."""
        return add_months(self.start_date, month_index)

    def month_label(self, month_index: int) -> str:
        """Short display label such as ``Mar 2027``."""
        return self.month_date(month_index).strftime("%b %Y")

    def get_dates(self) -> List[date]:
        """Get the calendar date of every simulated month."""
        return [self.month_date(m) for m in range(self.horizon_months)]

    @property
    def horizon_years(self) -> float:
        return self.horizon_months / 12

    def __len__(self) -> int:
        """Get the number of months in the grid."""
        return self.horizon_months
