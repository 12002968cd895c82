"""
Month window: the calendar month the board is scoped to.

The anchor is always day 1 of a month. Comparisons are calendar-date
comparisons; no time or timezone is involved.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True)
class MonthWindow:
    """Inclusive [start, end] range of one calendar month."""

    anchor: date

    def __post_init__(self):
        if self.anchor.day != 1:
            object.__setattr__(self, "anchor", self.anchor.replace(day=1))

    @classmethod
    def current(cls, today: Optional[date] = None) -> "MonthWindow":
        return cls((today or date.today()).replace(day=1))

    @classmethod
    def of(cls, year: int, month: int) -> "MonthWindow":
        return cls(date(year, month, 1))

    @property
    def start(self) -> date:
        return self.anchor

    @property
    def end(self) -> date:
        last_day = calendar.monthrange(self.anchor.year, self.anchor.month)[1]
        return self.anchor.replace(day=last_day)

    def range(self) -> Tuple[date, date]:
        return self.start, self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def shift(self, months: int) -> "MonthWindow":
        index = self.anchor.year * 12 + (self.anchor.month - 1) + months
        return MonthWindow(date(index // 12, index % 12 + 1, 1))

    def previous(self) -> "MonthWindow":
        return self.shift(-1)

    def next(self) -> "MonthWindow":
        return self.shift(1)

    def display(self) -> str:
        """Human-readable label, e.g. "March 2024"."""
        return f"{calendar.month_name[self.anchor.month]} {self.anchor.year}"

    def to_dict(self) -> dict:
        return {
            "label": self.display(),
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }
