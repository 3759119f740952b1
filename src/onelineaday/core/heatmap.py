"""Heatmap layout - projects entries onto a rolling one-year grid of weeks."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Mapping

from .dates import to_key

HEATMAP_DAYS = 365
DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class DayCell:
    """One day of the heatmap."""

    date: date
    date_str: str
    has_entry: bool


@dataclass(frozen=True)
class MonthLabel:
    """Month name anchored to the week column where the month begins."""

    week_index: int
    label: str


@dataclass
class Heatmap:
    """Weeks oldest-first, each a column of up to seven cells."""

    weeks: list[list[DayCell]] = field(default_factory=list)
    month_labels: list[MonthLabel] = field(default_factory=list)

    @property
    def cells(self) -> list[DayCell]:
        return [cell for week in self.weeks for cell in week]

    def active_days(self) -> int:
        return sum(1 for cell in self.cells if cell.has_entry)


def build_heatmap(entries: Mapping, reference_date: date | None = None) -> Heatmap:
    """
    Build the 365-day window ending at reference_date (inclusive).

    Weeks are chunked from the first day of the window, not aligned to the
    calendar week. The last chunk is short (365 % 7 == 1 cell), never padded.
    """
    reference_date = reference_date or date.today()
    start = reference_date - timedelta(days=HEATMAP_DAYS - 1)

    cells = []
    for offset in range(HEATMAP_DAYS):
        d = start + timedelta(days=offset)
        key = to_key(d)
        cells.append(DayCell(date=d, date_str=key, has_entry=key in entries))

    weeks = [cells[i : i + DAYS_PER_WEEK] for i in range(0, len(cells), DAYS_PER_WEEK)]
    return Heatmap(weeks=weeks, month_labels=label_months(weeks))


def label_months(weeks: list[list[DayCell]]) -> list[MonthLabel]:
    """
    Label each week whose first day falls in the first week of a month.

    A label equal to the previously emitted one is skipped.
    """
    labels = []
    last_label = None
    for index, week in enumerate(weeks):
        if not week:
            continue
        first = week[0].date
        if first.day > DAYS_PER_WEEK:
            continue
        label = first.strftime("%b")
        if label != last_label:
            labels.append(MonthLabel(week_index=index, label=label))
            last_label = label
    return labels
