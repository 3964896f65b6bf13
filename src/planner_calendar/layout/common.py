"""Calendar window calculations shared by the layout engines."""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Tuple, Union

from ..config import SUNDAY
from ..models import ChipList, Entity
from .priority import PriorityOrdering

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    """Reduce a datetime to its calendar date; pass dates through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_week_start(anchor: DateLike, week_start: int = SUNDAY) -> date:
    """
    Calculate the first day of the week containing ``anchor``.

    Args:
        anchor: Any date inside the week
        week_start: Weekday the week begins on (0=Monday ... 6=Sunday)

    Returns:
        The date of the week's first day
    """
    day = as_date(anchor)
    days_back = (day.weekday() - week_start) % 7
    return day - timedelta(days=days_back)


def calculate_day_index(day: DateLike, window_start: date) -> int:
    """Calculate the number of days from ``window_start`` to ``day``."""
    return (as_date(day) - window_start).days


def week_window(anchor: DateLike, week_start: int = SUNDAY) -> List[date]:
    """The 7 consecutive dates of the week containing ``anchor``."""
    first = calculate_week_start(anchor, week_start)
    return [first + timedelta(days=i) for i in range(7)]


def month_grid_window(year: int, month: int, week_start: int = SUNDAY) -> Tuple[date, date]:
    """
    Calculate the grid window for a month, expanded to whole weeks.

    The window starts on the week-start day on or before the 1st and ends on
    the last day of the week containing the month's final day, pulling in
    days from the adjacent months as needed.

    Returns:
        Tuple of (grid_start, grid_end), both inclusive
    """
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    grid_start = calculate_week_start(first, week_start)
    grid_end = calculate_week_start(last, week_start) + timedelta(days=6)
    return grid_start, grid_end


def partition_valid(entities: Iterable[Entity]) -> Tuple[List[Entity], int]:
    """
    Split out malformed entities (missing timestamps or end before start).

    Returns:
        Tuple of (valid entities in input order, number skipped)
    """
    valid = []
    skipped = 0
    for entity in entities:
        if entity.is_valid:
            valid.append(entity)
        else:
            skipped += 1
            logger.warning(
                f"Skipping malformed entity {entity.id} ({entity.title}): "
                f"start={entity.start} end={entity.end}"
            )
    return valid, skipped


def chip_list(entities: Iterable[Entity], limit: int) -> ChipList:
    """Priority-sort entities into a capped ChipList."""
    return ChipList(items=tuple(PriorityOrdering.sort(entities)), limit=limit)
