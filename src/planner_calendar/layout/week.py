"""Week view layout: buckets entities into a 7-day by hour-slot grid."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import LayoutConfig
from ..models import ChipList, Entity
from .common import DateLike, as_date, chip_list, partition_valid, week_window
from .priority import PriorityOrdering

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeekLayout:
    """Result of laying out one week."""
    days: List[date]
    hours: List[int]
    day_items: Dict[date, ChipList] = field(default_factory=dict)
    cells: Dict[Tuple[date, int], List[Entity]] = field(default_factory=dict)
    all_day: Dict[date, ChipList] = field(default_factory=dict)
    skipped: int = 0

    def cell(self, day: date, hour: int) -> List[Entity]:
        return self.cells.get((day, hour), [])

    def timed_hidden_count(self, day: date) -> int:
        """Timed entities starting on ``day`` beyond the chip limit; all-day ones have their own lane."""
        chips = self.day_items.get(day)
        if chips is None:
            return 0
        timed = [e for e in chips.items if not e.all_day]
        return max(0, len(timed) - chips.limit)


class WeekLayoutEngine:
    """
    Buckets entities by day and by (day, hour) slot.

    Every entity is treated as single-cell: multi-day entities only appear on
    their start day. All-day entities covering a day are also listed in that
    day's all-day lane, matching the day view's strip.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def layout(self, entities: Iterable[Entity], days: Sequence[DateLike],
               hours: Optional[Sequence[int]] = None) -> WeekLayout:
        """
        Compute the week grid.

        Args:
            entities: Snapshot of the entity collection
            days: The 7 consecutive dates of the week
            hours: Hour slots to bucket into (defaults to config.hours)

        Returns:
            WeekLayout with per-day chips, hour cells and all-day lanes

        Raises:
            ValueError: If ``days`` is not 7 consecutive dates
        """
        week = [as_date(d) for d in days]
        self._check_window(week)
        slots = list(self.config.hours if hours is None else hours)
        valid, skipped = partition_valid(entities)
        limit = self.config.visible_count

        by_day: Dict[date, List[Entity]] = {d: [] for d in week}
        for entity in valid:
            if entity.start_date in by_day:
                by_day[entity.start_date].append(entity)

        cells: Dict[Tuple[date, int], List[Entity]] = {}
        for day in week:
            timed = [e for e in by_day[day] if not e.all_day]
            for hour in slots:
                in_slot = [e for e in timed if e.start.hour == hour]
                if in_slot:
                    cells[(day, hour)] = PriorityOrdering.sort(in_slot)

        day_items = {day: chip_list(by_day[day], limit) for day in week}
        all_day = {
            day: chip_list([e for e in valid if e.all_day and e.covers(day)], limit)
            for day in week
        }

        logger.debug(
            f"Week {week[0]}..{week[-1]}: "
            f"{sum(len(items) for items in day_items.values())} entities, {skipped} skipped"
        )
        return WeekLayout(
            days=week,
            hours=slots,
            day_items=day_items,
            cells=cells,
            all_day=all_day,
            skipped=skipped,
        )

    def layout_week_of(self, entities: Iterable[Entity], anchor: DateLike) -> WeekLayout:
        """Lay out the week containing ``anchor``, using the configured week start."""
        return self.layout(entities, week_window(anchor, self.config.week_start))

    @staticmethod
    def _check_window(week: List[date]) -> None:
        if len(week) != 7:
            raise ValueError(f"A week window needs 7 dates, got {len(week)}")
        for previous, current in zip(week, week[1:]):
            if (current - previous).days != 1:
                raise ValueError(f"Week window is not consecutive at {previous} -> {current}")
