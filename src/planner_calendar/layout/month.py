"""Month view layout: multi-day span bars and single-day chips."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from ..config import LayoutConfig
from ..models import ChipList, Entity, SpanEntry
from .common import calculate_day_index, calculate_week_start, chip_list, month_grid_window, partition_valid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthGrid:
    """Result of laying out a month grid."""
    grid_start: date
    grid_end: date
    spans: List[SpanEntry] = field(default_factory=list)
    chips: Dict[date, ChipList] = field(default_factory=dict)
    skipped: int = 0

    @property
    def rows(self) -> int:
        return (calculate_day_index(self.grid_end, self.grid_start) + 1) // 7

    @property
    def days(self) -> List[date]:
        count = calculate_day_index(self.grid_end, self.grid_start) + 1
        return [self.grid_start + timedelta(days=i) for i in range(count)]

    def spans_in_row(self, row: int) -> List[SpanEntry]:
        return [s for s in self.spans if s.row == row]


class MonthSpanEngine:
    """
    Places entities on a month grid made of whole calendar weeks.

    A multi-day entity becomes one SpanEntry per week row it crosses, so each
    row draws one continuous bar. Overlapping bars in a row keep the input
    order; there is no collision packing. Single-day entities are chips in
    their day cell, capped the same way as the week view.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def layout(self, entities: Iterable[Entity], year: int, month: int) -> MonthGrid:
        """Lay out the grid for ``year``/``month`` using the configured week start."""
        grid_start, grid_end = month_grid_window(year, month, self.config.week_start)
        return self.layout_window(entities, grid_start, grid_end)

    def layout_window(self, entities: Iterable[Entity], grid_start: date, grid_end: date) -> MonthGrid:
        """
        Lay out entities over an explicit grid window.

        Args:
            entities: Snapshot of the entity collection
            grid_start: First day of the grid, on a week-start day
            grid_end: Last day of the grid, on a week-end day

        Returns:
            MonthGrid with span entries, per-day chips and the skipped count

        Raises:
            ValueError: If the window is not made of whole weeks
        """
        length = calculate_day_index(grid_end, grid_start) + 1
        if length <= 0 or length % 7:
            raise ValueError(f"Grid window {grid_start}..{grid_end} is not whole weeks")

        valid, skipped = partition_valid(entities)
        spans: List[SpanEntry] = []
        singles: Dict[date, List[Entity]] = {}

        for entity in valid:
            if entity.is_multi_day:
                spans.extend(self.span_entries(entity, grid_start, grid_end))
            elif grid_start <= entity.start_date <= grid_end:
                singles.setdefault(entity.start_date, []).append(entity)

        limit = self.config.visible_count
        chips = {day: chip_list(items, limit) for day, items in singles.items()}

        logger.debug(
            f"Month grid {grid_start}..{grid_end}: {len(spans)} spans, "
            f"{sum(len(c) for c in chips.values())} chips, {skipped} skipped"
        )
        return MonthGrid(
            grid_start=grid_start,
            grid_end=grid_end,
            spans=spans,
            chips=chips,
            skipped=skipped,
        )

    def span_entries(self, entity: Entity, grid_start: date, grid_end: date) -> List[SpanEntry]:
        """
        Split one entity into per-week SpanEntries, clipped to the grid.

        Returns:
            Entries in row order; empty if the entity is outside the grid
        """
        effective_start = max(entity.start_date, grid_start)
        effective_end = min(entity.end_date, grid_end)
        if effective_start > effective_end:
            return []

        week_start_day = grid_start.weekday()
        entries = []
        cursor = effective_start
        while cursor <= effective_end:
            week_start = calculate_week_start(cursor, week_start_day)
            week_end = week_start + timedelta(days=6)
            sub_start = max(cursor, week_start)
            sub_end = min(effective_end, week_end)

            days_from_grid_start = calculate_day_index(sub_start, grid_start)
            entries.append(SpanEntry(
                entity=entity,
                row=days_from_grid_start // 7,
                col=days_from_grid_start % 7,
                span=calculate_day_index(sub_end, sub_start) + 1,
            ))
            cursor = week_end + timedelta(days=1)
        return entries
