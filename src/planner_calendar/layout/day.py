"""Day view layout: positions timed entities on a 24-hour vertical axis."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from ..config import LayoutConfig
from ..models import ChipList, Entity, LayoutBlock
from .common import DateLike, as_date, chip_list, partition_valid
from .priority import PriorityOrdering

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayLayout:
    """Result of laying out one day."""
    day: date
    blocks: List[LayoutBlock] = field(default_factory=list)
    all_day: ChipList = field(default_factory=ChipList)
    skipped: int = 0


class DayLayoutEngine:
    """
    Lays out one day's entities as pixel-positioned blocks.

    All-day entities go to a separate capped strip. Timed entities that start
    on the day become LayoutBlocks. Blocks are allowed to overlap; legibility
    comes from ``stack_order``, where higher-priority entities always stack
    above lower-priority ones and ties follow iteration order.

    An entity crossing midnight is only placed on its start day.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def layout(self, entities: Iterable[Entity], day: DateLike) -> DayLayout:
        """
        Compute the layout for ``day``.

        Args:
            entities: Snapshot of the entity collection
            day: Target day (a datetime is reduced to its date)

        Returns:
            DayLayout with blocks, the all-day strip and the skipped count
        """
        target = as_date(day)
        valid, skipped = partition_valid(entities)

        all_day = [e for e in valid if e.all_day and e.covers(target)]
        timed = [e for e in valid if not e.all_day and e.start_date == target]
        timed = PriorityOrdering.sort(timed)

        weight_step = len(timed) + 1
        blocks = [
            self._position(entity, index, weight_step)
            for index, entity in enumerate(timed)
        ]

        logger.debug(
            f"Day {target}: {len(blocks)} timed blocks, {len(all_day)} all-day, "
            f"{skipped} skipped"
        )
        return DayLayout(
            day=target,
            blocks=blocks,
            all_day=chip_list(all_day, self.config.all_day_visible_count),
            skipped=skipped,
        )

    def top_offset(self, entity: Entity) -> float:
        start = entity.start
        return (start.hour + start.minute / 60) * self.config.hour_height

    def block_height(self, entity: Entity) -> float:
        """
        Height from the time-of-day difference, floored at ``min_block_height``.

        Only hours and minutes are used, so a zero-length or midnight-crossing
        entity clamps to zero duration and gets the minimum height.
        """
        start, end = entity.start, entity.end
        duration = (end.hour - start.hour) + (end.minute - start.minute) / 60
        duration = max(duration, 0)
        return max(duration * self.config.hour_height, self.config.min_block_height)

    def _position(self, entity: Entity, index: int, weight_step: int) -> LayoutBlock:
        return LayoutBlock(
            entity=entity,
            top_offset=self.top_offset(entity),
            height=self.block_height(entity),
            stack_order=PriorityOrdering.rank(entity) * weight_step + index,
        )


def layout_day(entities: Iterable[Entity], day: DateLike,
               config: Optional[LayoutConfig] = None) -> DayLayout:
    return DayLayoutEngine(config).layout(entities, day)
