"""Calendar entities and the derived layout structures."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Optional, Tuple


class Priority(Enum):
    """Closed set of priority classes. Higher value is more urgent."""
    HIGH = 3
    MEDIUM = 2
    LOW = 1

    @classmethod
    def normalize(cls, value: Any) -> 'Priority':
        """
        Map a loosely-typed priority value onto a Priority.

        Args:
            value: A Priority, a name like 'high' or 'A', or an integer rank

        Returns:
            The matching Priority, or MEDIUM for anything unrecognized
        """
        if isinstance(value, Priority):
            return value
        if isinstance(value, bool):
            return cls.MEDIUM
        if isinstance(value, int):
            for member in cls:
                if member.value == value:
                    return member
            return cls.MEDIUM
        if isinstance(value, str):
            return PRIORITY_ALIASES.get(value.strip().lower(), cls.MEDIUM)
        return cls.MEDIUM


# Events use high/medium/low, tasks use A/B/C
PRIORITY_ALIASES = {
    'high': Priority.HIGH,
    'a': Priority.HIGH,
    'medium': Priority.MEDIUM,
    'b': Priority.MEDIUM,
    'low': Priority.LOW,
    'c': Priority.LOW,
}


class EntityKind(Enum):
    EVENT = 'event'
    TASK = 'task'


@dataclass(frozen=True)
class Entity:
    """A calendar item (event or task) with standardized fields."""
    id: str
    title: str
    start: Optional[datetime]
    end: Optional[datetime]
    all_day: bool = False
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    color: Optional[str] = None
    kind: EntityKind = EntityKind.EVENT
    source_id: Optional[str] = None
    recurring: bool = False

    def __post_init__(self):
        # Frozen dataclass, so normalization goes through object.__setattr__
        object.__setattr__(self, 'priority', Priority.normalize(self.priority))
        if not isinstance(self.kind, EntityKind):
            object.__setattr__(self, 'kind', EntityKind(self.kind))

    @property
    def is_valid(self) -> bool:
        """True when both timestamps are present, comparable and ordered."""
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            return False
        try:
            return self.start <= self.end
        except TypeError:
            # naive vs aware
            return False

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    @property
    def is_multi_day(self) -> bool:
        return self.start_date != self.end_date

    @property
    def draggable(self) -> bool:
        """Only stored, non-recurring events can be moved by drag."""
        return self.kind is EntityKind.EVENT and not self.recurring

    def covers(self, day: date) -> bool:
        """Check whether ``day`` falls within [start, end], compared as dates."""
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class LayoutBlock:
    """A positioned block on a day's 24-hour axis, in pixels."""
    entity: Entity
    top_offset: float
    height: float
    stack_order: int


@dataclass(frozen=True)
class SpanEntry:
    """One week-row segment of a multi-day entity in a month grid."""
    entity: Entity
    row: int
    col: int
    span: int

    @property
    def end_col(self) -> int:
        return self.col + self.span - 1


@dataclass(frozen=True)
class ChipList:
    """Entities shown inline in a cell, capped at ``limit`` with an overflow count."""
    items: Tuple[Entity, ...] = field(default_factory=tuple)
    limit: int = 3

    @property
    def visible(self) -> Tuple[Entity, ...]:
        return self.items[:self.limit]

    @property
    def hidden_count(self) -> int:
        return max(0, len(self.items) - self.limit)

    def __len__(self) -> int:
        return len(self.items)
