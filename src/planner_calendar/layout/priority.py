"""Priority ranking shared by every layout engine."""

from datetime import datetime
from typing import Iterable, List

from ..models import Entity, Priority


def _timestamp(value: datetime) -> float:
    # Aware and naive datetimes cannot be compared directly
    if value.tzinfo is not None and value.utcoffset() is not None:
        return value.timestamp()
    return (value - datetime(1970, 1, 1)).total_seconds()


class PriorityOrdering:
    """Orders entities by descending priority, then ascending start time."""

    @staticmethod
    def rank(entity: Entity) -> int:
        """Higher is more urgent. Unknown priorities already normalize to MEDIUM."""
        return Priority.normalize(entity.priority).value

    @classmethod
    def compare(cls, a: Entity, b: Entity) -> int:
        """
        Three-way comparison usable with ``functools.cmp_to_key``.

        Returns:
            Negative if ``a`` sorts first, positive if ``b`` does, 0 if equal
        """
        diff = cls.rank(b) - cls.rank(a)
        if diff:
            return diff
        a_key = cls._start_key(a)
        b_key = cls._start_key(b)
        if a_key != b_key:
            return -1 if a_key < b_key else 1
        if a.id != b.id:
            return -1 if a.id < b.id else 1
        return 0

    @classmethod
    def sort_key(cls, entity: Entity):
        return (-cls.rank(entity), cls._start_key(entity), entity.id)

    @classmethod
    def sort(cls, entities: Iterable[Entity]) -> List[Entity]:
        return sorted(entities, key=cls.sort_key)

    @staticmethod
    def _start_key(entity: Entity):
        # Missing start sorts after every real timestamp
        if not isinstance(entity.start, datetime):
            return (1, 0.0)
        return (0, _timestamp(entity.start))
