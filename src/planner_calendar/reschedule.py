"""Drag-reschedule and completion commands.

The view layer turns pointer gestures into commands here; executing them
against the store is left to ``services.effects.EffectHandler``.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, Tuple, Union

from .errors import InvalidDropTarget, NotDraggableError
from .models import Entity, EntityKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RescheduleRequest:
    """Move an entity to a new interval."""
    entity_id: str
    kind: EntityKind
    source_id: Optional[str]
    new_start: datetime
    new_end: datetime
    all_day: bool = False


@dataclass(frozen=True)
class CompletionToggle:
    """Set an entity's completed flag."""
    entity_id: str
    kind: EntityKind
    source_id: Optional[str]
    completed: bool


Command = Union[RescheduleRequest, CompletionToggle]


def _shift_wall_clock(value: datetime, shift: timedelta) -> datetime:
    """Move ``value`` by whole days keeping its wall-clock time, re-resolving the UTC offset."""
    tz = value.tzinfo
    moved = value.replace(tzinfo=None) + shift
    if tz is None:
        return moved
    if hasattr(tz, 'localize'):
        # pytz zones carry a fixed offset per instance
        return tz.localize(moved)
    return moved.replace(tzinfo=tz)


def _normalize(value: datetime) -> datetime:
    tz = value.tzinfo
    if tz is not None and hasattr(tz, 'normalize'):
        return tz.normalize(value)
    return value


def compute_reschedule(entity: Entity, target_date: Union[date, datetime, None]) -> RescheduleRequest:
    """
    Move ``entity`` to ``target_date`` keeping its time of day and duration.

    Args:
        entity: The dragged entity
        target_date: Day the entity was dropped on

    Returns:
        RescheduleRequest whose new_end - new_start equals the original duration

    Raises:
        InvalidDropTarget: If the target is not a date or the entity is malformed
        NotDraggableError: If the entity is a task or a recurring instance
    """
    if isinstance(target_date, datetime):
        target_date = target_date.date()
    if not isinstance(target_date, date):
        raise InvalidDropTarget(f"Cannot resolve a date from drop target: {target_date!r}")
    if not entity.is_valid:
        raise InvalidDropTarget(f"Entity {entity.id} has no valid interval to move")
    if not entity.draggable:
        raise NotDraggableError(f"Entity {entity.id} ({entity.kind.value}) cannot be dragged")

    duration = entity.end - entity.start
    shift = timedelta(days=(target_date - entity.start.date()).days)
    new_start = _shift_wall_clock(entity.start, shift)
    new_end = _normalize(new_start + duration)

    return RescheduleRequest(
        entity_id=entity.id,
        kind=entity.kind,
        source_id=entity.source_id,
        new_start=new_start,
        new_end=new_end,
        all_day=entity.all_day,
    )


def toggle_completion(entity: Entity) -> CompletionToggle:
    return CompletionToggle(
        entity_id=entity.id,
        kind=entity.kind,
        source_id=entity.source_id,
        completed=not entity.completed,
    )


def apply_command(entities: Iterable[Entity], command: Command) -> Tuple[Entity, ...]:
    """
    Optimistically apply a command to a snapshot.

    The input is left untouched, so rolling back a failed mutation means
    keeping the previous snapshot.
    """
    updated = []
    for entity in entities:
        if entity.id != command.entity_id:
            updated.append(entity)
        elif isinstance(command, RescheduleRequest):
            updated.append(replace(entity, start=command.new_start, end=command.new_end))
        elif isinstance(command, CompletionToggle):
            updated.append(replace(entity, completed=command.completed))
        else:
            raise TypeError(f"Unsupported command: {type(command).__name__}")
    return tuple(updated)


class DragRescheduler:
    """Turns drops into RescheduleRequests and hands them to ``dispatch``."""

    def __init__(self, dispatch: Callable[[Command], object]):
        self.dispatch = dispatch

    def on_drop(self, entity: Entity, target_date: Union[date, datetime, None]) -> RescheduleRequest:
        request = compute_reschedule(entity, target_date)
        logger.info(
            f"Rescheduling {entity.id}: {entity.start} -> {request.new_start} "
            f"(ends {request.new_end})"
        )
        self.dispatch(request)
        return request
