"""Calendar layout engine for a personal planner: day, week and month views."""

from .config import LayoutConfig, PlannerConfig
from .errors import InvalidDropTarget, MutationError, NotDraggableError
from .layout import (
    DayLayout, DayLayoutEngine, MonthGrid, MonthSpanEngine, PriorityOrdering,
    WeekLayout, WeekLayoutEngine, month_grid_window, week_window
)
from .models import ChipList, Entity, EntityKind, LayoutBlock, Priority, SpanEntry
from .reschedule import (
    CompletionToggle, DragRescheduler, RescheduleRequest, apply_command,
    compute_reschedule, toggle_completion
)

__version__ = '0.1.0'

__all__ = [
    'ChipList',
    'CompletionToggle',
    'DayLayout',
    'DayLayoutEngine',
    'DragRescheduler',
    'Entity',
    'EntityKind',
    'InvalidDropTarget',
    'LayoutBlock',
    'LayoutConfig',
    'MonthGrid',
    'MonthSpanEngine',
    'MutationError',
    'NotDraggableError',
    'PlannerConfig',
    'Priority',
    'PriorityOrdering',
    'RescheduleRequest',
    'SpanEntry',
    'WeekLayout',
    'WeekLayoutEngine',
    'apply_command',
    'compute_reschedule',
    'month_grid_window',
    'toggle_completion',
    'week_window',
]
