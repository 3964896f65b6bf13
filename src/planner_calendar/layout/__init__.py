from .common import calculate_week_start, month_grid_window, week_window
from .day import DayLayout, DayLayoutEngine, layout_day
from .month import MonthGrid, MonthSpanEngine
from .priority import PriorityOrdering
from .week import WeekLayout, WeekLayoutEngine

__all__ = [
    'DayLayout',
    'DayLayoutEngine',
    'MonthGrid',
    'MonthSpanEngine',
    'PriorityOrdering',
    'WeekLayout',
    'WeekLayoutEngine',
    'calculate_week_start',
    'layout_day',
    'month_grid_window',
    'week_window',
]
