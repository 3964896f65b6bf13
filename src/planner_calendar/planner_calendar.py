import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

from PIL import Image

from .config import LayoutConfig, PlannerConfig
from .layout.common import DateLike, as_date, month_grid_window, week_window
from .layout.day import DayLayout, DayLayoutEngine
from .layout.month import MonthGrid, MonthSpanEngine
from .layout.week import WeekLayout, WeekLayoutEngine
from .models import Entity
from .reschedule import DragRescheduler, toggle_completion
from .services.effects import EffectHandler, MutationResult
from .services.planner_api import PlannerAPI
from .ui.renderer import CalendarRenderer

logger = logging.getLogger(__name__)

VIEWS = ('day', 'week', 'month')


class PlannerCalendar:
    """Fetches entities from the planner API, lays them out and renders a view."""

    def __init__(self, config: PlannerConfig, layout_config: Optional[LayoutConfig] = None,
                 api: Optional[PlannerAPI] = None, renderer: Optional[CalendarRenderer] = None):
        self.config = config
        self.layout_config = layout_config or LayoutConfig(week_start=config.week_start)
        self.api = api or PlannerAPI(config)
        self.renderer = renderer or CalendarRenderer(self.layout_config)
        self.effects = EffectHandler(self.api)

        self.day_engine = DayLayoutEngine(self.layout_config)
        self.week_engine = WeekLayoutEngine(self.layout_config)
        self.month_engine = MonthSpanEngine(self.layout_config)

    def load(self, start: date, end: date) -> List[Entity]:
        return self.api.get_entities(start, end)

    def day(self, entities: Sequence[Entity], day: DateLike) -> DayLayout:
        return self.day_engine.layout(entities, day)

    def week(self, entities: Sequence[Entity], anchor: DateLike) -> WeekLayout:
        return self.week_engine.layout_week_of(entities, anchor)

    def month(self, entities: Sequence[Entity], year: int, month: int) -> MonthGrid:
        return self.month_engine.layout(entities, year, month)

    def window(self, view: str, anchor: DateLike):
        """The inclusive date range a view needs to fetch."""
        anchor = as_date(anchor)
        if view == 'day':
            return anchor, anchor
        if view == 'week':
            days = week_window(anchor, self.layout_config.week_start)
            return days[0], days[-1]
        if view == 'month':
            return month_grid_window(anchor.year, anchor.month, self.layout_config.week_start)
        raise ValueError(f"Unknown view '{view}', expected one of {VIEWS}")

    def generate_image(self, view: str = 'week', anchor: Optional[DateLike] = None) -> Image.Image:
        """
        Fetch, lay out and render a calendar view.

        Args:
            view: 'day', 'week' or 'month'
            anchor: Any date inside the view; defaults to today in the configured timezone

        Returns:
            The rendered PIL image

        Raises:
            RuntimeError: If entities cannot be fetched
            ValueError: If the view name is unknown
        """
        if anchor is None:
            anchor = datetime.now(self.config.tz).date()
        anchor = as_date(anchor)
        start, end = self.window(view, anchor)

        try:
            entities = self.load(start, end)
        except RuntimeError as e:
            logger.error(f"Error getting entities: {e}")
            raise

        if view == 'day':
            layout = self.day(entities, anchor)
            skipped = layout.skipped
            image = self.renderer.render_day(layout)
        elif view == 'week':
            layout = self.week(entities, anchor)
            skipped = layout.skipped
            image = self.renderer.render_week(layout)
        else:
            layout = self.month(entities, anchor.year, anchor.month)
            skipped = layout.skipped
            image = self.renderer.render_month(layout, month=anchor.month)

        if skipped:
            logger.warning(f"{skipped} malformed entities left out of the {view} view")
        logger.info(f"Rendered {view} view for {start} to {end}")
        return image

    def drop(self, entity: Entity, target_date: DateLike) -> MutationResult:
        """Reschedule a dragged entity onto ``target_date`` and report the store's answer."""
        results = []
        DragRescheduler(lambda command: results.append(self.effects.handle(command))).on_drop(
            entity, target_date
        )
        return results[0]

    def toggle(self, entity: Entity) -> MutationResult:
        return self.effects.handle(toggle_completion(entity))

