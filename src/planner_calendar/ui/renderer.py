"""Calendar rendering and drawing functionality."""

import logging
from datetime import date, datetime
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from ..config import LayoutConfig
from ..layout.day import DayLayout
from ..layout.month import MonthGrid
from ..layout.week import WeekLayout
from ..models import ChipList, Entity
from .styles import (
    ALL_DAY_LANE_HEIGHT, BACKGROUND_COLOR, CHIP_HEIGHT, COMPLETED_COLOR,
    DEFAULT_FONT_SIZE, DEFAULT_TASK_FONT_SIZE, FONT_NAME, GRID_COLOR,
    HEADER_COLOR, HEADER_HEIGHT, LIGHT_COLORS, LINE_HEIGHT, MAX_TIMED_TITLE_LENGTH,
    MAX_TITLE_LENGTH, OUTSIDE_MONTH_COLOR, OVERFLOW_TEXT_COLOR, PADDING,
    PRIORITY_COLORS, TASK_PADDING, TIME_COLUMN_WIDTH, TODAY_HEADER_COLOR
)

logger = logging.getLogger(__name__)


class CalendarRenderer:
    """Draws day, week and month layouts onto Pillow images."""

    def __init__(self, config: Optional[LayoutConfig] = None, today: Optional[date] = None):
        self.config = config or LayoutConfig()
        self.today = today
        self.header_font = None
        self.task_font = None
        self._load_fonts()

    def _load_fonts(self) -> None:
        """Load fonts for calendar display with fallback to default."""
        try:
            self.header_font = ImageFont.truetype(FONT_NAME, DEFAULT_FONT_SIZE)
            self.task_font = ImageFont.truetype(FONT_NAME, DEFAULT_TASK_FONT_SIZE)
        except OSError as e:
            logger.warning(f"Failed to load custom fonts: {e}. Using default fonts.")
            self.header_font = None
            self.task_font = None

    def _today(self) -> date:
        return self.today or datetime.now().date()

    def get_item_color(self, entity: Entity) -> str:
        """Completed items are grey; otherwise the entity's own color or its priority color."""
        if entity.completed:
            return COMPLETED_COLOR
        return entity.color or PRIORITY_COLORS[entity.priority]

    def get_font_color(self, background_color: str) -> str:
        return 'black' if background_color.lower() in LIGHT_COLORS else 'white'

    def draw_header(self, draw: ImageDraw.ImageDraw, day: date, x: int, width: int,
                    label: Optional[str] = None) -> None:
        is_today = day == self._today()
        fill = TODAY_HEADER_COLOR if is_today else HEADER_COLOR
        text_color = 'white' if is_today else 'black'
        draw.rectangle([x, 0, x + width, HEADER_HEIGHT], outline='black', fill=fill)
        draw.text((x + PADDING, PADDING), label or day.strftime('%a'),
                  fill=text_color, font=self.header_font)
        draw.text((x + PADDING, PADDING + 22), day.strftime('%d'),
                  fill=text_color, font=self.header_font)

    def draw_item(self, draw: ImageDraw.ImageDraw, entity: Entity, x: int, y: int,
                  width: int, height: int, title: Optional[str] = None) -> None:
        """Draw a single calendar item as a filled box with its title."""
        if title is None:
            title = entity.title[:MAX_TITLE_LENGTH]
        color = self.get_item_color(entity)
        draw.rectangle([x + TASK_PADDING, y, x + width - TASK_PADDING, y + height],
                       fill=color, outline='black')
        draw.text((x + PADDING, y + 2), title, fill=self.get_font_color(color), font=self.task_font)

    def draw_chips(self, draw: ImageDraw.ImageDraw, chips: ChipList, x: int, y: int,
                   width: int) -> int:
        """Draw the visible chips and a '+N more' label; returns the next free y."""
        for entity in chips.visible:
            self.draw_item(draw, entity, x, y, width, CHIP_HEIGHT)
            y += CHIP_HEIGHT + TASK_PADDING
        if chips.hidden_count:
            draw.text((x + PADDING, y), f"+{chips.hidden_count} more",
                      fill=OVERFLOW_TEXT_COLOR, font=self.task_font)
            y += LINE_HEIGHT
        return y

    def _axis_origin(self, top: int) -> float:
        first_hour = min(self.config.hours) if len(self.config.hours) else 0
        return top - first_hour * self.config.hour_height

    def _draw_hour_labels(self, draw: ImageDraw.ImageDraw, top: int, width: int, height: int) -> None:
        origin = self._axis_origin(top)
        for hour in self.config.hours:
            y = origin + hour * self.config.hour_height
            if y > height:
                break
            draw.line([TIME_COLUMN_WIDTH, y, width, y], fill=GRID_COLOR, width=1)
            draw.text((PADDING, y + 2), f"{hour:02d}:00", fill='black', font=self.task_font)

    def render_day(self, layout: DayLayout, size: Tuple[int, int] = (800, 1200)) -> Image.Image:
        """Render a day: header, all-day strip and the stacked hour-axis blocks."""
        width, height = size
        image = Image.new('RGB', size, BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)

        column_width = width - TIME_COLUMN_WIDTH
        self.draw_header(draw, layout.day, TIME_COLUMN_WIDTH, column_width,
                         label=layout.day.strftime('%A'))
        lane_top = HEADER_HEIGHT + PADDING
        self.draw_chips(draw, layout.all_day, TIME_COLUMN_WIDTH, lane_top, column_width)

        axis_top = HEADER_HEIGHT + ALL_DAY_LANE_HEIGHT
        draw.line([0, axis_top, width, axis_top], fill='black', width=1)
        self._draw_hour_labels(draw, axis_top, width, height)

        origin = self._axis_origin(axis_top)
        # Lowest stack order first so higher-priority blocks end up on top
        for block in sorted(layout.blocks, key=lambda b: b.stack_order):
            y = int(origin + block.top_offset)
            if y < axis_top:
                continue
            time_str = block.entity.start.strftime('%H:%M')
            title = f"{time_str} {block.entity.title[:MAX_TIMED_TITLE_LENGTH]}"
            self.draw_item(draw, block.entity, TIME_COLUMN_WIDTH, y, column_width,
                           int(block.height), title)
        return image

    def render_week(self, layout: WeekLayout, size: Tuple[int, int] = (1200, 800)) -> Image.Image:
        """Render a week: day headers, all-day lane and the hour-slot cells."""
        width, height = size
        image = Image.new('RGB', size, BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)

        day_width = (width - TIME_COLUMN_WIDTH) // 7
        axis_top = HEADER_HEIGHT + ALL_DAY_LANE_HEIGHT
        self._draw_hour_labels(draw, axis_top, width, height)
        origin = self._axis_origin(axis_top)

        for i, day in enumerate(layout.days):
            x = TIME_COLUMN_WIDTH + i * day_width
            self.draw_header(draw, day, x, day_width)
            hidden = layout.timed_hidden_count(day)
            if hidden:
                draw.text((x + day_width // 2, PADDING + 22), f"+{hidden}",
                          fill=OVERFLOW_TEXT_COLOR, font=self.task_font)
            draw.line([x, HEADER_HEIGHT, x, height], fill=GRID_COLOR, width=1)
            self.draw_chips(draw, layout.all_day.get(day, ChipList()), x,
                            HEADER_HEIGHT + PADDING, day_width)

            for hour in layout.hours:
                y = int(origin + hour * self.config.hour_height)
                for index, entity in enumerate(layout.cell(day, hour)):
                    self.draw_item(draw, entity, x, y + index * (CHIP_HEIGHT + 2),
                                   day_width, CHIP_HEIGHT)
        return image

    def render_month(self, grid: MonthGrid, month: Optional[int] = None,
                     size: Tuple[int, int] = (1200, 900)) -> Image.Image:
        """Render a month: week rows, span bars per row and capped chip cells."""
        width, height = size
        image = Image.new('RGB', size, BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)

        rows = grid.rows
        day_width = width // 7
        row_height = (height - HEADER_HEIGHT) // max(rows, 1)
        days = grid.days

        for col in range(7):
            x = col * day_width
            draw.rectangle([x, 0, x + day_width, HEADER_HEIGHT], outline='black', fill=HEADER_COLOR)
            draw.text((x + PADDING, PADDING), days[col].strftime('%a'), fill='black', font=self.header_font)

        for index, day in enumerate(days):
            row, col = divmod(index, 7)
            x = col * day_width
            y = HEADER_HEIGHT + row * row_height
            fill = OUTSIDE_MONTH_COLOR if month and day.month != month else BACKGROUND_COLOR
            draw.rectangle([x, y, x + day_width, y + row_height], outline=GRID_COLOR, fill=fill)
            draw.text((x + PADDING, y + 2), str(day.day), fill='black', font=self.task_font)

        lanes_per_row = {}
        for span in grid.spans:
            lane = lanes_per_row.get(span.row, 0)
            lanes_per_row[span.row] = lane + 1
            x = span.col * day_width
            y = HEADER_HEIGHT + span.row * row_height + LINE_HEIGHT + lane * (CHIP_HEIGHT + 2)
            self.draw_item(draw, span.entity, x, y, span.span * day_width, CHIP_HEIGHT)

        for day, chips in grid.chips.items():
            index = (day - grid.grid_start).days
            row, col = divmod(index, 7)
            y = (HEADER_HEIGHT + row * row_height + LINE_HEIGHT
                 + lanes_per_row.get(row, 0) * (CHIP_HEIGHT + 2))
            self.draw_chips(draw, chips, col * day_width, y, day_width)
        return image
