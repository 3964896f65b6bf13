"""Calendar styling and visual constants."""

from typing import Dict

from ..models import Priority

# Layout constants
HEADER_HEIGHT: int = 60
ALL_DAY_LANE_HEIGHT: int = 90
CHIP_HEIGHT: int = 20
PADDING: int = 6
TASK_PADDING: int = 3
TIME_COLUMN_WIDTH: int = 48
LINE_HEIGHT: int = 16

# Font sizes
DEFAULT_FONT_SIZE: int = 14
DEFAULT_TASK_FONT_SIZE: int = 11

# Text length limits
MAX_TITLE_LENGTH: int = 25
MAX_TIMED_TITLE_LENGTH: int = 20

FONT_NAME: str = "DejaVuSans.ttf"

# Colors
BACKGROUND_COLOR: str = 'white'
GRID_COLOR: str = '#cccccc'
HEADER_COLOR: str = '#f7f7f7'
TODAY_HEADER_COLOR: str = '#666666'
OUTSIDE_MONTH_COLOR: str = '#eeeeee'
COMPLETED_COLOR: str = 'gray'
OVERFLOW_TEXT_COLOR: str = '#1d4ed8'

PRIORITY_COLORS: Dict[Priority, str] = {
    Priority.HIGH: 'red',
    Priority.MEDIUM: 'orange',
    Priority.LOW: 'blue',
}

# Backgrounds that need dark text
LIGHT_COLORS = {
    'yellow',
    'orange',
    '#f7f7f7',
}
