"""Layout and service configuration."""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import pytz
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MONDAY = 0
SUNDAY = 6

WEEK_START_NAMES = {
    'mon': MONDAY,
    'monday': MONDAY,
    'sun': SUNDAY,
    'sunday': SUNDAY,
}

DEFAULT_TIMEZONE = 'US/Eastern'
DEFAULT_API_TIMEOUT = 10.0


@dataclass
class LayoutConfig:
    """Geometry and capping rules shared by the layout engines."""
    hour_height: float = 64
    min_block_height: float = 20
    visible_count: int = 3          # week day columns and month cells
    all_day_visible_count: int = 4  # day view all-day strip
    hours: Sequence[int] = field(default_factory=lambda: range(6, 22))
    week_start: int = SUNDAY


@dataclass
class PlannerConfig:
    """Connection settings for the planner REST API."""
    api_url: str
    api_token: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    api_timeout: float = DEFAULT_API_TIMEOUT
    week_start: int = SUNDAY

    @property
    def tz(self):
        return pytz.timezone(self.timezone)

    @classmethod
    def from_env(cls) -> 'PlannerConfig':
        """
        Build configuration from environment variables (and a .env file if present).

        Returns:
            PlannerConfig populated from PLANNER_* variables

        Raises:
            RuntimeError: If PLANNER_API_URL is missing or a value is invalid
        """
        load_dotenv()

        api_url = os.getenv('PLANNER_API_URL')
        if not api_url:
            raise RuntimeError("PLANNER_API_URL must be set in the environment or .env file")

        timezone_name = os.getenv('PLANNER_TIMEZONE', DEFAULT_TIMEZONE)
        try:
            pytz.timezone(timezone_name)
        except pytz.UnknownTimeZoneError:
            raise RuntimeError(f"Unknown PLANNER_TIMEZONE: {timezone_name}")

        timeout_str = os.getenv('PLANNER_API_TIMEOUT', str(DEFAULT_API_TIMEOUT))
        try:
            api_timeout = float(timeout_str)
        except ValueError:
            raise RuntimeError(f"PLANNER_API_TIMEOUT must be a number, got: {timeout_str}")
        if api_timeout <= 0:
            raise RuntimeError("PLANNER_API_TIMEOUT must be positive")

        week_start_name = os.getenv('PLANNER_WEEK_START', 'sun').strip().lower()
        if week_start_name not in WEEK_START_NAMES:
            raise RuntimeError(f"PLANNER_WEEK_START must be 'sun' or 'mon', got: {week_start_name}")

        config = cls(
            api_url=api_url.rstrip('/'),
            api_token=os.getenv('PLANNER_API_TOKEN'),
            timezone=timezone_name,
            api_timeout=api_timeout,
            week_start=WEEK_START_NAMES[week_start_name],
        )
        logger.info(f"Loaded planner config for {config.api_url} (timezone: {config.timezone})")
        return config
