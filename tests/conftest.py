from datetime import datetime
from itertools import count

import pytest

from planner_calendar.config import LayoutConfig, PlannerConfig
from planner_calendar.models import Entity, EntityKind

_ids = count(1)


def make_entity(start, end, title=None, **kwargs):
    """Build an Entity; ``start``/``end`` may be datetimes or 'YYYY-MM-DD HH:MM' strings."""
    if isinstance(start, str):
        start = datetime.strptime(start, '%Y-%m-%d %H:%M')
    if isinstance(end, str):
        end = datetime.strptime(end, '%Y-%m-%d %H:%M')
    n = next(_ids)
    kwargs.setdefault('id', f"event-{n}")
    kwargs.setdefault('source_id', str(n))
    kwargs.setdefault('kind', EntityKind.EVENT)
    return Entity(title=title or f"Item {n}", start=start, end=end, **kwargs)


@pytest.fixture
def entity():
    return make_entity


@pytest.fixture
def layout_config():
    return LayoutConfig(hour_height=60, min_block_height=15)


@pytest.fixture
def planner_config():
    return PlannerConfig(api_url='http://planner.test', api_token='secret', timezone='US/Eastern')
