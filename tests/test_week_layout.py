from datetime import date, timedelta

import pytest

from planner_calendar.config import MONDAY, LayoutConfig
from planner_calendar.layout.common import calculate_week_start, week_window
from planner_calendar.layout.week import WeekLayoutEngine

from conftest import make_entity

# Sunday 2025-03-02 .. Saturday 2025-03-08
WEEK = [date(2025, 3, 2) + timedelta(days=i) for i in range(7)]


def test_week_window_starts_on_sunday_by_default():
    assert week_window(date(2025, 3, 5)) == WEEK
    assert calculate_week_start(date(2025, 3, 2)) == date(2025, 3, 2)


def test_week_window_monday_start():
    days = week_window(date(2025, 3, 2), MONDAY)
    assert days[0] == date(2025, 2, 24)
    assert days[-1] == date(2025, 3, 2)


def test_hour_cells():
    nine = make_entity('2025-03-04 09:10', '2025-03-04 09:50')
    nine_high = make_entity('2025-03-04 09:45', '2025-03-04 10:30', priority='high')
    ten = make_entity('2025-03-04 10:00', '2025-03-04 11:00')
    early = make_entity('2025-03-04 05:00', '2025-03-04 06:00')

    layout = WeekLayoutEngine().layout([nine, nine_high, ten, early], WEEK)

    tuesday = date(2025, 3, 4)
    assert layout.cell(tuesday, 9) == [nine_high, nine]
    assert layout.cell(tuesday, 10) == [ten]
    assert layout.cell(date(2025, 3, 5), 9) == []
    # 05:00 is outside the default 6..21 slots
    assert all(early not in cell for cell in layout.cells.values())
    assert early in layout.day_items[tuesday].items


def test_custom_hour_slots():
    early = make_entity('2025-03-04 05:00', '2025-03-04 06:00')
    layout = WeekLayoutEngine().layout([early], WEEK, hours=range(0, 24))
    assert layout.cell(date(2025, 3, 4), 5) == [early]
    assert layout.hours == list(range(24))


def test_day_items_capped_with_hidden_count():
    thursday = date(2025, 3, 6)
    entities = [
        make_entity(f'2025-03-06 {h:02d}:00', f'2025-03-06 {h:02d}:30')
        for h in (8, 9, 10, 11, 12)
    ]
    layout = WeekLayoutEngine(LayoutConfig(visible_count=3)).layout(entities, WEEK)

    chips = layout.day_items[thursday]
    assert len(chips.items) == 5
    assert list(chips.visible) == entities[:3]
    assert chips.hidden_count == 2
    assert layout.day_items[date(2025, 3, 2)].hidden_count == 0


def test_timed_overflow_excludes_all_day_entities():
    thursday = date(2025, 3, 6)
    timed = [
        make_entity(f'2025-03-06 {h:02d}:00', f'2025-03-06 {h:02d}:30')
        for h in (8, 9, 10, 11)
    ]
    all_day = [make_entity('2025-03-06 00:00', '2025-03-06 23:59', all_day=True) for _ in range(2)]
    layout = WeekLayoutEngine(LayoutConfig(visible_count=3)).layout(all_day + timed, WEEK)

    assert layout.day_items[thursday].hidden_count == 3
    assert len(layout.all_day[thursday]) == 2
    assert layout.timed_hidden_count(thursday) == 1
    assert layout.timed_hidden_count(date(2025, 3, 2)) == 0


def test_multi_day_entity_only_on_start_day():
    trip = make_entity('2025-03-03 09:00', '2025-03-05 17:00')
    layout = WeekLayoutEngine().layout([trip], WEEK)

    assert list(layout.day_items[date(2025, 3, 3)].items) == [trip]
    assert len(layout.day_items[date(2025, 3, 4)]) == 0
    assert layout.cell(date(2025, 3, 3), 9) == [trip]
    assert layout.cell(date(2025, 3, 4), 9) == []


def test_all_day_lane_covers_every_day_and_stays_out_of_cells():
    conference = make_entity('2025-03-03 00:00', '2025-03-05 23:59', all_day=True)
    layout = WeekLayoutEngine().layout([conference], WEEK)

    covered = [d for d in WEEK if conference in layout.all_day[d].items]
    assert covered == [date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5)]
    assert layout.cells == {}


def test_malformed_entities_are_skipped():
    backwards = make_entity('2025-03-04 12:00', '2025-03-04 09:00')
    good = make_entity('2025-03-04 09:00', '2025-03-04 10:00')
    layout = WeekLayoutEngine().layout([backwards, good], WEEK)

    assert layout.skipped == 1
    assert all(backwards not in chips.items for chips in layout.day_items.values())
    assert layout.cell(date(2025, 3, 4), 9) == [good]


def test_layout_week_of_uses_config_week_start():
    e = make_entity('2025-03-03 09:00', '2025-03-03 10:00')
    layout = WeekLayoutEngine(LayoutConfig(week_start=MONDAY)).layout_week_of([e], date(2025, 3, 5))
    assert layout.days[0] == date(2025, 3, 3)
    assert list(layout.day_items[date(2025, 3, 3)].items) == [e]


@pytest.mark.parametrize('days', [
    WEEK[:6],
    WEEK[:3] + WEEK[4:] + [date(2025, 3, 9)],
])
def test_rejects_bad_week_window(days):
    with pytest.raises(ValueError):
        WeekLayoutEngine().layout([], days)
