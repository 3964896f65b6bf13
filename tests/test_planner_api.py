from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
import pytz
import requests

from planner_calendar.errors import MutationError
from planner_calendar.models import Entity, EntityKind, Priority
from planner_calendar.reschedule import CompletionToggle, RescheduleRequest, compute_reschedule
from planner_calendar.services.planner_api import PlannerAPI

EASTERN = pytz.timezone('US/Eastern')

EVENTS = [
    {'id': 1, 'title': 'Standup', 'startDate': '2025-03-04', 'endDate': '2025-03-04',
     'startTime': '09:00', 'endTime': '09:15', 'isAllDay': False, 'priority': 'high',
     'completed': False, 'color': '#3B82F6'},
    {'id': 2, 'title': 'Offsite', 'startDate': '2025-03-05', 'endDate': '2025-03-07',
     'isAllDay': True, 'priority': 'low'},
    {'id': 3, 'title': 'No times', 'startDate': '2025-03-06', 'isAllDay': False},
    {'id': 4, 'title': 'Weekly sync', 'startDate': '2025-03-06', 'startTime': '14:00',
     'endTime': '15:00', 'isRecurring': True},
    {'id': 5, 'title': 'Broken', 'startDate': 'not-a-date'},
]

TASKS = [
    {'id': 10, 'title': 'Write report', 'startDate': '2025-03-03', 'endDate': '2025-03-05',
     'priority': 'A', 'completed': True},
    {'id': 11, 'title': 'Due only', 'endDate': '2025-03-06', 'priority': 'C'},
    {'id': 12, 'title': 'Someday'},
]


def response(payload=None, status_error=None):
    resp = MagicMock()
    resp.json.return_value = payload
    if status_error:
        resp.raise_for_status.side_effect = status_error
    return resp


@pytest.fixture
def session():
    session = MagicMock()
    session.get.side_effect = lambda url, **kwargs: response(EVENTS if url.endswith('/events') else TASKS)
    return session


@pytest.fixture
def api(planner_config, session):
    return PlannerAPI(planner_config, session=session)


def test_get_entities_requests_both_endpoints(api, session):
    api.get_entities(date(2025, 3, 2), date(2025, 3, 8))

    urls = [c.args[0] for c in session.get.call_args_list]
    assert urls == ['http://planner.test/api/events', 'http://planner.test/api/tasks']
    kwargs = session.get.call_args_list[0].kwargs
    assert kwargs['params'] == {'startDate': '2025-03-02', 'endDate': '2025-03-08'}
    assert kwargs['headers']['Authorization'] == 'Bearer secret'
    assert kwargs['timeout'] == 10.0


def test_event_records(api):
    entities = {e.id: e for e in api.get_entities(date(2025, 3, 2), date(2025, 3, 8))}

    standup = entities['event-1']
    assert standup.start == EASTERN.localize(datetime(2025, 3, 4, 9, 0))
    assert standup.end == EASTERN.localize(datetime(2025, 3, 4, 9, 15))
    assert standup.priority is Priority.HIGH
    assert standup.color == '#3B82F6'
    assert standup.source_id == '1'
    assert standup.draggable

    offsite = entities['event-2']
    assert offsite.all_day
    assert offsite.start == EASTERN.localize(datetime(2025, 3, 5, 0, 0))
    assert offsite.end == EASTERN.localize(datetime(2025, 3, 7, 23, 59, 59))

    no_times = entities['event-3']
    assert (no_times.start.hour, no_times.end.hour, no_times.end.minute) == (0, 23, 59)
    assert no_times.priority is Priority.MEDIUM

    assert entities['event-4'].recurring
    assert not entities['event-4'].draggable
    assert 'event-5' not in entities


def test_task_records(api):
    entities = {e.id: e for e in api.get_entities(date(2025, 3, 2), date(2025, 3, 8))}

    report = entities['task-10']
    assert report.kind is EntityKind.TASK
    assert report.all_day
    assert report.completed
    assert report.priority is Priority.HIGH
    assert report.start_date == date(2025, 3, 3)
    assert report.end_date == date(2025, 3, 5)
    assert not report.draggable

    due_only = entities['task-11']
    assert due_only.start_date == due_only.end_date == date(2025, 3, 6)
    assert due_only.priority is Priority.LOW

    assert 'task-12' not in entities


def test_fetch_failure_raises_runtime_error(planner_config):
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError('refused')
    with pytest.raises(RuntimeError, match='Failed to fetch events'):
        PlannerAPI(planner_config, session=session).get_entities(date(2025, 3, 2), date(2025, 3, 8))


def test_invalid_payload_raises_runtime_error(planner_config):
    session = MagicMock()
    session.get.return_value = response({'items': []})
    with pytest.raises(RuntimeError, match='Invalid API response format'):
        PlannerAPI(planner_config, session=session).get_entities(date(2025, 3, 2), date(2025, 3, 8))


def test_reschedule_patches_event(api, session):
    session.patch.return_value = response({'id': 1})
    request = RescheduleRequest(
        entity_id='event-1', kind=EntityKind.EVENT, source_id='1',
        new_start=EASTERN.localize(datetime(2025, 3, 6, 9, 0)),
        new_end=EASTERN.localize(datetime(2025, 3, 6, 10, 30)),
    )

    assert api.reschedule(request) == {'id': 1}
    url = session.patch.call_args.args[0]
    kwargs = session.patch.call_args.kwargs
    assert url == 'http://planner.test/api/events/1'
    assert kwargs['json'] == {
        'startDate': '2025-03-06', 'endDate': '2025-03-06',
        'startTime': '09:00', 'endTime': '10:30', 'isAllDay': False,
    }
    assert kwargs['timeout'] == 10.0


def test_reschedule_across_dst_sends_dropped_wall_clock(api, session):
    session.patch.return_value = response({'id': 7})
    entity = Entity(
        id='event-7', title='Late call', kind=EntityKind.EVENT, source_id='7',
        start=EASTERN.localize(datetime(2025, 1, 15, 23, 30)),
        end=EASTERN.localize(datetime(2025, 1, 15, 23, 45)),
    )

    api.reschedule(compute_reschedule(entity, date(2025, 7, 15)))
    assert session.patch.call_args.kwargs['json'] == {
        'startDate': '2025-07-15', 'endDate': '2025-07-15',
        'startTime': '23:30', 'endTime': '23:45', 'isAllDay': False,
    }


def test_reschedule_all_day_sends_null_times(api, session):
    session.patch.return_value = response({})
    request = RescheduleRequest(
        entity_id='event-2', kind=EntityKind.EVENT, source_id='2',
        new_start=datetime(2025, 3, 10, 0, 0), new_end=datetime(2025, 3, 12, 23, 59, 59),
        all_day=True,
    )
    api.reschedule(request)
    payload = session.patch.call_args.kwargs['json']
    assert payload['startTime'] is None and payload['endTime'] is None
    assert payload['endDate'] == '2025-03-12'


def test_reschedule_rejects_tasks(api, session):
    request = RescheduleRequest(
        entity_id='task-10', kind=EntityKind.TASK, source_id='10',
        new_start=datetime(2025, 3, 10), new_end=datetime(2025, 3, 10),
    )
    with pytest.raises(MutationError):
        api.reschedule(request)
    session.patch.assert_not_called()


def test_set_completed_uses_kind_endpoint(api, session):
    session.patch.return_value = response({})
    api.set_completed(CompletionToggle(entity_id='task-10', kind=EntityKind.TASK,
                                       source_id='10', completed=False))
    assert session.patch.call_args.args[0] == 'http://planner.test/api/tasks/10'
    assert session.patch.call_args.kwargs['json'] == {'completed': False}


def test_mutation_http_error_raises_mutation_error(api, session):
    session.patch.return_value = response(status_error=requests.HTTPError('500 Server Error'))
    with pytest.raises(MutationError, match='events/1'):
        api.set_completed(CompletionToggle(entity_id='event-1', kind=EntityKind.EVENT,
                                           source_id='1', completed=True))


def test_mutation_timeout_raises_mutation_error(api, session):
    session.patch.side_effect = requests.Timeout('timed out')
    with pytest.raises(MutationError):
        api.set_completed(CompletionToggle(entity_id='event-1', kind=EntityKind.EVENT,
                                           source_id='1', completed=True))
