import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

import pytz
import requests

from ..config import PlannerConfig
from ..errors import MutationError
from ..models import Entity, EntityKind
from ..reschedule import CompletionToggle, RescheduleRequest

logger = logging.getLogger(__name__)

# Constants
DATE_FORMAT = '%Y-%m-%d'
TIME_FORMAT = '%H:%M'
DAY_START = time(0, 0)
TIMED_DAY_END = time(23, 59)
ALL_DAY_END = time(23, 59, 59)

ENDPOINTS = {
    EntityKind.EVENT: 'events',
    EntityKind.TASK: 'tasks',
}


class PlannerAPI:
    """A class to interact with the planner REST API and convert its records to entities."""

    def __init__(self, config: PlannerConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self._tz = pytz.timezone(config.timezone)

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.config.api_token:
            headers['Authorization'] = f'Bearer {self.config.api_token}'
        return headers

    def _url(self, *parts: str) -> str:
        return '/'.join([self.config.api_url.rstrip('/'), 'api', *parts])

    def get_entities(self, start: date, end: date) -> List[Entity]:
        """
        Fetch events and tasks overlapping [start, end].

        Args:
            start: First day of the range
            end: Last day of the range (inclusive)

        Returns:
            List[Entity]: Events followed by tasks, in store order

        Raises:
            RuntimeError: If the API cannot be reached or returns an invalid payload
        """
        logger.info(f"Fetching entities from {start} to {end} ({self.config.timezone})")

        events = self._fetch_records(EntityKind.EVENT, start, end)
        tasks = self._fetch_records(EntityKind.TASK, start, end)

        entities = []
        for record in events:
            entity = self._process_record(record, self._format_event)
            if entity:
                entities.append(entity)
        for record in tasks:
            entity = self._process_record(record, self._format_task)
            if entity:
                entities.append(entity)

        logger.info(
            f"Processed {len(entities)} entities for calendar display "
            f"({len(events)} events, {len(tasks)} tasks received)"
        )
        return entities

    def _fetch_records(self, kind: EntityKind, start: date, end: date) -> List[Dict[str, Any]]:
        params = {
            'startDate': start.strftime(DATE_FORMAT),
            'endDate': end.strftime(DATE_FORMAT),
        }
        try:
            response = self.session.get(
                self._url(ENDPOINTS[kind]),
                headers=self._headers(),
                params=params,
                timeout=self.config.api_timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {ENDPOINTS[kind]}: {str(e)}")
            raise RuntimeError(f"Failed to fetch {ENDPOINTS[kind]}: {str(e)}")

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Invalid API response format for {ENDPOINTS[kind]}: not JSON")
            raise RuntimeError(f"Invalid API response format for {ENDPOINTS[kind]}")

        if not isinstance(data, list):
            logger.error(f"Invalid API response format for {ENDPOINTS[kind]}: expected a list")
            raise RuntimeError(f"Invalid API response format for {ENDPOINTS[kind]}")

        logger.info(f"Retrieved {len(data)} {ENDPOINTS[kind]} from planner API")
        return data

    def _process_record(self, record: Dict[str, Any], formatter) -> Optional[Entity]:
        try:
            return formatter(record)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Failed to process record {record.get('title', 'Unknown')}: {str(e)}")
            return None

    def _localize(self, day: str, clock: Optional[time]) -> datetime:
        naive = datetime.combine(datetime.strptime(day, DATE_FORMAT).date(), clock)
        return self._tz.localize(naive)

    @staticmethod
    def _parse_time(value: Optional[str], default: time) -> time:
        if not value:
            return default
        return datetime.strptime(value[:5], TIME_FORMAT).time()

    def _format_event(self, event: Dict[str, Any]) -> Entity:
        """
        Convert an event record to an Entity.

        All-day events run from midnight to 23:59:59 of their last day; timed
        events without a start or end time default to 00:00 and 23:59.
        """
        start_day = event['startDate']
        end_day = event.get('endDate') or start_day
        is_all_day = bool(event.get('isAllDay', False))

        if is_all_day:
            start_dt = self._localize(start_day, DAY_START)
            end_dt = self._localize(end_day, ALL_DAY_END)
        else:
            start_dt = self._localize(start_day, self._parse_time(event.get('startTime'), DAY_START))
            end_dt = self._localize(end_day, self._parse_time(event.get('endTime'), TIMED_DAY_END))

        return Entity(
            id=f"event-{event['id']}",
            title=event['title'],
            start=start_dt,
            end=end_dt,
            all_day=is_all_day,
            priority=event.get('priority'),
            completed=bool(event.get('completed', False)),
            color=event.get('color'),
            kind=EntityKind.EVENT,
            source_id=str(event['id']),
            recurring=bool(event.get('isRecurring', False)),
        )

    def _format_task(self, task: Dict[str, Any]) -> Optional[Entity]:
        """Convert a task record to an all-day Entity, or None if it has no dates."""
        start_day = task.get('startDate') or task.get('endDate')
        end_day = task.get('endDate') or task.get('startDate')
        if not start_day:
            return None

        return Entity(
            id=f"task-{task['id']}",
            title=task['title'],
            start=self._localize(start_day, DAY_START),
            end=self._localize(end_day, TIMED_DAY_END),
            all_day=True,
            priority=task.get('priority'),
            completed=bool(task.get('completed', False)),
            color=task.get('color'),
            kind=EntityKind.TASK,
            source_id=str(task['id']),
        )

    def reschedule(self, request: RescheduleRequest) -> Dict[str, Any]:
        """
        Send a reschedule as a PATCH to the event's endpoint.

        Raises:
            MutationError: If the request fails or the entity is not a stored event
        """
        if request.kind is not EntityKind.EVENT or not request.source_id:
            raise MutationError(f"Only stored events can be rescheduled: {request.entity_id}")

        # Dropped wall-clock times are sent as-is
        start, end = request.new_start, request.new_end
        payload = {
            'startDate': start.strftime(DATE_FORMAT),
            'endDate': end.strftime(DATE_FORMAT),
            'startTime': None if request.all_day else start.strftime(TIME_FORMAT),
            'endTime': None if request.all_day else end.strftime(TIME_FORMAT),
            'isAllDay': request.all_day,
        }
        return self._patch(EntityKind.EVENT, request.source_id, payload)

    def set_completed(self, toggle: CompletionToggle) -> Dict[str, Any]:
        """
        Send a completion toggle as a PATCH to the event or task endpoint.

        Raises:
            MutationError: If the request fails
        """
        if not toggle.source_id:
            raise MutationError(f"Entity {toggle.entity_id} has no store id")
        return self._patch(toggle.kind, toggle.source_id, {'completed': toggle.completed})

    def _patch(self, kind: EntityKind, source_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = self._url(ENDPOINTS[kind], source_id)
        try:
            response = self.session.patch(
                url,
                headers=self._headers(),
                json=payload,
                timeout=self.config.api_timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to update {ENDPOINTS[kind]}/{source_id}: {str(e)}")
            raise MutationError(f"Failed to update {ENDPOINTS[kind]}/{source_id}: {str(e)}")

        logger.info(f"Updated {ENDPOINTS[kind]}/{source_id}: {payload}")
        try:
            return response.json()
        except ValueError:
            return {}
