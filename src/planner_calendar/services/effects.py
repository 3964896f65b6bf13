"""Executes calendar commands against the planner API and reports the outcome."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import MutationError
from ..reschedule import Command, CompletionToggle, RescheduleRequest
from .planner_api import PlannerAPI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    command: Command
    ok: bool
    error: Optional[str] = None
    response: Optional[Dict[str, Any]] = None


class EffectHandler:
    """
    Performs the I/O for commands emitted by the layout layer.

    Failures are reported, not raised: the view layer rolls back its
    optimistic state and notifies the user. Nothing is retried.
    """

    def __init__(self, api: PlannerAPI):
        self.api = api

    def handle(self, command: Command) -> MutationResult:
        """
        Execute a single command.

        Args:
            command: A RescheduleRequest or CompletionToggle

        Returns:
            MutationResult with ok=False and the error message on failure

        Raises:
            TypeError: If the command type is unknown
        """
        if isinstance(command, RescheduleRequest):
            action = self.api.reschedule
        elif isinstance(command, CompletionToggle):
            action = self.api.set_completed
        else:
            raise TypeError(f"Unsupported command: {type(command).__name__}")

        try:
            response = action(command)
        except MutationError as e:
            logger.error(f"Mutation failed for {command.entity_id}: {e}")
            return MutationResult(command=command, ok=False, error=str(e))

        return MutationResult(command=command, ok=True, response=response)

    __call__ = handle
