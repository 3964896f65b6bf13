"""Exceptions raised by the rescheduler and the planner API client."""


class InvalidDropTarget(ValueError):
    """A drop could not be resolved to a calendar date, or the dragged entity has no valid interval."""


class NotDraggableError(ValueError):
    """The entity is a task or a recurring instance and cannot be moved by drag."""


class MutationError(RuntimeError):
    """A reschedule or completion-toggle request failed at the backing store."""
