"""Exceptions raised by the TaskMaster domain layer.

Pages catch ``TaskMasterError`` and show the message inline; nothing here is
fatal to a session.
"""
from __future__ import annotations


class TaskMasterError(RuntimeError):
    pass


class AuthError(TaskMasterError):
    """Login or signup rejected."""


class ValidationError(TaskMasterError):
    """A required field is missing or malformed."""


class PermissionDenied(TaskMasterError):
    """A manager-only operation was attempted by someone else."""


class TransitionError(TaskMasterError):
    """The requested status change is not allowed from the current status."""


class TaskEditError(TaskMasterError):
    """Status and verification can only change through the lifecycle operations."""


class NotFoundError(TaskMasterError):
    pass
