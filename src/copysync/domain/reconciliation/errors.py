"""Error taxonomy for reconciliation runs.

``ValidationError`` is raised before any write and leaves stored state
untouched. ``StoreError`` wraps storage failures with the backend message.
``PartialApplicationError`` is a ``StoreError`` raised after an earlier write
of the same run already succeeded; stored state then matches neither the
snapshot nor the plan.
"""

from __future__ import annotations


class ReconciliationError(Exception):
    """Base class for failures surfaced by a reconciliation run."""


class ValidationError(ReconciliationError):
    """The run was rejected before touching storage."""


class InvalidScopeError(ValidationError):
    def __init__(self, message: str = "Scope requires a site id and a user id") -> None:
        super().__init__(message)


class DuplicateTitleError(ValidationError):
    """Two records would end up sharing one identity key."""

    def __init__(self, title: str) -> None:
        super().__init__(f'Duplicate title: "{title}"')
        self.title = title


class StoreError(ReconciliationError):
    """Storage collaborator failed; ``str(exc)`` is the backend message."""


class PartialApplicationError(StoreError):
    """A storage failure after some writes of the same run were applied."""

    def __init__(self, cause: StoreError, *, applied: int) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.applied = applied
