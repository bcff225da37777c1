"""Query status state machine. Checked before any status change is persisted."""

from zelene.errors import ProcedureError
from zelene.models.query import (
    STATUS_CANCELLED,
    STATUS_IN_PROGRESS,
    STATUS_NEW,
    STATUS_RESOLVED,
)

# Closed states can only be reopened to IN_PROGRESS, never back to NEW.
ALLOWED_TRANSITIONS = {
    STATUS_NEW: frozenset({STATUS_IN_PROGRESS, STATUS_RESOLVED, STATUS_CANCELLED}),
    STATUS_IN_PROGRESS: frozenset({STATUS_RESOLVED, STATUS_CANCELLED}),
    STATUS_RESOLVED: frozenset({STATUS_IN_PROGRESS}),
    STATUS_CANCELLED: frozenset({STATUS_IN_PROGRESS}),
}


def can_transition(current: str, target: str) -> bool:
    if target not in ALLOWED_TRANSITIONS:
        return False
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise ProcedureError("BAD_REQUEST", f"Cannot move a query from {current} to {target}")
