import pytest

from zelene.errors import ProcedureError
from zelene.services.lifecycle import can_transition, ensure_transition


@pytest.mark.parametrize("current,target", [
    ("NEW", "IN_PROGRESS"),
    ("NEW", "RESOLVED"),
    ("NEW", "CANCELLED"),
    ("IN_PROGRESS", "RESOLVED"),
    ("IN_PROGRESS", "CANCELLED"),
    ("RESOLVED", "IN_PROGRESS"),
    ("CANCELLED", "IN_PROGRESS"),
    ("RESOLVED", "RESOLVED"),
])
def test_allowed(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize("current,target", [
    ("IN_PROGRESS", "NEW"),
    ("RESOLVED", "NEW"),
    ("CANCELLED", "RESOLVED"),
    ("NEW", "ARCHIVED"),
])
def test_rejected(current, target):
    assert not can_transition(current, target)
    with pytest.raises(ProcedureError) as exc:
        ensure_transition(current, target)
    assert exc.value.code == "BAD_REQUEST"
    assert exc.value.status == 400
