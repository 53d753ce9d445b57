from types import SimpleNamespace

from nova.app.core.settings import get_settings
from nova.app.services.capacity_policy import can_activate, decide


def make_students(active: int, inactive: int = 0) -> list:
    students = [SimpleNamespace(id=f"active-{i}", active=True) for i in range(active)]
    students += [SimpleNamespace(id=f"inactive-{i}", active=False) for i in range(inactive)]
    return students


def test_allows_below_limit():
    decision = can_activate(make_students(19, inactive=5), limit=20)
    assert decision.allowed
    assert decision.active_count == 19
    assert decision.reason is None


def test_denies_at_limit_with_structured_reason():
    decision = can_activate(make_students(20), limit=20)
    assert not decision.allowed
    assert decision.reason == {"kind": "CapacityExceeded", "limit": 20}


def test_candidate_is_excluded_from_its_own_count():
    students = make_students(20)
    decision = can_activate(students, candidate_student_id="active-3", limit=20)
    assert decision.allowed
    assert decision.active_count == 19


def test_inactive_candidate_does_not_change_count():
    students = make_students(20, inactive=1)
    decision = can_activate(students, candidate_student_id="inactive-0", limit=20)
    assert not decision.allowed


def test_limit_defaults_to_settings():
    limit = get_settings().student_active_limit
    assert decide(limit - 1).allowed
    assert not decide(limit).allowed
    assert decide(0).limit == limit
