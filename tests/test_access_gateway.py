import pytest

from nova.app.core.errors import NotFound, Unauthenticated
from nova.app.core.security import Identity
from nova.app.db.base import Base
from nova.app.db.session import SessionLocal, engine
from nova.app.models.parent import Parent
from nova.app.models.student import Student
from nova.app.models.tutor import Tutor
from nova.app.models.tutor_student import TutorStudent
from nova.app.services import access_gateway
from nova.app.services.access_gateway import ScopeKind


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_tutor(db, user_id: str) -> Tutor:
    tutor = Tutor(user_id=user_id, email=f"{user_id}@example.com")
    db.add(tutor)
    db.commit()
    return tutor


def make_student(db, tutor: Tutor, token: str, user_id: str | None = None) -> Student:
    student = Student(full_name="Kim", subject="Math", year="8", parent_link_token=token, user_id=user_id)
    db.add(student)
    db.flush()
    db.add(TutorStudent(tutor_id=tutor.id, student_id=student.id, subject="Math", is_primary=True))
    db.commit()
    return student


def test_tutor_identity_wins_over_parent_token(db):
    tutor = make_tutor(db, "tutor-1")
    make_student(db, tutor, "token-1")

    scope = access_gateway.resolve_scope(db, Identity(subject_id="tutor-1"), parent_token="token-1")
    assert scope.kind == ScopeKind.TUTOR_OWNER
    assert scope.tutor_id == tutor.id
    assert scope.read_only is False


def test_student_identity_resolves_to_student_owner(db):
    tutor = make_tutor(db, "tutor-1")
    student = make_student(db, tutor, "token-1", user_id="student-1")

    scope = access_gateway.resolve_scope(db, Identity(subject_id="student-1"))
    assert scope.kind == ScopeKind.STUDENT_OWNER
    assert scope.student_id == student.id


def test_parent_token_gives_read_only_viewer(db):
    tutor = make_tutor(db, "tutor-1")
    student = make_student(db, tutor, "token-1")

    scope = access_gateway.resolve_scope(db, None, parent_token="token-1")
    assert scope.kind == ScopeKind.PARENT_VIEWER
    assert scope.student_id == student.id
    assert scope.read_only is True
    with pytest.raises(NotFound):
        access_gateway.require_tutor(scope)


def test_unknown_token_and_no_identity_is_unauthenticated(db):
    assert access_gateway.resolve_scope(db, None, parent_token="nope").kind == ScopeKind.UNAUTHENTICATED
    scope = access_gateway.resolve_scope(db, None)
    assert scope is access_gateway.UNAUTHENTICATED
    with pytest.raises(Unauthenticated):
        access_gateway.require_tutor(scope)


def test_signed_in_without_account_is_not_found_for_tutor_routes(db):
    scope = access_gateway.resolve_scope(db, Identity(subject_id="newcomer"))
    assert scope.kind == ScopeKind.UNAUTHENTICATED
    with pytest.raises(NotFound):
        access_gateway.require_tutor(scope)


def test_owned_lookup_hides_other_tutors_students(db):
    owner = make_tutor(db, "tutor-1")
    other = make_tutor(db, "tutor-2")
    student = make_student(db, owner, "token-1")

    assert access_gateway.get_owned_student(db, owner.id, student.id).id == student.id
    with pytest.raises(NotFound) as excinfo:
        access_gateway.get_owned_student(db, other.id, student.id)
    assert excinfo.value.message == "Student not found"


def test_secondary_link_is_linked_but_not_owned(db):
    owner = make_tutor(db, "tutor-1")
    helper = make_tutor(db, "tutor-2")
    student = make_student(db, owner, "token-1")
    db.add(TutorStudent(tutor_id=helper.id, student_id=student.id, subject="Physics"))
    db.commit()

    assert access_gateway.get_linked_student(db, helper.id, student.id).id == student.id
    with pytest.raises(NotFound):
        access_gateway.get_owned_student(db, helper.id, student.id)


def test_public_projection_only_exposes_safe_fields(db):
    tutor = make_tutor(db, "tutor-1")
    student = make_student(db, tutor, "token-1")
    student.parent_email = "x@y.com"
    db.commit()

    projection = access_gateway.public_projection(student)
    assert projection.model_dump() == {
        "id": student.id,
        "full_name": "Kim",
        "subject": "Math",
        "year": "8",
        "active": True,
        "tutor": {"email": "tutor-1@example.com"},
    }


def test_parent_account_resolves_to_read_only_viewer(db):
    tutor = make_tutor(db, "tutor-1")
    student = make_student(db, tutor, "token-1")
    db.add(Parent(user_id="parent-1", email="p@example.com", full_name="Pat", student_id=student.id))
    db.commit()

    scope = access_gateway.resolve_scope(db, Identity(subject_id="parent-1"))
    assert scope.kind == ScopeKind.PARENT_VIEWER
    assert scope.student_id == student.id
    assert scope.read_only is True
    assert access_gateway.require_parent_account(scope) == "parent-1"
    assert access_gateway.get_parent_student(db, "parent-1", student.id).id == student.id
    with pytest.raises(NotFound):
        access_gateway.get_parent_student(db, "parent-2", student.id)


def test_token_viewer_is_not_a_parent_account(db):
    tutor = make_tutor(db, "tutor-1")
    make_student(db, tutor, "token-1")
    scope = access_gateway.resolve_scope(db, None, parent_token="token-1")
    with pytest.raises(NotFound):
        access_gateway.require_parent_account(scope)
