import pytest
from fastapi.testclient import TestClient

from nova.app.core.security import create_access_token
from nova.app.db.base import Base
from nova.app.db.session import SessionLocal, engine
from nova.app.main import app
from nova.app.models.tutor_student import TutorStudent


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def tutor_headers(client: TestClient, subject: str, email: str) -> dict:
    headers = {"Authorization": f"Bearer {create_access_token(subject, email)}"}
    assert client.post("/me/ensure", headers=headers).status_code == 200
    return headers


def create_student(client: TestClient, headers: dict) -> str:
    resp = client.post("/students", json={"full_name": "John Doe", "subject": "Mathematics", "year": "Grade 10"}, headers=headers)
    return resp.json()["id"]


def link_count(student_id: str) -> int:
    db = SessionLocal()
    try:
        return db.query(TutorStudent).filter(TutorStudent.student_id == student_id).count()
    finally:
        db.close()


def test_create_link_returns_populated_relationship():
    client = TestClient(app)
    headers_owner = tutor_headers(client, "owner", "owner@example.com")
    headers_x = tutor_headers(client, "tutor-x", "x@example.com")
    student_id = create_student(client, headers_owner)

    resp = client.post(
        "/tutor-students",
        json={"student_id": student_id, "subject": "Advanced Mathematics", "notes": "Special focus on algebra"},
        headers=headers_x,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["subject"] == "Advanced Mathematics"
    assert data["notes"] == "Special focus on algebra"
    assert data["is_primary"] is False
    assert data["student"]["full_name"] == "John Doe"
    assert data["tutor"]["email"] == "x@example.com"


def test_duplicate_pair_conflicts_regardless_of_subject():
    client = TestClient(app)
    headers_owner = tutor_headers(client, "owner", "owner@example.com")
    headers_x = tutor_headers(client, "tutor-x", "x@example.com")
    student_id = create_student(client, headers_owner)

    first = client.post("/tutor-students", json={"student_id": student_id, "subject": "Math"}, headers=headers_x)
    assert first.status_code == 201
    second = client.post("/tutor-students", json={"student_id": student_id, "subject": "Physics"}, headers=headers_x)
    assert second.status_code == 409
    assert second.json() == {"error": "Conflict", "message": "Tutor-student relationship already exists"}
    assert link_count(student_id) == 2  # owner's primary row plus one link for tutor X


def test_owner_cannot_link_own_student_twice():
    client = TestClient(app)
    headers = tutor_headers(client, "owner", "owner@example.com")
    student_id = create_student(client, headers)
    resp = client.post("/tutor-students", json={"student_id": student_id, "subject": "Math"}, headers=headers)
    assert resp.status_code == 409
    assert link_count(student_id) == 1


def test_missing_student_returns_404():
    client = TestClient(app)
    headers = tutor_headers(client, "tutor-x", "x@example.com")
    resp = client.post("/tutor-students", json={"student_id": "nonexistent-student", "subject": "Math"}, headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Student not found"


def test_validates_required_fields():
    client = TestClient(app)
    headers = tutor_headers(client, "tutor-x", "x@example.com")
    resp = client.post("/tutor-students", json={"notes": "Some notes"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "ValidationError"
    assert resp.json()["details"]


def test_list_links():
    client = TestClient(app)
    headers = tutor_headers(client, "owner", "owner@example.com")
    assert client.get("/tutor-students", headers=headers).json() == []
    create_student(client, headers)
    create_student(client, headers)
    resp = client.get("/tutor-students", headers=headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 2
    assert all(item["is_primary"] for item in resp.json())


def test_list_links_requires_tutor():
    client = TestClient(app)
    resp = client.get("/tutor-students")
    assert resp.status_code == 401
