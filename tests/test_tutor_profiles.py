from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from nova.app.core.security import create_access_token
from nova.app.db.base import Base
from nova.app.db.session import SessionLocal, engine
from nova.app.main import app
from nova.app.models.tutor_profile import TutorProfile
from nova.app.services.tutor_profiles import clamp_paging, is_profile_complete


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def auth_headers(subject: str, email: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject, email)}"}


def create_tutor(client: TestClient, subject: str, email: str) -> tuple[dict, int]:
    headers = auth_headers(subject, email)
    resp = client.post("/me/ensure", headers=headers)
    assert resp.status_code == 200
    return headers, resp.json()["id"]


def save_profile(client: TestClient, headers: dict, **overrides):
    payload = {"display_name": "Ms Tutor", "subjects": ["Math"]}
    payload.update(overrides)
    return client.put("/tutor-profiles/me", json=payload, headers=headers)


COMPLETE_PROFILE = {
    "display_name": "Dr Ada",
    "subjects": ["Math", "Physics"],
    "bio": "Twenty years of teaching algebra and mechanics.",
    "experience": "Secondary school teacher since 2005",
    "hourly_rate": "45.50",
    "availability": "Weekday evenings and Saturday mornings",
    "profile_image": "https://cdn.example.com/ada.png",
    "country": "UK",
    "city": "Leeds",
}


def test_save_profile_creates_then_updates():
    client = TestClient(app)
    headers, tutor_id = create_tutor(client, "tutor-1", "t1@example.com")

    created = save_profile(client, headers, subjects=["Math", " Physics ", "Math"], bio="", hourly_rate="45.50")
    assert created.status_code == 200
    data = created.json()
    assert data["tutor_id"] == tutor_id
    assert data["subjects"] == ["Math", "Physics"]
    assert data["bio"] is None
    assert Decimal(data["hourly_rate"]) == Decimal("45.50")
    assert data["verified"] is False
    assert data["total_sessions"] == 0
    assert data["tutor"]["email"] == "t1@example.com"

    updated = save_profile(client, headers, display_name="Mr Tutor", subjects=["Chemistry"])
    assert updated.status_code == 200
    assert updated.json()["id"] == data["id"]
    assert updated.json()["display_name"] == "Mr Tutor"
    assert updated.json()["subjects"] == ["Chemistry"]


def test_save_profile_requires_subjects():
    client = TestClient(app)
    headers, _ = create_tutor(client, "tutor-1", "t1@example.com")
    for subjects in ([], ["  "]):
        resp = save_profile(client, headers, subjects=subjects)
        assert resp.status_code == 400
        assert resp.json()["error"] == "ValidationError"
        assert resp.json()["details"][0]["field"] == "subjects"


def test_save_profile_requires_tutor_scope():
    client = TestClient(app)
    assert save_profile(client, {}).status_code == 401
    student_headers = auth_headers("student-1", "s1@example.com")
    client.post("/student-accounts", json={"full_name": "Sam"}, headers=student_headers)
    assert save_profile(client, student_headers).status_code == 404


def test_read_profile_by_tutor_id():
    client = TestClient(app)
    headers, tutor_id = create_tutor(client, "tutor-1", "t1@example.com")

    empty = client.get(f"/tutor-profiles/{tutor_id}")
    assert empty.status_code == 200
    assert empty.json()["tutor"]["id"] == tutor_id
    assert empty.json()["profile"] is None

    save_profile(client, headers)
    resp = client.get(f"/tutor-profiles/{tutor_id}")
    assert resp.json()["profile"]["display_name"] == "Ms Tutor"
    assert client.get("/tutor-profiles/me", headers=headers).json() == resp.json()

    assert client.get("/tutor-profiles/999").status_code == 404


def test_browse_filters_by_subject_and_hides_inactive():
    client = TestClient(app)
    headers_a, tutor_a = create_tutor(client, "tutor-a", "a@example.com")
    headers_b, tutor_b = create_tutor(client, "tutor-b", "b@example.com")
    headers_c, _ = create_tutor(client, "tutor-c", "c@example.com")
    save_profile(client, headers_a, subjects=["Math", "Physics"])
    save_profile(client, headers_b, subjects=["History"])
    save_profile(client, headers_c, subjects=["Math"], active=False)

    math = client.get("/tutor-profiles", params={"subject": "Math"})
    assert math.status_code == 200
    assert [item["tutor_id"] for item in math.json()["tutors"]] == [tutor_a]
    assert math.json()["pagination"]["total_count"] == 1

    everything = client.get("/tutor-profiles").json()
    assert sorted(item["tutor_id"] for item in everything["tutors"]) == sorted([tutor_a, tutor_b])


def test_browse_orders_verified_then_completed_sessions():
    client = TestClient(app)
    headers_a, tutor_a = create_tutor(client, "tutor-a", "a@example.com")
    headers_b, tutor_b = create_tutor(client, "tutor-b", "b@example.com")
    headers_c, tutor_c = create_tutor(client, "tutor-c", "c@example.com")
    for headers in (headers_a, headers_b, headers_c):
        save_profile(client, headers)

    student = client.post("/students", json={"full_name": "Kid", "subject": "Math", "year": "5"}, headers=headers_b).json()
    session = client.post(
        "/sessions",
        json={"student_id": student["id"], "start_time": "2030-01-01T10:00:00Z", "end_time": "2030-01-01T11:00:00Z"},
        headers=headers_b,
    ).json()
    client.patch(f"/sessions/{session['id']}", json={"status": "completed"}, headers=headers_b)

    db = SessionLocal()
    try:
        db.query(TutorProfile).filter(TutorProfile.tutor_id == tutor_c).update({"verified": True})
        db.commit()
    finally:
        db.close()

    data = client.get("/tutor-profiles").json()["tutors"]
    assert [item["tutor_id"] for item in data] == [tutor_c, tutor_b, tutor_a]
    assert data[1]["total_sessions"] == 1


def test_browse_pagination_is_clamped():
    client = TestClient(app)
    for index in range(3):
        headers, _ = create_tutor(client, f"tutor-{index}", f"t{index}@example.com")
        save_profile(client, headers)

    first = client.get("/tutor-profiles", params={"page": 0, "limit": 0}).json()
    assert len(first["tutors"]) == 1
    assert first["pagination"] == {
        "current_page": 1,
        "total_pages": 3,
        "total_count": 3,
        "has_next_page": True,
        "has_prev_page": False,
    }

    last = client.get("/tutor-profiles", params={"page": 2, "limit": 2}).json()
    assert len(last["tutors"]) == 1
    assert last["pagination"]["has_next_page"] is False
    assert last["pagination"]["has_prev_page"] is True

    assert clamp_paging(1, 500) == (1, 50)
    assert clamp_paging(-3, 7) == (1, 7)


def test_profile_completeness():
    client = TestClient(app)
    headers, _ = create_tutor(client, "tutor-1", "t1@example.com")
    assert client.get("/tutor-profiles/me/complete", headers=headers).json() == {"is_complete": False}

    save_profile(client, headers, **{**COMPLETE_PROFILE, "bio": "Too short"})
    assert client.get("/tutor-profiles/me/complete", headers=headers).json() == {"is_complete": False}

    save_profile(client, headers, **COMPLETE_PROFILE)
    assert client.get("/tutor-profiles/me/complete", headers=headers).json() == {"is_complete": True}
    assert is_profile_complete(None) is False


def test_student_finds_tutor_through_directory():
    client = TestClient(app)
    headers, tutor_id = create_tutor(client, "tutor-1", "t1@example.com")
    save_profile(client, headers, subjects=["Physics"])
    student_headers = auth_headers("student-1", "s1@example.com")
    client.post("/student-accounts", json={"full_name": "Sam"}, headers=student_headers)

    found = client.get("/tutor-profiles", params={"subject": "Physics"}).json()["tutors"][0]
    resp = client.post(
        "/student-tutor-connections",
        json={"tutor_id": found["tutor_id"], "subject": "Physics"},
        headers=student_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["tutor_id"] == tutor_id
