from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.crud.crud_registration import registration as registration_crud
from app.models.registration import Registration
from tests.utils.auth import get_user_authentication_headers
from tests.utils.event import create_random_event
from tests.utils.profile import create_admin, create_student


def _setup(db: Session, **event_kwargs):
    admin = create_admin(db)
    student = create_student(db)
    event = create_random_event(db, admin.id, **event_kwargs)
    return admin, student, event


def test_register_for_event(client: TestClient, db: Session) -> None:
    _, student, event = _setup(db, title="Tech Fest")
    headers = get_user_authentication_headers(student.id)

    response = client.post(f"/api/v1/events/{event.id}/registrations", headers=headers)

    assert response.status_code == 201
    content = response.json()
    assert content["success"] is True
    assert content["title"] == "Registration Successful!"
    assert content["message"] == "You have successfully registered for Tech Fest."
    assert content["registration"]["status"] == "registered"
    assert content["eligibility"]["state"] == "already_registered"
    assert content["eligibility"]["action"] == "cancel"
    assert content["current_participants"] == 1


def test_duplicate_registration_is_informational(client: TestClient, db: Session) -> None:
    _, student, event = _setup(db)
    headers = get_user_authentication_headers(student.id)
    url = f"/api/v1/events/{event.id}/registrations"

    first = client.post(url, headers=headers)
    second = client.post(url, headers=headers)

    assert first.status_code == 201
    assert second.status_code == 200
    content = second.json()
    assert content["title"] == "Already Registered"
    assert content["registration"]["id"] == first.json()["registration"]["id"]
    assert content["current_participants"] == 1
    assert db.query(Registration).count() == 1


def test_cancel_then_cancel_again(client: TestClient, db: Session) -> None:
    _, student, event = _setup(db)
    headers = get_user_authentication_headers(student.id)
    client.post(f"/api/v1/events/{event.id}/registrations", headers=headers)

    response = client.delete(f"/api/v1/events/{event.id}/registrations/me", headers=headers)
    assert response.status_code == 200
    content = response.json()
    assert content["title"] == "Registration Cancelled"
    assert content["registration"]["status"] == "cancelled"
    assert content["eligibility"]["state"] == "open"
    assert content["current_participants"] == 0

    again = client.delete(f"/api/v1/events/{event.id}/registrations/me", headers=headers)
    assert again.status_code == 200
    assert again.json()["title"] == "Not Registered"
    assert again.json()["registration"] is None


def test_register_after_deadline_is_refused(client: TestClient, db: Session) -> None:
    _, student, event = _setup(db, deadline_in=timedelta(days=-1))
    headers = get_user_authentication_headers(student.id)

    response = client.post(f"/api/v1/events/{event.id}/registrations", headers=headers)

    assert response.status_code == 409
    content = response.json()
    assert content["success"] is False
    assert content["message"] == "The registration deadline for this event has passed."
    assert db.query(Registration).count() == 0


def test_register_unknown_event(client: TestClient, db: Session) -> None:
    student = create_student(db)
    headers = get_user_authentication_headers(student.id)

    response = client.post("/api/v1/events/evt_missing/registrations", headers=headers)

    assert response.status_code == 404
    assert response.json()["title"] == "Event Not Found"


def test_browse_events_shows_eligibility(client: TestClient, db: Session) -> None:
    admin = create_admin(db)
    student = create_student(db)
    other = create_student(db)
    full = create_random_event(db, admin.id, title="Full", max_participants=1, starts_in=timedelta(days=3))
    closed = create_random_event(
        db, admin.id, title="Closed", starts_in=timedelta(days=4), deadline_in=timedelta(days=-1)
    )
    mine = create_random_event(db, admin.id, title="Mine", starts_in=timedelta(days=5))
    create_random_event(
        db, admin.id, title="Past", starts_in=timedelta(days=-1), deadline_in=timedelta(days=-2)
    )

    client.post(f"/api/v1/events/{full.id}/registrations", headers=get_user_authentication_headers(other.id))
    headers = get_user_authentication_headers(student.id)
    client.post(f"/api/v1/events/{mine.id}/registrations", headers=headers)

    response = client.get("/api/v1/events", headers=headers)

    assert response.status_code == 200
    content = response.json()
    assert [e["title"] for e in content] == ["Full", "Closed", "Mine"]
    by_id = {e["id"]: e for e in content}
    assert by_id[full.id]["eligibility"]["label"] == "Event Full"
    assert by_id[full.id]["current_participants"] == 1
    assert by_id[closed.id]["eligibility"]["label"] == "Registration Closed"
    assert by_id[mine.id]["eligibility"]["label"] == "Registered"


def test_my_registrations_with_status_filter(client: TestClient, db: Session) -> None:
    admin, student, kept = _setup(db, title="Kept")
    dropped = create_random_event(db, admin.id, title="Dropped")
    headers = get_user_authentication_headers(student.id)
    client.post(f"/api/v1/events/{kept.id}/registrations", headers=headers)
    client.post(f"/api/v1/events/{dropped.id}/registrations", headers=headers)
    client.delete(f"/api/v1/events/{dropped.id}/registrations/me", headers=headers)

    everything = client.get("/api/v1/me/registrations", headers=headers)
    active = client.get("/api/v1/me/registrations?status=registered", headers=headers)

    assert everything.status_code == 200
    assert len(everything.json()) == 2
    assert [r["event"]["title"] for r in active.json()] == ["Kept"]


def test_download_receipt(client: TestClient, db: Session) -> None:
    _, student, event = _setup(db, title="Tech Fest")
    headers = get_user_authentication_headers(student.id)
    registered = client.post(f"/api/v1/events/{event.id}/registrations", headers=headers)
    registration_id = registered.json()["registration"]["id"]

    response = client.get(f"/api/v1/me/registrations/{registration_id}/receipt", headers=headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert (
        response.headers["content-disposition"]
        == 'attachment; filename="Tech_Fest_registration.txt"'
    )
    assert response.text.startswith("EVENT REGISTRATION RECEIPT")
    assert "Event: Tech Fest" in response.text
    assert "Status: REGISTERED" in response.text


def test_receipt_of_another_user_is_not_found(client: TestClient, db: Session) -> None:
    _, student, event = _setup(db)
    intruder = create_student(db)
    registered = client.post(
        f"/api/v1/events/{event.id}/registrations",
        headers=get_user_authentication_headers(student.id),
    )
    registration_id = registered.json()["registration"]["id"]

    response = client.get(
        f"/api/v1/me/registrations/{registration_id}/receipt",
        headers=get_user_authentication_headers(intruder.id),
    )

    assert response.status_code == 404


def test_admin_cannot_register(client: TestClient, db: Session) -> None:
    admin, _, event = _setup(db)

    response = client.post(
        f"/api/v1/events/{event.id}/registrations",
        headers=get_user_authentication_headers(admin.id),
    )

    assert response.status_code == 403


def test_invalid_token_is_rejected(client: TestClient, db: Session) -> None:
    response = client.get("/api/v1/events", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_unknown_profile_is_forbidden(client: TestClient, db: Session) -> None:
    response = client.get("/api/v1/me", headers=get_user_authentication_headers("ghost"))
    assert response.status_code == 403


def test_register_losing_insert_race_is_informational(
    client: TestClient, db: Session, monkeypatch
) -> None:
    """
    A request whose pre-check misses a concurrently committed registration is
    stopped by the unique index and still answered with the 200 notice.
    """
    _, student, event = _setup(db)
    headers = get_user_authentication_headers(student.id)
    url = f"/api/v1/events/{event.id}/registrations"
    assert client.post(url, headers=headers).status_code == 201

    monkeypatch.setattr(registration_crud, "get_active", lambda db, **kwargs: None)
    response = client.post(url, headers=headers)
    monkeypatch.undo()

    assert response.status_code == 200
    content = response.json()
    assert content["success"] is True
    assert content["title"] == "Already Registered"
    assert registration_crud.get_active_count_by_event(db, event_id=event.id) == 1


def test_store_failure_returns_unavailable_notice(
    client: TestClient, db: Session, monkeypatch
) -> None:
    _, student, event = _setup(db)

    def failing_insert(db, **kwargs):
        raise OperationalError("INSERT INTO registrations", {}, Exception("connection reset"))

    monkeypatch.setattr(registration_crud, "create_active", failing_insert)

    response = client.post(
        f"/api/v1/events/{event.id}/registrations",
        headers=get_user_authentication_headers(student.id),
    )

    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "title": "Service Unavailable",
        "message": "Something went wrong. Please try again.",
    }
    assert db.query(Registration).count() == 0
