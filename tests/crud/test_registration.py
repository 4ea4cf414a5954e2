# tests/crud/test_registration.py

from datetime import timedelta

from sqlalchemy.orm import Session

from app.constants.registration import RegistrationStatus
from app.crud.crud_registration import registration as registration_crud
from app.models.registration import Registration
from app.utils.timezone import utcnow
from tests.utils.event import create_random_event
from tests.utils.profile import create_admin, create_student


def _register(db: Session, event_id: str, user_id: str, *, minutes_ago: int = 0):
    return registration_crud.create_active(
        db,
        event_id=event_id,
        user_id=user_id,
        registered_at=utcnow() - timedelta(minutes=minutes_ago),
    )


def test_create_active_rejects_second_active_row(db: Session):
    """
    The partial unique index refuses a second active registration for the
    same (event, user); the CRUD layer reports it as None.
    """
    admin = create_admin(db)
    student = create_student(db)
    event = create_random_event(db, admin.id)

    first = _register(db, event.id, student.id)
    second = _register(db, event.id, student.id)

    assert first is not None
    assert first.id.startswith("reg_")
    assert second is None
    assert db.query(Registration).count() == 1


def test_cancelled_row_does_not_block_new_active_row(db: Session):
    admin = create_admin(db)
    student = create_student(db)
    event = create_random_event(db, admin.id)

    _register(db, event.id, student.id)
    cancelled = registration_crud.cancel_active(db, event_id=event.id, user_id=student.id)
    again = _register(db, event.id, student.id)

    assert cancelled.status == RegistrationStatus.CANCELLED
    assert again is not None
    assert again.id != cancelled.id


def test_cancel_active_without_registration_returns_none(db: Session):
    admin = create_admin(db)
    student = create_student(db)
    event = create_random_event(db, admin.id)

    assert registration_crud.cancel_active(db, event_id=event.id, user_id=student.id) is None


def test_active_count_ignores_cancelled(db: Session):
    admin = create_admin(db)
    event = create_random_event(db, admin.id)
    students = [create_student(db) for _ in range(3)]
    for student in students:
        _register(db, event.id, student.id)
    registration_crud.cancel_active(db, event_id=event.id, user_id=students[0].id)

    assert registration_crud.get_active_count_by_event(db, event_id=event.id) == 2
    assert len(registration_crud.get_all_active(db)) == 2


def test_get_multi_by_user_newest_first_with_status_filter(db: Session):
    admin = create_admin(db)
    student = create_student(db)
    older = create_random_event(db, admin.id, title="Career Day")
    newer = create_random_event(db, admin.id, title="Tech Fest")

    _register(db, older.id, student.id, minutes_ago=30)
    _register(db, newer.id, student.id, minutes_ago=5)
    registration_crud.cancel_active(db, event_id=older.id, user_id=student.id)

    history = registration_crud.get_multi_by_user(db, user_id=student.id)
    assert [r.event.title for r in history] == ["Tech Fest", "Career Day"]

    cancelled = registration_crud.get_multi_by_user(
        db, user_id=student.id, status=RegistrationStatus.CANCELLED
    )
    assert [r.event_id for r in cancelled] == [older.id]


def test_get_active_event_ids_for_user(db: Session):
    admin = create_admin(db)
    student = create_student(db)
    kept = create_random_event(db, admin.id)
    dropped = create_random_event(db, admin.id)
    _register(db, kept.id, student.id)
    _register(db, dropped.id, student.id)
    registration_crud.cancel_active(db, event_id=dropped.id, user_id=student.id)

    assert registration_crud.get_active_event_ids_for_user(db, user_id=student.id) == {kept.id}


def test_registrants_joined_and_batched_fetch_agree(db: Session):
    admin = create_admin(db)
    event = create_random_event(db, admin.id)
    alice = create_student(db, full_name="Alice", student_id="S-1")
    bob = create_student(db, full_name="Bob", student_id="S-2")
    _register(db, event.id, alice.id, minutes_ago=10)
    _register(db, event.id, bob.id, minutes_ago=1)

    joined = registration_crud.get_registrants(db, event_id=event.id, joined=True)
    batched = registration_crud.get_registrants(db, event_id=event.id, joined=False)

    def summary(rows):
        return [(reg.id, profile.full_name, profile.student_id) for reg, profile in rows]

    assert summary(joined) == summary(batched)
    assert [name for _, name, _ in summary(joined)] == ["Bob", "Alice"]


def test_registrants_empty_event(db: Session):
    admin = create_admin(db)
    event = create_random_event(db, admin.id)

    assert registration_crud.get_registrants(db, event_id=event.id, joined=False) == []
