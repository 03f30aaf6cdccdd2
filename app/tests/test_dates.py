"""
Tests for the date request lifecycle.
"""
from datetime import datetime, timedelta
import pytest
from app.core.exceptions import InvalidStateTransition, PermissionDenied, NotFoundError
from app.core.utils import utcnow
from app.models.date import Date, DateStatus, RequestStatus
from app.schemas.date import DateCreate, DateUpdate
from app.services import date_service
from app.services.events import DateCreated, DateUpdated


def dinner(**overrides):
    data = {"title": "Dinner", "date_time": "2025-06-01T19:00:00Z"}
    data.update(overrides)
    return DateCreate(**data)


def test_request_starts_pending(db, couple):
    """Request path starts pending/pending and records the creator."""
    date = date_service.create_date_request(couple.a, dinner(), db)

    assert date.status == DateStatus.PENDING
    assert date.request_status == RequestStatus.PENDING
    assert date.created_by == "user_a"
    assert date.created_by_name == "Alex"
    assert date.couple_code == "SWEETHEARTS42"
    assert date.reminder_sent is False
    assert date.date_time == datetime(2025, 6, 1, 19, 0)


def test_direct_create_is_auto_approved(db, couple):
    """Direct path skips approval."""
    date = date_service.create_date(couple.a, dinner(), db)

    assert date.status == DateStatus.SCHEDULED
    assert date.request_status == RequestStatus.AUTO_APPROVED


def test_accept_then_terminal_guard(db, couple):
    """Accepting schedules the date; a second accept or decline is rejected."""
    date = date_service.create_date_request(couple.a, dinner(), db)

    accepted = date_service.accept_date_request(couple.b, date.id, db)
    assert accepted.status == DateStatus.SCHEDULED
    assert accepted.request_status == RequestStatus.ACCEPTED
    assert accepted.accepted_by == "user_b"
    assert accepted.accepted_at is not None

    with pytest.raises(InvalidStateTransition):
        date_service.accept_date_request(couple.b, date.id, db)
    with pytest.raises(InvalidStateTransition):
        date_service.decline_date_request(couple.b, date.id, "changed my mind", db)


def test_decline_records_reason(db, couple):
    """Declining stores who, when and why."""
    date = date_service.create_date_request(couple.a, dinner(), db)

    declined = date_service.decline_date_request(couple.b, date.id, "Working late", db)
    assert declined.status == DateStatus.DECLINED
    assert declined.request_status == RequestStatus.DECLINED
    assert declined.declined_by == "user_b"
    assert declined.declined_at is not None
    assert declined.decline_reason == "Working late"

    with pytest.raises(InvalidStateTransition):
        date_service.accept_date_request(couple.b, date.id, db)


def test_creator_cannot_answer_own_request(db, couple):
    """Only the partner may accept or decline."""
    date = date_service.create_date_request(couple.a, dinner(), db)

    with pytest.raises(PermissionDenied):
        date_service.accept_date_request(couple.a, date.id, db)
    assert date_service.get_date(couple.a, date.id, db).status == DateStatus.PENDING


def test_accept_direct_date_is_invalid(db, couple):
    """A direct date was never pending."""
    date = date_service.create_date(couple.a, dinner(), db)

    with pytest.raises(InvalidStateTransition):
        date_service.accept_date_request(couple.b, date.id, db)


def test_complete_only_from_scheduled(db, couple):
    """scheduled -> completed; pending dates cannot be completed."""
    pending = date_service.create_date_request(couple.a, dinner(), db)
    with pytest.raises(InvalidStateTransition):
        date_service.complete_date(couple.a, pending.id, db)

    scheduled = date_service.create_date(couple.a, dinner(title="Picnic"), db)
    done = date_service.complete_date(couple.b, scheduled.id, db)
    assert done.status == DateStatus.COMPLETED


def test_update_reschedules_but_keeps_status(db, couple):
    """Edits change fields, never the status or reminder flag."""
    date = date_service.create_date(couple.a, dinner(), db)
    date.reminder_sent = True
    db.commit()

    updated = date_service.update_date(
        couple.b, date.id, DateUpdate(title="Late dinner", date_time="2025-06-01T21:00:00+02:00"), db
    )
    assert updated.title == "Late dinner"
    assert updated.date_time == datetime(2025, 6, 1, 19, 0)
    assert updated.status == DateStatus.SCHEDULED
    assert updated.reminder_sent is True


def test_update_declined_date_rejected(db, couple):
    """Terminal dates are read-only."""
    date = date_service.create_date_request(couple.a, dinner(), db)
    date_service.decline_date_request(couple.b, date.id, "", db)

    with pytest.raises(InvalidStateTransition):
        date_service.update_date(couple.a, date.id, DateUpdate(title="Please?"), db)


def test_other_couple_cannot_see_date(db, couple, client):
    """Dates are scoped to the couple."""
    date = date_service.create_date(couple.a, dinner(), db)

    response = client.post("/api/couples", json={"email": "sam@example.com", "name": "Sam"})
    stranger = response.json()["access_token"]

    response = client.get(f"/api/dates/{date.id}", headers={"Authorization": f"Bearer {stranger}"})
    assert response.status_code == 404


def test_delete_date(db, couple):
    """Deleted dates are gone."""
    date = date_service.create_date(couple.a, dinner(), db)
    date_service.delete_date(couple.b, date.id, db)

    with pytest.raises(NotFoundError):
        date_service.get_date(couple.a, date.id, db)


def test_publishes_events_after_commit(db, couple):
    """Writes publish created/updated events carrying committed snapshots."""
    events = []
    date = date_service.create_date_request(couple.a, dinner(), db, publish=events.append)
    date_service.accept_date_request(couple.b, date.id, db, publish=events.append)

    created, updated = events
    assert isinstance(created, DateCreated)
    assert created.after.status == DateStatus.PENDING
    assert isinstance(updated, DateUpdated)
    assert updated.before.status == DateStatus.PENDING
    assert updated.after.status == DateStatus.SCHEDULED
    assert updated.date_id == date.id


def test_partitions():
    """Upcoming/past/pending/my-pending/declined partitions."""
    now = datetime(2025, 6, 1, 12, 0)

    def make(id, hours, status, created_by="user_a"):
        return Date(id=id, date_time=now + timedelta(hours=hours), status=status, created_by=created_by)

    dates = [
        make(1, 5, DateStatus.SCHEDULED),
        make(2, -5, DateStatus.SCHEDULED),
        make(3, 5, DateStatus.COMPLETED),
        make(4, 5, DateStatus.PENDING, created_by="user_b"),
        make(5, 5, DateStatus.PENDING, created_by="user_a"),
        make(6, 5, DateStatus.DECLINED),
    ]

    ids = lambda ds: [d.id for d in ds]
    assert ids(date_service.upcoming_dates(dates, now)) == [1]
    assert ids(date_service.past_dates(dates, now)) == [2, 3]
    assert ids(date_service.pending_requests_for(dates, "user_a")) == [4]
    assert ids(date_service.my_pending_requests(dates, "user_a")) == [5]
    assert ids(date_service.declined_dates(dates)) == [6]
    assert ids(date_service.partition_dates(dates, "user_b", "pending", now)) == [5]


def test_request_flow_over_http(client, couple, dispatcher, push_sender, email_sender):
    """A requests Dinner, B accepts; only A hears about the acceptance."""
    response = client.post(
        "/api/dates/requests",
        json={"title": "Dinner", "date_time": "2025-06-01T19:00:00Z", "date_type": "quality-time"},
        headers=couple.headers_a
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["request_status"] == "pending"
    assert body["created_by"] == "user_a"

    # Request notification goes to B only
    assert [m["message"]["token"] for m in push_sender.sent] == ["token-b-0123456789abcdef"]
    assert [e["to"] for e in email_sender.sent] == ["blake@example.com"]
    push_sender.sent.clear()
    email_sender.sent.clear()

    response = client.get("/api/dates?view=pending", headers=couple.headers_b)
    assert [d["id"] for d in response.json()] == [body["id"]]

    response = client.post(f"/api/dates/{body['id']}/accept", headers=couple.headers_b)
    assert response.status_code == 200
    assert response.json()["status"] == "scheduled"
    assert response.json()["accepted_by"] == "user_b"

    assert len(push_sender.sent) == 1
    message = push_sender.sent[0]["message"]
    assert message["token"] == "token-a-0123456789abcdef"
    assert message["data"]["type"] == "accepted"
    assert [e["to"] for e in email_sender.sent] == ["alex@example.com"]

    response = client.post(f"/api/dates/{body['id']}/accept", headers=couple.headers_b)
    assert response.status_code == 409


def test_creator_accept_over_http_is_forbidden(client, couple, dispatcher):
    """403 for the requester answering their own request."""
    response = client.post(
        "/api/dates/requests",
        json={"title": "Dinner", "date_time": "2025-06-01T19:00:00Z"},
        headers=couple.headers_a
    )
    response = client.post(f"/api/dates/{response.json()['id']}/accept", headers=couple.headers_a)
    assert response.status_code == 403


def test_unknown_view_rejected(client, couple):
    response = client.get("/api/dates?view=someday", headers=couple.headers_a)
    assert response.status_code == 400


def test_invalid_token_rejected(client):
    response = client.get("/api/dates", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
