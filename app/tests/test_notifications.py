"""
Tests for notification templates and the dispatcher.
"""
import asyncio
from datetime import datetime
import pytest
from app.models.date import DateStatus, RequestStatus, DateType
from app.schemas.date import DateResponse
from app.services.notification_service import NotificationDispatcher
from app.services.notification_templates import (
    NotificationType, Recipient, build_push_message, build_email, push_title_body
)
from conftest import FakePushSender, FakeEmailSender


@pytest.fixture
def dinner():
    now = datetime(2025, 5, 20, 9, 0)
    return DateResponse(
        id=7,
        couple_code="SWEETHEARTS42",
        title="Dinner",
        date_time=datetime(2025, 6, 1, 19, 0),
        notes="Table for two",
        date_type=DateType.QUALITY_TIME,
        created_by="user_a",
        created_by_name="Alex",
        status=DateStatus.PENDING,
        request_status=RequestStatus.PENDING,
        created_at=now,
        updated_at=now
    )


@pytest.fixture
def blake():
    return Recipient(user_id="user_b", email="blake@example.com", name="Blake",
                     timezone="UTC", push_token="token-b-0123456789abcdef")


def test_push_titles(dinner):
    """Each event kind has its own title and body."""
    assert push_title_body(dinner, NotificationType.REQUEST) == (
        "📬 Date Request from Alex", "Dinner • Sun, Jun 1, 07:00 PM"
    )
    assert push_title_body(dinner, NotificationType.ACCEPTED) == (
        "✅ Date Request Accepted!", "Dinner is confirmed for Sun, Jun 1, 07:00 PM"
    )
    assert push_title_body(dinner, NotificationType.DECLINED) == (
        "Date Request Update", "Your request for \"Dinner\" couldn't be accepted"
    )
    assert push_title_body(dinner, NotificationType.CREATED)[0] == "💕 New Date Scheduled"
    assert push_title_body(dinner, NotificationType.REMINDER) == (
        "⏰ Date in 1 Hour!", "Dinner is happening soon"
    )


def test_push_uses_recipient_timezone(dinner):
    """Times are shown in the recipient's zone."""
    _, body = push_title_body(dinner, NotificationType.CREATED, "Europe/Paris")
    assert body == "Dinner • Sun, Jun 1, 09:00 PM"

    _, body = push_title_body(dinner, NotificationType.CREATED, "Not/AZone")
    assert body == "Dinner • Sun, Jun 1, 07:00 PM"


def test_push_message_platform_hints(dinner):
    """Payload carries data fields, priority hints and the dedup tag."""
    message = build_push_message("tok", dinner, NotificationType.REQUEST)["message"]

    assert message["token"] == "tok"
    assert message["data"] == {"dateId": "7", "type": "request", "click_action": "/"}
    assert message["android"]["priority"] == "high"
    assert message["android"]["notification"]["channel_id"] == "date_notifications"
    assert message["apns"]["payload"]["aps"] == {"sound": "default", "badge": 1}
    assert message["webpush"]["notification"]["tag"] == "date-7"


def test_email_variants(dinner):
    """Subject, text and HTML exist for all five kinds."""
    for kind in NotificationType:
        content = build_email(dinner, kind, "Blake")
        assert "Dinner" in content.subject
        assert content.text.startswith("Hi Blake,")
        assert "<p>Hi Blake,</p>" in content.html


def test_email_escapes_html(dinner):
    hostile = dinner.model_copy(update={"title": "<b>Dinner</b>"})
    content = build_email(hostile, NotificationType.CREATED, "Blake")
    assert "<b>Dinner</b>" not in content.html
    assert "&lt;b&gt;Dinner&lt;/b&gt;" in content.html


def test_notify_sends_both_channels(dinner, blake):
    push, email = FakePushSender(), FakeEmailSender()
    dispatcher = NotificationDispatcher(push_sender=push, email_sender=email, timeout=1.0)

    asyncio.run(dispatcher.notify(blake, dinner, NotificationType.REQUEST))

    assert len(push.sent) == 1
    assert email.sent[0]["to"] == "blake@example.com"


def test_missing_push_token_skips_push(dinner, blake):
    """No token: zero push sends, no error, email still goes out."""
    push, email = FakePushSender(), FakeEmailSender()
    dispatcher = NotificationDispatcher(push_sender=push, email_sender=email, timeout=1.0)
    tokenless = Recipient(user_id="user_b", email=blake.email, name="Blake")

    asyncio.run(dispatcher.notify(tokenless, dinner, NotificationType.REQUEST))

    assert push.sent == []
    assert len(email.sent) == 1


def test_missing_email_credential_skips_email(dinner, blake):
    """No API key: zero email sends, no error, push still goes out."""
    push, email = FakePushSender(), FakeEmailSender(configured=False)
    dispatcher = NotificationDispatcher(push_sender=push, email_sender=email, timeout=1.0)

    asyncio.run(dispatcher.notify(blake, dinner, NotificationType.REQUEST))

    assert email.sent == []
    assert len(push.sent) == 1


def test_delivery_failures_are_swallowed(dinner, blake):
    """Provider errors never propagate."""
    dispatcher = NotificationDispatcher(
        push_sender=FakePushSender(fail=True),
        email_sender=FakeEmailSender(fail=True),
        timeout=1.0
    )

    assert asyncio.run(dispatcher.send_push(blake, dinner, NotificationType.REMINDER)) is False
    assert asyncio.run(dispatcher.send_email(blake, dinner, NotificationType.REMINDER)) is False
    asyncio.run(dispatcher.notify(blake, dinner, NotificationType.REMINDER))


def test_slow_provider_times_out(dinner, blake):
    """Each send is bounded by the dispatcher timeout."""
    class SlowPushSender(FakePushSender):
        async def send(self, message):
            await asyncio.sleep(5)

    dispatcher = NotificationDispatcher(push_sender=SlowPushSender(), email_sender=FakeEmailSender(),
                                        timeout=0.05)
    assert asyncio.run(dispatcher.send_push(blake, dinner, NotificationType.REMINDER)) is False


def test_notify_all_reaches_everyone(dinner, blake):
    push, email = FakePushSender(), FakeEmailSender()
    dispatcher = NotificationDispatcher(push_sender=push, email_sender=email, timeout=1.0)
    alex = Recipient(user_id="user_a", email="alex@example.com", name="Alex", push_token="token-a")

    asyncio.run(dispatcher.notify_all([alex, blake], dinner, NotificationType.CREATED))

    assert sorted(m["message"]["token"] for m in push.sent) == ["token-a", "token-b-0123456789abcdef"]
    assert sorted(e["to"] for e in email.sent) == ["alex@example.com", "blake@example.com"]
