"""
Shared fixtures: a throwaway SQLite database, a linked couple and fake
notification providers.
"""
import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="soulsync-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["RESEND_API_KEY"] = ""
os.environ["FCM_PROJECT_ID"] = ""
os.environ["FCM_ACCESS_TOKEN"] = ""

from dataclasses import dataclass  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import app.models  # noqa: E402,F401
from app.core.exceptions import DeliveryFailure  # noqa: E402
from app.core.security import create_session_token  # noqa: E402
from app.core.utils import utcnow  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import engine, SessionLocal  # noqa: E402
from app.main import app  # noqa: E402
from app.models.couple import Couple, CoupleMember  # noqa: E402
from app.services.couple_service import build_session  # noqa: E402
from app.services.notification_service import NotificationDispatcher, get_dispatcher  # noqa: E402


class FakePushSender:
    """Records FCM message bodies instead of sending them."""

    def __init__(self, configured=True, fail=False):
        self.configured = configured
        self.fail = fail
        self.sent = []

    async def send(self, message):
        if self.fail:
            raise DeliveryFailure("UNREGISTERED")
        self.sent.append(message)


class FakeEmailSender:
    """Records emails instead of sending them."""

    def __init__(self, configured=True, fail=False):
        self.configured = configured
        self.fail = fail
        self.sent = []

    async def send(self, to, subject, text, html):
        if self.fail:
            raise DeliveryFailure("Resend is down")
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})


@dataclass
class LinkedCouple:
    code: str
    a: object  # SessionContext of the first member
    b: object  # SessionContext of the partner
    token_a: str
    token_b: str

    @property
    def headers_a(self):
        return {"Authorization": f"Bearer {self.token_a}"}

    @property
    def headers_b(self):
        return {"Authorization": f"Bearer {self.token_b}"}


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def push_sender():
    return FakePushSender()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def dispatcher(push_sender, email_sender):
    """Dispatcher with fake providers, also injected into the API."""
    fake = NotificationDispatcher(push_sender=push_sender, email_sender=email_sender, timeout=1.0)
    app.dependency_overrides[get_dispatcher] = lambda: fake
    return fake


@pytest.fixture
def couple(db):
    """Couple SWEETHEARTS42 with members A (Alex) and B (Blake), both with push tokens."""
    now = utcnow()
    record = Couple(code="SWEETHEARTS42", recovery_code="ABCD-EFGH-IJKL-MNOP")
    record.members.append(CoupleMember(
        user_id="user_a", email="alex@example.com", name="Alex", timezone="UTC",
        joined_at=now, last_seen=now, push_token="token-a-0123456789abcdef"
    ))
    record.members.append(CoupleMember(
        user_id="user_b", email="blake@example.com", name="Blake", timezone="UTC",
        joined_at=now, last_seen=now, push_token="token-b-0123456789abcdef"
    ))
    db.add(record)
    db.commit()

    members = {m.user_id: m for m in record.members}
    return LinkedCouple(
        code=record.code,
        a=build_session(members["user_a"]),
        b=build_session(members["user_b"]),
        token_a=create_session_token("user_a", record.code),
        token_b=create_session_token("user_b", record.code)
    )
