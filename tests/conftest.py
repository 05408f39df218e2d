import os
import sys
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.compiler import compiles

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("VIDEO_DIR", tempfile.mkdtemp(prefix="safewalk-videos-"))

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from main import app
from api.dependencies import get_dispatcher, get_geocoder, get_token_service, get_video_storage
from core.database import Base, get_db
from core.exceptions import UpstreamFailure
from models.user import User
from services.auth_service import AuthService
from services.notification_service import NotificationDispatcher
from services.video_storage import VideoStorage
from services.video_token_service import VideoTokenService

# Ensure models are registered with SQLAlchemy metadata
import models.incident  # noqa: F401
import models.audit_log  # noqa: F401


@compiles(PG_UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kwargs):
    return "CHAR(36)"


class FakeGeocoder:
    def __init__(self, address: str = "12 Long Street, Cape Town", fail: bool = False) -> None:
        self.address = address
        self.fail = fail
        self.calls: list[tuple[float, float]] = []

    def reverse_geocode(self, latitude: float, longitude: float) -> str:
        self.calls.append((latitude, longitude))
        if self.fail:
            raise UpstreamFailure("Could not resolve the location name.")
        return self.address


class FakeSmsTransport:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict] = []

    def send_message(self, to, from_, body):
        self.sent.append({"to": to, "from_": from_, "body": body})
        if self.fail:
            raise ConnectionError("SMS gateway unreachable")
        return {"messageId": "SM0001", "messageStatus": "queued"}


class Clock:
    def __init__(self) -> None:
        self.current = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current


@pytest.fixture(scope="function")
def db_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def token_service(clock):
    return VideoTokenService("test-video-secret", ttl_seconds=300, now=clock)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def sms_transport():
    return FakeSmsTransport()


@pytest.fixture
def video_storage(tmp_path):
    return VideoStorage(tmp_path)


@pytest.fixture(scope="function")
def client(db_session, geocoder, sms_transport, token_service, video_storage):
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_dispatcher] = lambda: NotificationDispatcher(sms_transport, from_number="+15550000000")
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_video_storage] = lambda: video_storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make_user(full_name: str = "Thandi Mokoena", phone: str = "+27821234567") -> User:
        user = User(id=uuid.uuid4(), full_name=full_name, phone=phone, email=f"{uuid.uuid4().hex[:8]}@example.com")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id) -> dict:
        token = AuthService.create_access_token({"sub": str(user_id)})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
