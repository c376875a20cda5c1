import os
from dataclasses import dataclass
from typing import Any, Dict

# Settings are read at import time, so the environment is set before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TOKEN_CLEANUP_INTERVAL_HOURS"] = "0"
os.environ["MAIL_DEV_MODE"] = "true"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from myhome.main import app
from myhome.core.config import settings
from myhome.core.database import Base, get_db
from myhome.core.security import create_session_token, encode_session_token, get_password_hash
from myhome.models.user import User
from myhome.services.mail_service import MailService, get_mail_service

# One in-memory database shared by the test and the request worker threads
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "correct-horse-battery"


@dataclass
class SentMail:
    email_to: str
    subject: str
    template_name: str
    model: Dict[str, Any]


class RecordingMailService(MailService):
    """Keeps every message instead of sending it; set succeed=False to simulate a mail outage"""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent = []

    def send(self, email_to, subject, template_name, model):
        self.sent.append(SentMail(email_to, subject, template_name, dict(model)))
        return self.succeed


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mailer():
    return RecordingMailService()


@pytest.fixture
def client(db, mailer):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_service] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_user(db, email: str = "john@example.com", name: str = "John", password: str = DEFAULT_PASSWORD,
                email_confirmed: bool = False) -> User:
    user = User(
        user_id=f"user-{email}",
        name=name,
        email=email,
        email_confirmed=email_confirmed,
        encrypted_password=get_password_hash(password),
    )
    db.add(user)
    db.commit()
    return user


def auth_headers_for(user: User) -> Dict[str, str]:
    token = encode_session_token(create_session_token(user.user_id), settings.SECRET_KEY)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db):
    return create_user(db)


@pytest.fixture
def auth_headers(user):
    return auth_headers_for(user)
