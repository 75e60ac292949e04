import os

# Settings are read at import time by labhub.db.session; defaults for tests.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("MAIL_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import labhub.models  # noqa

from labhub.core.security import create_access_token
from labhub.db.base import Base
from labhub.db.session import get_db
from labhub.main import create_app
from labhub.policies.permissions import Actor, PermissionBag
from labhub.services.mail_service import MailSender
from labhub.services.projects_service import ProjectsService


class RecordingMailer(MailSender):
    """Captures outgoing mail instead of talking SMTP."""

    def __init__(self):
        super().__init__()
        self.sent = []

    def send(self, subject, body, to):
        self.sent.append({"subject": subject, "body": body, "to": list(to)})
        return True


@pytest.fixture(scope="function")
def engine():
    eng = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(scope="function")
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    app = create_app()

    def override_get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c


@pytest.fixture
def mailer():
    return RecordingMailer()


# -----------------------
# Actors
# -----------------------


def make_actor(actor_id, role, **perms):
    return Actor(id=actor_id, role=role, permissions=PermissionBag(**perms))


@pytest.fixture
def student():
    return make_actor("student-1", "student")


@pytest.fixture
def approver():
    return make_actor("admin-1", "admin", can_approve=True)


@pytest.fixture
def editor():
    return make_actor("faculty-1", "faculty", can_edit=True)


@pytest.fixture
def super_admin():
    return make_actor("root-1", "super_admin")


@pytest.fixture
def viewer():
    return make_actor("viewer-1", "view_only", can_approve=True, can_edit=True, can_delete=True)


def token_for(actor: Actor) -> str:
    return create_access_token(
        actor.id,
        {
            "role": actor.role,
            "permissions": {
                "can_approve": actor.permissions.can_approve,
                "can_edit": actor.permissions.can_edit,
                "can_delete": actor.permissions.can_delete,
            },
            "email": actor.email,
        },
    )


def auth(actor: Actor) -> dict:
    return {"Authorization": f"Bearer {token_for(actor)}"}


# -----------------------
# Projects
# -----------------------


def draft_payload(**overrides):
    payload = {
        "student_name": "Asha Verma",
        "student_email": "asha.verma@juitsolan.in",
        "roll_number": "221030",
        "branch": "ECE",
        "year": "3",
        "contact_number": None,
        "is_team_project": False,
        "team_size": None,
        "team_members": None,
        "project_title": "Line-following rover",
        "category": "Robotics",
        "description": "A rover that follows a taped line using IR sensors.",
        "expected_outcomes": "Working prototype",
        "duration": "3 months",
        "required_resources": ["Raspberry Pi 5", "2D LiDAR"],
        "other_resources": None,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def submit(db, mailer):
    def _submit(actor, **overrides):
        return ProjectsService(mailer=mailer).submit(db, actor=actor, draft=draft_payload(**overrides))

    return _submit
