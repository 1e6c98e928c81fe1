import os

# The app engine is built at import time; keep it off any real database.
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from staffdesk import config
from staffdesk.database import Base, get_db
from staffdesk.models import appraisal, goal, performance, project, pto, task, timesheet, user  # noqa: F401
from staffdesk.models.appraisal import AppraisalCycle, AppraisalStatus
from staffdesk.models.project import Project, ProjectStatus
from staffdesk.models.user import User
from staffdesk.schemas.common import Caller
from staffdesk.services import revalidation
from staffdesk.services.auth import hash_password


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture(autouse=True)
def clean_revalidation(monkeypatch):
    monkeypatch.setattr(config, "REVALIDATE_URL", "")
    revalidation.reset()
    yield
    revalidation.reset()


# --- factories ---

@pytest.fixture
def make_user(db):
    def _make(name="Jane Employee", email=None, password="secret-pass", **kwargs):
        u = User(
            name=name,
            email=email or f"{uuid4().hex[:8]}@staffdesk.test",
            password_hash=hash_password(password),
            **kwargs,
        )
        db.add(u)
        db.commit()
        db.refresh(u)
        return u
    return _make


def as_caller(u: User) -> Caller:
    return Caller(id=u.id, name=u.name, email=u.email, role=u.role)


@pytest.fixture
def employee(make_user):
    return make_user()


@pytest.fixture
def caller(employee):
    return as_caller(employee)


@pytest.fixture
def other_caller(make_user):
    return as_caller(make_user(name="Other Person"))


@pytest.fixture
def make_project(db):
    def _make(name="Apollo", status=ProjectStatus.ACTIVE):
        p = Project(name=name, status=status.value)
        db.add(p)
        db.commit()
        db.refresh(p)
        return p
    return _make


@pytest.fixture
def project(make_project):
    return make_project()


@pytest.fixture
def make_cycle(db):
    def _make(name="2026 Review", start=None, end=None, status=AppraisalStatus.IN_PROGRESS):
        now = datetime.now()
        c = AppraisalCycle(
            name=name,
            start_date=start or now.replace(month=1, day=1),
            end_date=end or now.replace(year=now.year + 1, month=1, day=1),
            status=status.value,
        )
        db.add(c)
        db.commit()
        db.refresh(c)
        return c
    return _make


# --- HTTP ---

@pytest.fixture
def client(session_factory, monkeypatch):
    from main import app

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    monkeypatch.setattr(config, "AUTH_MODE", "demo")
    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
