import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from timetable.api.deps import get_db  # noqa: E402
from timetable.core.security import get_password_hash  # noqa: E402
from timetable.db.base import Base  # noqa: E402
from timetable.main import app  # noqa: E402
from timetable.models.user import User, UserRole  # noqa: E402
from timetable.services.rate_limit import clear_rate_limiter  # noqa: E402

PASSWORDS = {
    UserRole.admin: "admin123",
    UserRole.editor: "editor123",
    UserRole.readonly: "viewer123",
}


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    clear_rate_limiter()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    clear_rate_limiter()


@pytest.fixture()
def users(session_factory):
    with session_factory() as db:
        for username, role in (("admin", UserRole.admin), ("editor", UserRole.editor), ("viewer", UserRole.readonly)):
            db.add(User(username=username, hashed_password=get_password_hash(PASSWORDS[role]), role=role))
        db.commit()
    return {"admin": "admin123", "editor": "editor123", "viewer": "viewer123"}


def login(client, username, password):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def admin_headers(client, users):
    return login(client, "admin", users["admin"])


@pytest.fixture()
def editor_headers(client, users):
    return login(client, "editor", users["editor"])


@pytest.fixture()
def viewer_headers(client, users):
    return login(client, "viewer", users["viewer"])
