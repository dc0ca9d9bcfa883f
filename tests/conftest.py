import os
import tempfile

# settings are read once at import; point them at a throwaway database first
_TMP_DIR = tempfile.mkdtemp(prefix="quotebook-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEFAULT_ADMIN"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from quotebook import models  # noqa: F401
from quotebook.auth.jwt import create_access_token
from quotebook.auth.passwords import hash_password
from quotebook.db import Base, SessionLocal, engine
from quotebook.main import app
from quotebook.models.user import User


# --- DB setup for tests: create tables once, drop afterwards ---
@pytest.fixture(scope="session", autouse=True)
def _create_test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client():
    # function scoped: /auth/login sets a cookie that must not leak into other tests
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def make_user(username="asha.designs", password="secret123", name="Asha Designs") -> User:
    with SessionLocal() as session:
        user = User(username=username, password_hash=hash_password(password), name=name)
        session.add(user)
        session.commit()
        return user


def headers_for(user: User) -> dict:
    token = create_access_token(user_id=user.id, username=user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def other_user():
    return make_user(username="rival.interiors", name="Rival Interiors")


@pytest.fixture
def auth_headers(user):
    return headers_for(user)


@pytest.fixture
def other_headers(other_user):
    return headers_for(other_user)
