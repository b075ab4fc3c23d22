import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "racktrack-test-secret"
os.environ["CRON_SECRET"] = "cron-test-secret"
os.environ["QUICKBOOKS_CLIENT_ID"] = "qb-client"
os.environ["QUICKBOOKS_CLIENT_SECRET"] = "qb-secret"
os.environ["QUICKBOOKS_ENVIRONMENT"] = "sandbox"

import pytest
from fastapi.testclient import TestClient

from shared.core import auth
from shared.core.database import Base, SessionLocal, engine
from shared.models.user_login_session import UserLoginSession
from shared.models.users import Users
from auth_service.app.main import app as auth_app
from racktrack_service.app.main import app as racktrack_app


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def auth_client():
    return TestClient(auth_app)


@pytest.fixture
def client():
    return TestClient(racktrack_app)


def make_user(db, role="worker", email=None, password="password123", status="active"):
    user = Users(
        full_name=f"{role.title()} User",
        email=email or f"{role}@racktrack.com",
        role=role,
        status=status,
    )
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def token_for(db, user):
    session = UserLoginSession(user_id=user.id)
    db.add(session)
    db.commit()
    return auth.create_access_token(auth.build_token_payload(user, session))


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db):
    return make_user(db, role="admin")


@pytest.fixture
def admin_headers(db, admin_user):
    return bearer(token_for(db, admin_user))


@pytest.fixture
def manager_headers(db):
    return bearer(token_for(db, make_user(db, role="manager")))


@pytest.fixture
def worker_headers(db):
    return bearer(token_for(db, make_user(db, role="worker")))


@pytest.fixture
def viewer_headers(db):
    return bearer(token_for(db, make_user(db, role="viewer")))


@pytest.fixture
def create_user(db):
    def _create(role="worker", **kwargs):
        return make_user(db, role=role, **kwargs)
    return _create


@pytest.fixture
def headers_for(db):
    def _headers(user):
        return bearer(token_for(db, user))
    return _headers
