import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app import auth, config, db
from app.accounts import store
from app.models import Role


@pytest.fixture
def engine(monkeypatch):
    """Fresh in-memory database swapped in for the module engine."""
    eng = db.make_engine("sqlite://")
    monkeypatch.setattr(db, "engine", eng)
    monkeypatch.setattr(config, "SEED_DEMO_USERS", False)
    monkeypatch.setattr(config, "MANAGER_CAN_REQUEST", False)
    db.init_db()
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    from app.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(engine):
    """Create an account directly in the store and return (user, bearer headers)."""
    def _make(username: str, role: Role = Role.EMPLOYEE, password: str = "secret123"):
        with Session(engine) as s:
            acct = store.create_user(s, username, auth.hash_password(password), role)
            user = store.public_user(acct)
        token = auth.create_access_token(user.id, user.username, user.role.value)
        return user, {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def employee(make_user):
    return make_user("erin", Role.EMPLOYEE)


@pytest.fixture
def manager(make_user):
    return make_user("mona", Role.MANAGER)


@pytest.fixture
def admin(make_user):
    return make_user("adam", Role.ADMIN)
