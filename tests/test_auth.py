import pytest
from jose import jwt

from app import auth, config
from app.accounts import store
from app.errors import Conflict, Forbidden, Unauthorized, ValidationError
from app.models import Role


def test_digest_is_one_way():
    digest = auth.hash_password("hunter22")
    assert digest != "hunter22"
    assert auth.verify_password("hunter22", digest)
    assert not auth.verify_password("hunter23", digest)


def test_signup_never_returns_digest(session):
    user = auth.signup(session, "alice", "alice123")
    dumped = user.model_dump(by_alias=True)
    assert "passwordHash" not in dumped and "password_hash" not in dumped
    assert user.role == Role.EMPLOYEE
    stored = store.get_user_by_username(session, "alice")
    assert stored.password_hash != "alice123"


def test_signup_conflict_on_taken_username(session):
    auth.signup(session, "alice", "alice123")
    with pytest.raises(Conflict):
        auth.signup(session, "alice", "other-pass", Role.ADMIN)


@pytest.mark.parametrize("username,password", [("al", "alice123"), ("alice", "short")])
def test_signup_validates_lengths(session, username, password):
    with pytest.raises(ValidationError):
        auth.signup(session, username, password)


def test_login_issues_token_with_claims(session):
    created = auth.signup(session, "bob", "bob12345", Role.MANAGER)
    user, token = auth.login(session, "bob", "bob12345")
    assert user.id == created.id
    claims = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALG])
    assert claims["userId"] == created.id
    assert claims["username"] == "bob"
    assert claims["role"] == "Manager"
    assert claims["exp"] - claims["iat"] == config.ACCESS_TOKEN_EXPIRE_SECONDS


def test_login_failures_are_indistinguishable(session):
    auth.signup(session, "bob", "bob12345")
    with pytest.raises(Unauthorized) as wrong_password:
        auth.login(session, "bob", "not-the-password")
    with pytest.raises(Unauthorized) as unknown_user:
        auth.login(session, "nobody", "bob12345")
    assert wrong_password.value.message == unknown_user.value.message
    assert wrong_password.value.status_code == unknown_user.value.status_code == 401


def test_authenticate_round_trip():
    token = auth.create_access_token(7, "carol", "Admin")
    current = auth.authenticate(token)
    assert current.user_id == 7
    assert current.username == "carol"
    assert current.role == Role.ADMIN


@pytest.mark.parametrize("token", [None, ""])
def test_authenticate_missing_token(token):
    with pytest.raises(Unauthorized):
        auth.authenticate(token)


def test_authenticate_garbage_token():
    with pytest.raises(Forbidden):
        auth.authenticate("not.a.jwt")


def test_authenticate_wrong_signature():
    token = jwt.encode({"userId": 1, "username": "x", "role": "Admin"}, "another-secret", algorithm="HS256")
    with pytest.raises(Forbidden):
        auth.authenticate(token)


def test_authenticate_expired_token(monkeypatch):
    monkeypatch.setattr(config, "ACCESS_TOKEN_EXPIRE_SECONDS", -60)
    token = auth.create_access_token(1, "late", "Employee")
    with pytest.raises(Forbidden):
        auth.authenticate(token)


def test_authenticate_rejects_unknown_role():
    token = auth.create_access_token(1, "mallory", "Superuser")
    with pytest.raises(Forbidden):
        auth.authenticate(token)


def test_login_strips_username_like_signup(session):
    created = auth.signup(session, "  dana  ", "dana1234")
    assert created.username == "dana"
    user, _ = auth.login(session, "  dana  ", "dana1234")
    assert user.id == created.id
