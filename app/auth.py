import time
import logging
from typing import Optional, Dict, Tuple
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from app import config
from app.accounts import store
from app.errors import Forbidden, Unauthorized, ValidationError
from app.models import CurrentUser, Role, UserOut
from app.policy import Action, require

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

bearer_scheme = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS = "Invalid username or password"


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: int, username: str, role: str) -> str:
    now = int(time.time())
    payload = {
        "userId": user_id,
        "username": username,
        "role": role,
        "exp": now + config.ACCESS_TOKEN_EXPIRE_SECONDS,
        "iat": now,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALG)


def decode_token(token: str) -> Optional[Dict]:
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALG])
    except JWTError:
        return None


def signup(s: Session, username: str, raw_password: str, role: Role = Role.EMPLOYEE) -> UserOut:
    username = (username or "").strip()
    if len(username) < 3:
        raise ValidationError("Username must be at least 3 characters")
    if len(raw_password or "") < 6:
        raise ValidationError("Password must be at least 6 characters")
    acct = store.create_user(s, username, hash_password(raw_password), role)
    logger.info("Signed up user %s (id=%s, role=%s)", acct.username, acct.id, acct.role)
    return store.public_user(acct)


def login(s: Session, username: str, raw_password: str) -> Tuple[UserOut, str]:
    """Check credentials and issue a token.

    Unknown usernames and wrong passwords fail with the same error so a caller
    cannot tell which one happened.
    """
    username = (username or "").strip()
    acct = store.get_user_by_username(s, username)
    if acct is None:
        pwd_context.dummy_verify()
        logger.warning("Failed login for %s", username)
        raise Unauthorized(INVALID_CREDENTIALS)
    if not verify_password(raw_password, acct.password_hash):
        logger.warning("Failed login for %s", username)
        raise Unauthorized(INVALID_CREDENTIALS)
    token = create_access_token(acct.id, acct.username, acct.role)
    logger.info("User %s logged in", acct.username)
    return store.public_user(acct), token


def authenticate(token: Optional[str]) -> CurrentUser:
    """Turn a bearer token into the caller's identity without touching the store."""
    if not token:
        raise Unauthorized("Authentication token required")
    payload = decode_token(token)
    if not payload:
        logger.warning("Rejected invalid or expired token")
        raise Forbidden("Invalid or expired token")
    try:
        return CurrentUser(user_id=payload["userId"], username=payload["username"], role=payload["role"])
    except (KeyError, PydanticValidationError):
        logger.warning("Rejected token with malformed claims")
        raise Forbidden("Invalid or expired token")


async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> CurrentUser:
    return authenticate(credentials.credentials if credentials else None)


def role_required(action: Action):
    """Dependency that rejects the caller before the handler or body is looked at."""
    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        require(user.role, action)
        return user
    return dependency
