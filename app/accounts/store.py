from __future__ import annotations
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.errors import Conflict
from app.models import Role, UserOut
from .models import UserAccount


def get_user(s: Session, user_id: int) -> Optional[UserAccount]:
    return s.get(UserAccount, user_id)


def get_user_by_username(s: Session, username: str) -> Optional[UserAccount]:
    return s.exec(select(UserAccount).where(UserAccount.username == username)).first()


def create_user(s: Session, username: str, password_hash: str, role: Role = Role.EMPLOYEE) -> UserAccount:
    if get_user_by_username(s, username) is not None:
        raise Conflict("Username already exists")
    acct = UserAccount(username=username, password_hash=password_hash, role=Role(role).value)
    s.add(acct)
    try:
        s.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same name
        s.rollback()
        raise Conflict("Username already exists")
    s.refresh(acct)
    return acct


def list_users(s: Session) -> List[UserAccount]:
    return list(s.exec(select(UserAccount).order_by(UserAccount.username)).all())


def count_users(s: Session) -> int:
    return s.exec(select(func.count()).select_from(UserAccount)).one()


def public_user(acct: UserAccount) -> UserOut:
    """Strip the digest before anything leaves the identity store."""
    return UserOut(id=acct.id, username=acct.username, role=acct.role, created_at=acct.created_at)
