from __future__ import annotations
import logging
from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.errors import Conflict, NotFound, ValidationError
from app.models import AccessLevel, Role, SoftwareOut
from app.policy import Action, require
from .models import Software

logger = logging.getLogger(__name__)


def _normalize_levels(access_levels: Iterable) -> List[str]:
    levels = []
    for raw in access_levels or []:
        try:
            level = AccessLevel(raw).value
        except ValueError:
            raise ValidationError(f'Unknown access level "{raw}"')
        if level in levels:
            raise ValidationError(f'Duplicate access level "{level}"')
        levels.append(level)
    if not levels:
        raise ValidationError("At least one access level is required")
    return levels


def create_software(s: Session, caller_role: Role, name: str, description: str,
                    access_levels: Iterable, created_by: int) -> Software:
    require(caller_role, Action.CREATE_SOFTWARE)
    name = (name or "").strip()
    description = (description or "").strip()
    if not name:
        raise ValidationError("Name is required")
    if not description:
        raise ValidationError("Description is required")
    levels = _normalize_levels(access_levels)
    if s.exec(select(Software).where(Software.name == name)).first() is not None:
        raise Conflict(f'Software "{name}" is already registered')
    sw = Software(name=name, description=description, access_levels=levels, created_by=created_by)
    s.add(sw)
    try:
        s.commit()
    except IntegrityError:
        s.rollback()
        raise Conflict(f'Software "{name}" is already registered')
    s.refresh(sw)
    logger.info("Registered software %s (id=%s, levels=%s) by user %s", sw.name, sw.id, levels, created_by)
    return sw


def get_software(s: Session, software_id: int) -> Optional[Software]:
    return s.get(Software, software_id)


def require_software(s: Session, software_id: int) -> Software:
    sw = get_software(s, software_id)
    if sw is None:
        raise NotFound("Software not found")
    return sw


def list_software(s: Session) -> List[Software]:
    return list(s.exec(select(Software).order_by(Software.name)).all())


def count_software(s: Session) -> int:
    return s.exec(select(func.count()).select_from(Software)).one()


def to_out(sw: Software) -> SoftwareOut:
    return SoftwareOut.model_validate(sw.model_dump())
