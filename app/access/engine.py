"""Access request lifecycle.

A request is created ``Pending`` by its requester and leaves that state
exactly once, to ``Approved`` or ``Rejected``, by a Manager or Admin. Every
mutating call checks the caller's role before reading any record.
"""
from __future__ import annotations
import logging
from typing import List
from sqlalchemy import func, update
from sqlmodel import Session, select

from app import config
from app.catalog import service as catalog
from app.db import utcnow
from app.errors import Conflict, Forbidden, InvalidArgument, NotFound, ValidationError
from app.models import AccessLevel, AccessRequestOut, RequestStatus, Role
from app.policy import Action, authorize, require
from .models import AccessRequest

logger = logging.getLogger(__name__)

MIN_REASON_LENGTH = 10
DECISIONS = (RequestStatus.APPROVED, RequestStatus.REJECTED)


def create_request(s: Session, caller_id: int, caller_role: Role, software_id: int,
                   access_type: AccessLevel | str, reason: str) -> AccessRequest:
    require(caller_role, Action.CREATE_REQUEST)
    sw = catalog.require_software(s, software_id)
    try:
        access_type = AccessLevel(access_type)
    except ValueError:
        raise ValidationError(f'Unknown access type "{access_type}"')
    if access_type.value not in sw.access_levels:
        raise InvalidArgument(f'Access type "{access_type.value}" is not available for this software')
    reason = (reason or "").strip()
    if len(reason) < MIN_REASON_LENGTH:
        raise ValidationError("Please provide a detailed justification (at least 10 characters)")

    now = utcnow()
    req = AccessRequest(
        user_id=caller_id,
        software_id=sw.id,
        access_type=access_type.value,
        reason=reason,
        status=RequestStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    s.add(req)
    s.commit()
    s.refresh(req)
    logger.info("User %s requested %s access to software %s (request %s)", caller_id, req.access_type, sw.id, req.id)
    return req


def list_mine(s: Session, caller_id: int) -> List[AccessRequest]:
    stmt = (
        select(AccessRequest)
        .where(AccessRequest.user_id == caller_id)
        .order_by(AccessRequest.created_at.desc(), AccessRequest.id.desc())
    )
    return list(s.exec(stmt).all())


def list_pending(s: Session, caller_role: Role) -> List[AccessRequest]:
    require(caller_role, Action.LIST_PENDING)
    stmt = (
        select(AccessRequest)
        .where(AccessRequest.status == RequestStatus.PENDING.value)
        .order_by(AccessRequest.created_at.desc(), AccessRequest.id.desc())
    )
    return list(s.exec(stmt).all())


def list_recent(s: Session, caller_id: int, caller_role: Role, limit: int = config.RECENT_DEFAULT_LIMIT) -> List[AccessRequest]:
    """Latest activity first; reviewers see everyone's requests, others their own."""
    limit = max(1, min(int(limit), config.RECENT_MAX_LIMIT))
    stmt = select(AccessRequest)
    if not authorize(caller_role, Action.VIEW_ANY_REQUEST):
        stmt = stmt.where(AccessRequest.user_id == caller_id)
    stmt = stmt.order_by(AccessRequest.updated_at.desc(), AccessRequest.id.desc()).limit(limit)
    return list(s.exec(stmt).all())


def get_request(s: Session, caller_id: int, caller_role: Role, request_id: int) -> AccessRequest:
    req = s.get(AccessRequest, request_id)
    if req is None:
        raise NotFound("Request not found")
    if req.user_id != caller_id and not authorize(caller_role, Action.VIEW_ANY_REQUEST):
        raise Forbidden("Access denied")
    return req


def decide(s: Session, caller_id: int, caller_role: Role, request_id: int,
           decision: RequestStatus | str) -> AccessRequest:
    require(caller_role, Action.DECIDE_REQUEST)
    req = s.get(AccessRequest, request_id)
    if req is None:
        raise NotFound("Request not found")
    try:
        decision = RequestStatus(decision)
    except ValueError:
        raise ValidationError(f'Invalid status "{decision}"')
    if decision not in DECISIONS:
        raise ValidationError("Status must be Approved or Rejected")

    # Compare-and-set on status so only one decision can ever land
    stmt = (
        update(AccessRequest)
        .where(AccessRequest.id == request_id)
        .where(AccessRequest.status == RequestStatus.PENDING.value)
        .values(status=decision.value, updated_by=caller_id, updated_at=utcnow())
    )
    result = s.connection().execute(stmt)
    if result.rowcount == 0:
        s.rollback()
        s.refresh(req)
        logger.warning("Request %s already %s; refusing %s by user %s", request_id, req.status, decision.value, caller_id)
        raise Conflict(f"Request has already been {req.status.lower()}")
    s.commit()
    s.refresh(req)
    logger.info("Request %s %s by user %s", request_id, req.status.lower(), caller_id)
    return req


def count_pending(s: Session) -> int:
    stmt = select(func.count()).select_from(AccessRequest).where(AccessRequest.status == RequestStatus.PENDING.value)
    return s.exec(stmt).one()


def to_out(req: AccessRequest) -> AccessRequestOut:
    return AccessRequestOut.model_validate(req.model_dump())
