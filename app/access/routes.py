from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends, Query

from app import auth, config
from app.db import get_session
from app.models import AccessRequestCreate, AccessRequestOut, CurrentUser, DecisionUpdate
from app.policy import Action
from . import engine

router = APIRouter(prefix="/api/requests", tags=["requests"])


@router.post("", response_model=AccessRequestOut, status_code=201)
async def create_request(body: AccessRequestCreate, user: CurrentUser = Depends(auth.role_required(Action.CREATE_REQUEST))):
    with get_session() as s:
        req = engine.create_request(s, user.user_id, user.role, body.software_id, body.access_type, body.reason)
        return engine.to_out(req)


@router.get("/my", response_model=List[AccessRequestOut])
async def my_requests(user: CurrentUser = Depends(auth.role_required(Action.LIST_OWN_REQUESTS))):
    with get_session() as s:
        return [engine.to_out(r) for r in engine.list_mine(s, user.user_id)]


@router.get("/pending", response_model=List[AccessRequestOut])
async def pending_requests(user: CurrentUser = Depends(auth.role_required(Action.LIST_PENDING))):
    with get_session() as s:
        return [engine.to_out(r) for r in engine.list_pending(s, user.role)]


@router.get("/recent", response_model=List[AccessRequestOut])
async def recent_requests(
    limit: int = Query(default=config.RECENT_DEFAULT_LIMIT, ge=1, le=config.RECENT_MAX_LIMIT),
    user: CurrentUser = Depends(auth.get_current_user),
):
    with get_session() as s:
        return [engine.to_out(r) for r in engine.list_recent(s, user.user_id, user.role, limit)]


@router.get("/{request_id}", response_model=AccessRequestOut)
async def get_request(request_id: int, user: CurrentUser = Depends(auth.get_current_user)):
    with get_session() as s:
        return engine.to_out(engine.get_request(s, user.user_id, user.role, request_id))


@router.patch("/{request_id}", response_model=AccessRequestOut)
async def decide_request(request_id: int, body: DecisionUpdate, user: CurrentUser = Depends(auth.role_required(Action.DECIDE_REQUEST))):
    with get_session() as s:
        req = engine.decide(s, user.user_id, user.role, request_id, body.status)
        return engine.to_out(req)
