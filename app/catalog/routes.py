from __future__ import annotations
from typing import List
from fastapi import APIRouter, Depends

from app import auth
from app.db import get_session
from app.models import CurrentUser, SoftwareCreate, SoftwareOut
from app.policy import Action
from . import service

router = APIRouter(prefix="/api/software", tags=["software"])


@router.post("", response_model=SoftwareOut, status_code=201)
async def create_software(body: SoftwareCreate, user: CurrentUser = Depends(auth.role_required(Action.CREATE_SOFTWARE))):
    with get_session() as s:
        sw = service.create_software(s, user.role, body.name, body.description, body.access_levels, created_by=user.user_id)
        return service.to_out(sw)


@router.get("", response_model=List[SoftwareOut])
async def list_software(user: CurrentUser = Depends(auth.role_required(Action.VIEW_SOFTWARE))):
    with get_session() as s:
        return [service.to_out(sw) for sw in service.list_software(s)]


@router.get("/{software_id}", response_model=SoftwareOut)
async def get_software(software_id: int, user: CurrentUser = Depends(auth.role_required(Action.VIEW_SOFTWARE))):
    with get_session() as s:
        return service.to_out(service.require_software(s, software_id))
