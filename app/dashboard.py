from fastapi import APIRouter, Depends
from sqlmodel import Session

from app import auth
from app.access import engine as access
from app.accounts import store as accounts
from app.catalog import service as catalog
from app.db import get_session
from app.models import CurrentUser, DashboardStats

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def dashboard_stats(s: Session) -> DashboardStats:
    # Counted fresh on every call; nothing here is cached
    return DashboardStats(
        total_software=catalog.count_software(s),
        pending_requests=access.count_pending(s),
        total_users=accounts.count_users(s),
    )


@router.get("/stats", response_model=DashboardStats)
async def stats(user: CurrentUser = Depends(auth.get_current_user)):
    with get_session() as s:
        return dashboard_stats(s)
