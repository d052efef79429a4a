from __future__ import annotations
import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from app import config
from app.errors import Forbidden
from app.models import Role

logger = logging.getLogger(__name__)


class Action(str, Enum):
    CREATE_SOFTWARE = "create software"
    VIEW_SOFTWARE = "list/view software"
    CREATE_REQUEST = "create access request"
    LIST_OWN_REQUESTS = "list own requests"
    LIST_PENDING = "list pending requests"
    DECIDE_REQUEST = "approve/reject request"
    LIST_USERS = "list users"
    VIEW_ANY_REQUEST = "view any request"


ALL_ROLES: FrozenSet[Role] = frozenset(Role)
REVIEWERS: FrozenSet[Role] = frozenset({Role.MANAGER, Role.ADMIN})

Capabilities = Dict[Action, FrozenSet[Role]]


def build_capabilities(manager_can_request: bool = False) -> Capabilities:
    requesters = {Role.EMPLOYEE, Role.ADMIN}
    if manager_can_request:
        requesters.add(Role.MANAGER)
    return {
        Action.CREATE_SOFTWARE: frozenset({Role.ADMIN}),
        Action.VIEW_SOFTWARE: ALL_ROLES,
        Action.CREATE_REQUEST: frozenset(requesters),
        Action.LIST_OWN_REQUESTS: ALL_ROLES,
        Action.LIST_PENDING: REVIEWERS,
        Action.DECIDE_REQUEST: REVIEWERS,
        Action.LIST_USERS: REVIEWERS,
        Action.VIEW_ANY_REQUEST: REVIEWERS,
    }


def capabilities() -> Capabilities:
    """Table in effect for the current configuration."""
    return build_capabilities(manager_can_request=config.MANAGER_CAN_REQUEST)


def authorize(role: Role | str, action: Action, table: Optional[Capabilities] = None) -> bool:
    try:
        role = Role(role)
    except ValueError:
        return False
    table = table if table is not None else capabilities()
    return role in table.get(action, frozenset())


def require(role: Role | str, action: Action, table: Optional[Capabilities] = None) -> None:
    """Raise Forbidden unless ``role`` may perform ``action``."""
    if authorize(role, action, table):
        return
    allowed = (table if table is not None else capabilities()).get(action, frozenset())
    names = " or ".join(r.value for r in Role if r in allowed)
    logger.warning("Denied %s for role %s", action.value, getattr(role, "value", role))
    raise Forbidden(f"Access denied. Required role: {names}" if names else "Access denied")
