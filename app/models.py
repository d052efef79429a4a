from __future__ import annotations
from enum import Enum
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    EMPLOYEE = "Employee"
    MANAGER = "Manager"
    ADMIN = "Admin"


class AccessLevel(str, Enum):
    READ = "Read"
    WRITE = "Write"
    ADMIN = "Admin"


class RequestStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class CamelModel(BaseModel):
    # JSON bodies use camelCase; Python code uses field names
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CurrentUser(CamelModel):
    """Identity carried by a verified token; passed explicitly to every call."""
    user_id: int
    username: str
    role: Role


class SignupRequest(CamelModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    confirm_password: Optional[str] = None
    role: Role = Role.EMPLOYEE


class LoginRequest(BaseModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)


class UserOut(CamelModel):
    id: int
    username: str
    role: Role
    created_at: Optional[datetime] = None


class UserResponse(BaseModel):
    user: UserOut


class LoginResponse(BaseModel):
    user: UserOut
    token: str


class SoftwareCreate(CamelModel):
    name: str
    description: str
    access_levels: List[AccessLevel]


class SoftwareOut(CamelModel):
    id: int
    name: str
    description: str
    access_levels: List[AccessLevel]
    created_by: int
    created_at: Optional[datetime] = None


class AccessRequestCreate(CamelModel):
    software_id: int
    access_type: AccessLevel
    reason: str


class DecisionUpdate(CamelModel):
    # Checked by the engine after the request is found
    status: str


class AccessRequestOut(CamelModel):
    id: int
    user_id: int
    software_id: int
    access_type: AccessLevel
    reason: str
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    updated_by: Optional[int] = None


class DashboardStats(CamelModel):
    total_software: int
    pending_requests: int
    total_users: int
