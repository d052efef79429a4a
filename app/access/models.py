from __future__ import annotations
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class AccessRequest(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    software_id: int = Field(index=True)
    access_type: str  # Read | Write | Admin
    reason: str
    status: str = Field(default="Pending", index=True, description="Pending|Approved|Rejected")
    created_at: datetime
    updated_at: datetime
    updated_by: Optional[int] = Field(default=None)
