from __future__ import annotations
from typing import List, Optional
from datetime import datetime
from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field

from app.db import utcnow


class Software(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    description: str
    access_levels: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_by: int = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow)
