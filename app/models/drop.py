from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime

from app.models.base import utc_now
from uuid import uuid4


class Drop(SQLModel, table=True):
    __tablename__ = "drops"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    subtitle: Optional[str] = None
    description: str = ""

    # "YYYY-MM-DD" / "HH:MM", local store time
    start_date: str
    start_time: str
    has_end_date: bool = False
    end_date: Optional[str] = None
    end_time: Optional[str] = None

    # admin display only, scheduling is derived from the dates
    status: str = Field(default="scheduled")

    artwork_ids: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    hero_image: Optional[str] = None
    featured: bool = False
    notify_subscribers: bool = True

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
