from pydantic import Field
from typing import Optional
from datetime import datetime

from rps_dashboard.schemas.base import RecordSchema, UpdateSchema


class EngineerBase(RecordSchema):
    """Shared by calibration engineers and service engineers"""
    name: str = Field(..., min_length=1, max_length=200)


class EngineerCreate(EngineerBase):
    pass


class EngineerUpdate(UpdateSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class EngineerResponse(EngineerBase):
    id: str
    created_at: datetime
    updated_at: datetime
