from pydantic import ConfigDict, Field
from typing import Optional
from datetime import datetime

from rps_dashboard.schemas.base import RecordSchema, UpdateSchema


class InstrumentModelBase(RecordSchema):
    # model_name clashes with pydantic's reserved "model_" prefix
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(..., min_length=1, max_length=200)
    range: str = Field(..., min_length=1, max_length=100, description="Measuring range, e.g. 0-100 %LEL")


class InstrumentModelCreate(InstrumentModelBase):
    pass


class InstrumentModelUpdate(UpdateSchema):
    model_config = ConfigDict(protected_namespaces=())

    model_name: Optional[str] = Field(None, min_length=1, max_length=200)
    range: Optional[str] = Field(None, min_length=1, max_length=100)


class InstrumentModelResponse(InstrumentModelBase):
    id: str
    created_at: datetime
    updated_at: datetime
