from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from pydantic import Field, HttpUrl, TypeAdapter, field_validator

from rps_dashboard.models.company import CompanyFlag
from rps_dashboard.schemas.base import RecordSchema, UpdateSchema, empty_as_none

_url_adapter = TypeAdapter(HttpUrl)


def _check_website(v):
    if v is not None:
        try:
            _url_adapter.validate_python(v)
        except ValueError:
            raise ValueError("Invalid website URL")
    return v


class CompanyBase(RecordSchema):
    """Base schema for Company"""
    company_name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1)
    industries: str = Field(..., min_length=1, max_length=200)
    industries_type: str = Field(..., min_length=1, max_length=200)
    gst_number: Optional[str] = Field(None, max_length=20, description="GSTIN")
    website: Optional[str] = Field(None, max_length=200)
    flag: CompanyFlag

    @field_validator("website", "gst_number", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return empty_as_none(v)

    @field_validator("website")
    @classmethod
    def validate_website(cls, v):
        """Website must be a valid http(s) URL"""
        return _check_website(v)


class CompanyCreate(CompanyBase):
    """Schema for creating a company"""
    pass


class CompanyUpdate(UpdateSchema):
    """Schema for updating a company (all fields optional)"""
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"gst_number", "website"})

    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1)
    industries: Optional[str] = Field(None, min_length=1, max_length=200)
    industries_type: Optional[str] = Field(None, min_length=1, max_length=200)
    gst_number: Optional[str] = Field(None, max_length=20)
    website: Optional[str] = Field(None, max_length=200)
    flag: Optional[CompanyFlag] = None

    @field_validator("website", "gst_number", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return empty_as_none(v)

    @field_validator("website")
    @classmethod
    def validate_website(cls, v):
        return _check_website(v)


class CompanyResponse(CompanyBase):
    """API response schema"""
    id: str
    created_at: datetime
    updated_at: datetime
