from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from rps_dashboard.schemas.base import RecordSchema, UpdateSchema


class ContactPersonBase(RecordSchema):
    """Base schema for ContactPerson"""
    first_name: str = Field(..., min_length=1, max_length=100)
    contact_no: str = Field(..., min_length=1, max_length=20, pattern=r"^\d+$", description="Digits only")
    email: EmailStr
    designation: str = Field(..., min_length=1, max_length=100)
    company_id: str = Field(..., min_length=1, description="Company the contact works for")


class ContactPersonCreate(ContactPersonBase):
    """Schema for creating a contact person"""
    pass


class ContactPersonUpdate(UpdateSchema):
    """Schema for updating a contact person (all fields optional)"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    contact_no: Optional[str] = Field(None, min_length=1, max_length=20, pattern=r"^\d+$")
    email: Optional[EmailStr] = None
    designation: Optional[str] = Field(None, min_length=1, max_length=100)
    company_id: Optional[str] = Field(None, min_length=1)


class ContactPersonResponse(ContactPersonBase):
    """API response schema"""
    id: str
    company_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime
