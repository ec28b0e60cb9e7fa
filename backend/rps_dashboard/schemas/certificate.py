from datetime import date, datetime
from typing import ClassVar, FrozenSet, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from rps_dashboard.models.certificate import CertificateStatus
from rps_dashboard.schemas.base import RecordSchema, UpdateSchema, empty_as_none

MAX_OBSERVATIONS = 5


class Observation(RecordSchema):
    """One calibration reading: applied gas concentration, reading before and after"""
    gas: str = Field(..., min_length=1, max_length=200, description="Concentration of gas")
    before: str = Field(..., min_length=1, max_length=100)
    after: str = Field(..., min_length=1, max_length=100)


class CertificateBase(RecordSchema):
    """Base schema for Certificate"""
    customer_name: str = Field(..., min_length=1, max_length=200)
    site_location: str = Field(..., min_length=1, max_length=200)
    make_model: str = Field(..., min_length=1, max_length=200)
    range: str = Field(..., min_length=1, max_length=100)
    serial_no: str = Field(..., min_length=1, max_length=100)
    calibration_gas: str = Field(..., min_length=1, max_length=200)
    gas_canister_details: str = Field(..., min_length=1)
    date_of_calibration: date
    calibration_due_date: date
    observations: List[Observation] = Field(..., min_length=1, max_length=MAX_OBSERVATIONS)
    engineer_name: str = Field(..., min_length=1, max_length=200)
    status: CertificateStatus
    company_id: Optional[str] = None

    @field_validator("company_id", mode="before")
    @classmethod
    def blank_company_to_none(cls, v):
        return empty_as_none(v)

    @model_validator(mode="after")
    def due_date_after_calibration(self):
        """Due date cannot precede the calibration date"""
        if self.calibration_due_date < self.date_of_calibration:
            raise ValueError("calibration_due_date must not be before date_of_calibration")
        return self


class CertificateCreate(CertificateBase):
    """
    Schema for creating a certificate

    certificate_no is normally the number the form committed through
    /certificate-report. When it is missing the server allocates one.
    """
    id: Optional[str] = Field(None, max_length=36)
    certificate_no: Optional[str] = Field(None, max_length=40)


class CertificateUpdate(UpdateSchema):
    """Schema for updating a certificate (all fields optional)"""
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"company_id"})

    certificate_no: Optional[str] = Field(None, min_length=1, max_length=40)
    customer_name: Optional[str] = Field(None, min_length=1, max_length=200)
    site_location: Optional[str] = Field(None, min_length=1, max_length=200)
    make_model: Optional[str] = Field(None, min_length=1, max_length=200)
    range: Optional[str] = Field(None, min_length=1, max_length=100)
    serial_no: Optional[str] = Field(None, min_length=1, max_length=100)
    calibration_gas: Optional[str] = Field(None, min_length=1, max_length=200)
    gas_canister_details: Optional[str] = Field(None, min_length=1)
    date_of_calibration: Optional[date] = None
    calibration_due_date: Optional[date] = None
    observations: Optional[List[Observation]] = Field(None, min_length=1, max_length=MAX_OBSERVATIONS)
    engineer_name: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[CertificateStatus] = None
    company_id: Optional[str] = None

    @field_validator("company_id", mode="before")
    @classmethod
    def blank_company_to_none(cls, v):
        return empty_as_none(v)


class CertificateResponse(CertificateBase):
    """API response schema"""
    id: str
    certificate_no: str
    created_at: datetime
    updated_at: datetime


class CertificateRecord(RecordSchema):
    """
    Read-only certificate as the PDF renderer sees it

    Built from a Certificate row with CertificateRecord.model_validate(row).
    Count limits are enforced on create/update, not here, so any stored
    record can be rendered.
    """
    kind: Literal["certificate"] = "certificate"
    id: Optional[str] = None
    certificate_no: str
    customer_name: str
    site_location: str = ""
    make_model: str = ""
    range: str = ""
    serial_no: str = ""
    calibration_gas: str = ""
    gas_canister_details: str = ""
    date_of_calibration: Optional[date] = None
    calibration_due_date: Optional[date] = None
    observations: List[Observation] = Field(default_factory=list)
    engineer_name: str = ""
    status: CertificateStatus = CertificateStatus.UNCHECKED
