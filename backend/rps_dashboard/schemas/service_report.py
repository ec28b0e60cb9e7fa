import datetime as dt
from typing import List, Literal, Optional

from pydantic import AliasChoices, Field

from rps_dashboard.models.service_report import ServiceStatus
from rps_dashboard.schemas.base import RecordSchema, UpdateSchema

MAX_ENGINEER_REMARKS = 10

# Names the service form uses for the instrument fields
INSTRUMENTS_ALIAS = AliasChoices(
    "make_model_number_of_the_instrument_quantity", "makeModelNumberoftheInstrumentQuantity"
)
CALIBRATED_OK_ALIAS = AliasChoices(
    "serial_number_of_the_instrument_calibrated_ok", "serialNumberoftheInstrumentCalibratedOK"
)
FAULTY_ALIAS = AliasChoices(
    "serial_number_of_the_faulty_non_working_instruments", "serialNumberoftheFaultyNonWorkingInstruments"
)


class EngineerRemark(RecordSchema):
    """
    Spare part / service line of a job report

    total is rate x quantity as computed by the form; it is kept as sent.
    """
    service_spares: str = Field(..., min_length=1, max_length=200)
    part_no: str = Field(..., min_length=1, max_length=100)
    rate: str = Field(..., min_length=1, max_length=30)
    quantity: str = Field(..., min_length=1, max_length=30)
    total: str = Field(..., min_length=1, max_length=30)
    po_no: str = Field("", max_length=100)


class ServiceReportBase(RecordSchema):
    """Base schema for ServiceReport"""
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_location: str = Field(..., min_length=1, max_length=200)
    contact_person: str = Field(..., min_length=1, max_length=200)
    contact_number: str = Field(..., min_length=1, max_length=20, pattern=r"^\d+$")
    service_engineer: str = Field(..., min_length=1, max_length=200)
    date: dt.date
    place: str = Field(..., min_length=1, max_length=200)
    place_options: str = Field("At Site", min_length=1, max_length=50)
    nature_of_job: str = Field("AMC", min_length=1, max_length=200)
    make_model_number_of_the_instrument_quantity: str = Field(..., min_length=1, validation_alias=INSTRUMENTS_ALIAS)
    serial_number_of_the_instrument_calibrated_ok: str = Field(..., min_length=1, validation_alias=CALIBRATED_OK_ALIAS)
    serial_number_of_the_faulty_non_working_instruments: str = Field(..., min_length=1, validation_alias=FAULTY_ALIAS)
    engineer_report: str = Field(..., min_length=1)
    customer_report: str = ""
    engineer_remarks: List[EngineerRemark] = Field(..., min_length=1, max_length=MAX_ENGINEER_REMARKS)
    engineer_name: str = Field(..., min_length=1, max_length=200)
    status: ServiceStatus = ServiceStatus.CHECKED


class ServiceReportCreate(ServiceReportBase):
    """
    Schema for creating a service report
    The server allocates report_no when it is missing.
    """
    id: Optional[str] = Field(None, max_length=36)
    report_no: Optional[str] = Field(None, max_length=40)


class ServiceReportUpdate(UpdateSchema):
    """Schema for updating a service report (all fields optional)"""
    report_no: Optional[str] = Field(None, min_length=1, max_length=40)
    customer_name: Optional[str] = Field(None, min_length=1, max_length=200)
    customer_location: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_person: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_number: Optional[str] = Field(None, min_length=1, max_length=20, pattern=r"^\d+$")
    service_engineer: Optional[str] = Field(None, min_length=1, max_length=200)
    date: Optional[dt.date] = None
    place: Optional[str] = Field(None, min_length=1, max_length=200)
    place_options: Optional[str] = Field(None, min_length=1, max_length=50)
    nature_of_job: Optional[str] = Field(None, min_length=1, max_length=200)
    make_model_number_of_the_instrument_quantity: Optional[str] = Field(None, min_length=1, validation_alias=INSTRUMENTS_ALIAS)
    serial_number_of_the_instrument_calibrated_ok: Optional[str] = Field(None, min_length=1, validation_alias=CALIBRATED_OK_ALIAS)
    serial_number_of_the_faulty_non_working_instruments: Optional[str] = Field(None, min_length=1, validation_alias=FAULTY_ALIAS)
    engineer_report: Optional[str] = Field(None, min_length=1)
    customer_report: Optional[str] = None
    engineer_remarks: Optional[List[EngineerRemark]] = Field(None, min_length=1, max_length=MAX_ENGINEER_REMARKS)
    engineer_name: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[ServiceStatus] = None


class ServiceReportResponse(ServiceReportBase):
    """API response schema"""
    id: str
    report_no: str
    created_at: dt.datetime
    updated_at: dt.datetime


class ServiceReportRecord(RecordSchema):
    """
    Read-only service report as the PDF renderer sees it
    Built from a ServiceReport row with ServiceReportRecord.model_validate(row).
    """
    kind: Literal["service"] = "service"
    id: Optional[str] = None
    report_no: str
    customer_name: str
    customer_location: str = ""
    contact_person: str = ""
    contact_number: str = ""
    service_engineer: str = ""
    date: Optional[dt.date] = None
    place: str = ""
    place_options: str = ""
    nature_of_job: str = ""
    make_model_number_of_the_instrument_quantity: str = Field("", validation_alias=INSTRUMENTS_ALIAS)
    serial_number_of_the_instrument_calibrated_ok: str = Field("", validation_alias=CALIBRATED_OK_ALIAS)
    serial_number_of_the_faulty_non_working_instruments: str = Field("", validation_alias=FAULTY_ALIAS)
    engineer_report: str = ""
    customer_report: str = ""
    engineer_remarks: List[EngineerRemark] = Field(default_factory=list)
    engineer_name: str = ""
    status: ServiceStatus = ServiceStatus.CHECKED
