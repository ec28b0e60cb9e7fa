from pydantic import BaseModel, ConfigDict, Field


class AllocationRequest(BaseModel):
    """Body of the numbering endpoints; increment defaults to a committing allocation"""
    increment: bool = Field(True, description="False previews the number without persisting it")


class CertificateNumberResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    certificate_number: str = Field(..., alias="certificateNumber")


class ServiceReportNumberResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service_report_no: str = Field(..., alias="serviceReportNo")


class ErrorResponse(BaseModel):
    error: str
