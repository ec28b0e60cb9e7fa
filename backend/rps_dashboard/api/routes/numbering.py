"""
Document number routes

The forms call these with increment=false when a new form opens (preview)
and with increment=true when the record is saved (commit).
"""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from rps_dashboard.api.deps import get_db
from rps_dashboard.api.utils import allocate_number
from rps_dashboard.models.sequence_counter import DocumentType
from rps_dashboard.schemas.sequence import (
    AllocationRequest,
    CertificateNumberResponse,
    ServiceReportNumberResponse,
    ErrorResponse,
)
from rps_dashboard.services.exceptions import StorageError

router = APIRouter()

_ERROR_RESPONSES = {500: {"model": ErrorResponse, "description": "Sequence store unavailable"}}


def _wants_commit(request: Optional[AllocationRequest]) -> bool:
    # A missing body counts as increment=true
    return request.increment if request is not None else True


@router.post("/certificate-report", response_model=CertificateNumberResponse, responses=_ERROR_RESPONSES)
def generate_certificate_number(
    request: Optional[AllocationRequest] = None,
    db: Session = Depends(get_db)
):
    """Preview (increment=false) or issue (increment=true) a certificate number"""
    try:
        result = allocate_number(db, DocumentType.CERTIFICATE, commit=_wants_commit(request))
    except StorageError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return {"certificateNumber": result.code}


@router.post("/service-report", response_model=ServiceReportNumberResponse, responses=_ERROR_RESPONSES)
def generate_service_report_number(
    request: Optional[AllocationRequest] = None,
    db: Session = Depends(get_db)
):
    """Preview (increment=false) or issue (increment=true) a service report number"""
    try:
        result = allocate_number(db, DocumentType.SERVICE, commit=_wants_commit(request))
    except StorageError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return {"serviceReportNo": result.code}
