"""
Service report routes
"""
from typing import List

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from rps_dashboard.api.deps import get_db, get_email_service, get_pdf_service
from rps_dashboard.api.routes.certificates import pdf_response
from rps_dashboard.api.utils import allocate_or_fallback, get_by_id, save_entity, update_entity, delete_entity
from rps_dashboard.models.sequence_counter import DocumentType
from rps_dashboard.models.service_report import ServiceReport
from rps_dashboard.schemas.documents import to_document_record
from rps_dashboard.schemas.service_report import (
    ServiceReportCreate,
    ServiceReportUpdate,
    ServiceReportResponse,
)
from rps_dashboard.services.email_service import EmailService
from rps_dashboard.services.exceptions import ConfigurationError
from rps_dashboard.services.pdf_service import PDFService

router = APIRouter()


class SendReportResponse(BaseModel):
    sent: bool
    filename: str


@router.post("/", response_model=ServiceReportResponse, status_code=201)
def create_service_report(report: ServiceReportCreate, db: Session = Depends(get_db)):
    """Create a service report, issuing a report number when none was sent"""
    data = report.model_dump(exclude_none=True)

    if not report.report_no:
        data["report_no"] = allocate_or_fallback(db, DocumentType.SERVICE).code

    return save_entity(db, ServiceReport(**data), "create service report")


@router.get("/", response_model=List[ServiceReportResponse])
def list_service_reports(db: Session = Depends(get_db)):
    """List service reports, newest first"""
    return db.query(ServiceReport).order_by(ServiceReport.created_at.desc()).all()


@router.get("/{report_id}", response_model=ServiceReportResponse)
def get_service_report(report_id: str, db: Session = Depends(get_db)):
    return get_by_id(db, ServiceReport, report_id, error_message="Service report not found")


@router.put("/{report_id}", response_model=ServiceReportResponse)
def update_service_report(
    report_id: str,
    report_update: ServiceReportUpdate,
    db: Session = Depends(get_db)
):
    report = get_by_id(db, ServiceReport, report_id, error_message="Service report not found")
    return update_entity(db, report, report_update)


@router.delete("/{report_id}", status_code=204)
def delete_service_report(report_id: str, db: Session = Depends(get_db)):
    report = get_by_id(db, ServiceReport, report_id, error_message="Service report not found")
    delete_entity(db, report)
    return None


@router.get("/{report_id}/pdf", response_class=Response)
def download_service_report_pdf(
    report_id: str,
    db: Session = Depends(get_db),
    pdf: PDFService = Depends(get_pdf_service)
):
    """Render the service report as a PDF download"""
    report = get_by_id(db, ServiceReport, report_id, error_message="Service report not found")
    return pdf_response(pdf.render(to_document_record(report)))


@router.post("/{report_id}/send", response_model=SendReportResponse)
def send_service_report(
    report_id: str,
    db: Session = Depends(get_db),
    pdf: PDFService = Depends(get_pdf_service),
    mailer: EmailService = Depends(get_email_service)
):
    """
    Render the report and mail it to the notification mailbox

    A failed dispatch is reported as sent=false, the report itself is
    unaffected.
    """
    if not mailer.notification_address:
        raise ConfigurationError("Notification mailbox not configured")

    report = get_by_id(db, ServiceReport, report_id, error_message="Service report not found")
    document = pdf.render(to_document_record(report))

    sent = mailer.send_service_report(
        report_no=report.report_no,
        customer_name=report.customer_name,
        filename=document.filename,
        content=document.content,
    )
    return {"sent": sent, "filename": document.filename}
