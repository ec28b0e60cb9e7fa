"""
Calibration certificate routes
"""
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from rps_dashboard.api.deps import get_db, get_pdf_service
from rps_dashboard.api.utils import allocate_or_fallback, get_by_id, validate_fk, save_entity, update_entity, delete_entity
from rps_dashboard.models.certificate import Certificate
from rps_dashboard.models.company import Company
from rps_dashboard.models.sequence_counter import DocumentType
from rps_dashboard.schemas.certificate import CertificateCreate, CertificateUpdate, CertificateResponse
from rps_dashboard.schemas.documents import to_document_record
from rps_dashboard.services.exceptions import ValidationError
from rps_dashboard.services.pdf_service import PDFService, RenderedDocument

router = APIRouter()


def pdf_response(document: RenderedDocument) -> Response:
    """Wraps a rendered document as a download"""
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.post("/", response_model=CertificateResponse, status_code=201)
def create_certificate(certificate: CertificateCreate, db: Session = Depends(get_db)):
    """
    Create a certificate

    The form normally sends the number it committed through
    /certificate-report. Without one, a number is issued here.
    """
    if certificate.company_id:
        validate_fk(db, Company, certificate.company_id, "Company")

    data = certificate.model_dump(exclude_none=True)

    if not certificate.certificate_no:
        data["certificate_no"] = allocate_or_fallback(db, DocumentType.CERTIFICATE).code

    return save_entity(db, Certificate(**data), "create certificate")


@router.get("/", response_model=List[CertificateResponse])
def list_certificates(db: Session = Depends(get_db)):
    """List certificates, newest first"""
    return db.query(Certificate).order_by(Certificate.created_at.desc()).all()


@router.get("/{certificate_id}", response_model=CertificateResponse)
def get_certificate(certificate_id: str, db: Session = Depends(get_db)):
    return get_by_id(db, Certificate, certificate_id, error_message="Certificate not found")


@router.put("/{certificate_id}", response_model=CertificateResponse)
def update_certificate(
    certificate_id: str,
    certificate_update: CertificateUpdate,
    db: Session = Depends(get_db)
):
    """Update a certificate (partial)"""
    certificate = get_by_id(db, Certificate, certificate_id, error_message="Certificate not found")

    if certificate_update.company_id:
        validate_fk(db, Company, certificate_update.company_id, "Company")

    calibrated = certificate_update.date_of_calibration or certificate.date_of_calibration
    due = certificate_update.calibration_due_date or certificate.calibration_due_date
    if due < calibrated:
        raise ValidationError(
            "calibration_due_date must not be before date_of_calibration",
            fields=["calibration_due_date"],
        )

    return update_entity(db, certificate, certificate_update)


@router.delete("/{certificate_id}", status_code=204)
def delete_certificate(certificate_id: str, db: Session = Depends(get_db)):
    certificate = get_by_id(db, Certificate, certificate_id, error_message="Certificate not found")
    delete_entity(db, certificate)
    return None


@router.get("/{certificate_id}/pdf", response_class=Response)
def download_certificate_pdf(
    certificate_id: str,
    db: Session = Depends(get_db),
    pdf: PDFService = Depends(get_pdf_service)
):
    """Render the certificate as a PDF download"""
    certificate = get_by_id(db, Certificate, certificate_id, error_message="Certificate not found")
    return pdf_response(pdf.render(to_document_record(certificate)))
