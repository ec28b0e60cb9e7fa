from rps_dashboard.database import SessionLocal
from rps_dashboard.services.email_service import EmailService, email_service
from rps_dashboard.services.pdf_service import PDFService, pdf_service


def get_db():
    """
    Dependency that yields a database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_pdf_service() -> PDFService:
    """PDF renderer shared by every request (it keeps no per-document state)"""
    return pdf_service


def get_email_service() -> EmailService:
    return email_service
