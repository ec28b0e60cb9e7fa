"""
System models

Every record table uses a text UUID primary key (UUIDPrimaryKeyMixin).
sequence_counters is keyed by document type instead.
"""

from rps_dashboard.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin
from rps_dashboard.models.company import Company, CompanyFlag
from rps_dashboard.models.contact_person import ContactPerson
from rps_dashboard.models.instrument_model import InstrumentModel
from rps_dashboard.models.engineer import Engineer, ServiceEngineer
from rps_dashboard.models.certificate import Certificate, CertificateStatus
from rps_dashboard.models.service_report import ServiceReport, ServiceStatus
from rps_dashboard.models.sequence_counter import SequenceCounter, DocumentType

__all__ = [
    "Base",
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",
    "Company",
    "CompanyFlag",
    "ContactPerson",
    "InstrumentModel",
    "Engineer",
    "ServiceEngineer",
    "Certificate",
    "CertificateStatus",
    "ServiceReport",
    "ServiceStatus",
    "SequenceCounter",
    "DocumentType",
]
