"""
Numeric sequence control for issued documents
Guarantees that numbers never restart, even if records are deleted
"""
import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Enum as SQLEnum
from rps_dashboard.models.base import Base


class DocumentType(str, enum.Enum):
    """Document types that receive a sequential code"""
    CERTIFICATE = "certificate"
    SERVICE = "service"


class SequenceCounter(Base):
    """
    Stores the last ordinal issued for each document type.
    This table must NEVER be cleaned up: one row per type, created lazily by
    the first committing allocation and only ever incremented afterwards.
    """
    __tablename__ = "sequence_counters"

    document_type = Column(
        SQLEnum(DocumentType, values_callable=lambda e: [m.value for m in e], native_enum=False),
        primary_key=True,
    )
    last_number = Column(Integer, nullable=False, default=0)
    last_issued_code = Column(String(40), nullable=True)  # Cached formatted code, for auditing
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<SequenceCounter {self.document_type.value}={self.last_number}>"
