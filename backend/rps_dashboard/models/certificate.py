import enum

from sqlalchemy import Column, String, Text, Date, JSON, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from rps_dashboard.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin


class CertificateStatus(str, enum.Enum):
    CHECKED = "Checked"
    UNCHECKED = "Unchecked"


class Certificate(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Gas detector calibration certificates

    observations is stored as a JSON list of {"gas", "before", "after"}
    dicts, in the order they were entered.
    """
    __tablename__ = "certificates"

    certificate_no = Column(String(40), nullable=False, index=True)  # RPS/CER/25-26/0001
    customer_name = Column(String(200), nullable=False)
    site_location = Column(String(200), nullable=False)
    make_model = Column(String(200), nullable=False)
    range = Column(String(100), nullable=False)
    serial_no = Column(String(100), nullable=False)
    calibration_gas = Column(String(200), nullable=False)
    gas_canister_details = Column(Text, nullable=False)
    date_of_calibration = Column(Date, nullable=False)
    calibration_due_date = Column(Date, nullable=False)
    observations = Column(JSON, nullable=False, default=list)
    engineer_name = Column(String(200), nullable=False)
    status = Column(
        SQLEnum(CertificateStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
    )

    company_id = Column(String(36), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)
    company = relationship("Company", back_populates="certificates")

    def __repr__(self):
        return f"<Certificate {self.certificate_no}>"
