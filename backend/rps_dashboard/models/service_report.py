import enum

from sqlalchemy import Column, String, Text, Date, JSON, Enum as SQLEnum
from rps_dashboard.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin


class ServiceStatus(str, enum.Enum):
    CHECKED = "checked"
    UNCHECKED = "unchecked"


class ServiceReport(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Service / calibration / installation job reports

    engineer_remarks is a JSON list of spare-part lines:
    {"service_spares", "part_no", "rate", "quantity", "total", "po_no"}.
    total is whatever the form computed, it is stored and printed as is.
    """
    __tablename__ = "services"

    report_no = Column(String(40), nullable=False, index=True)  # RPS/SER/25-26/0001
    customer_name = Column(String(200), nullable=False)
    customer_location = Column(String(200), nullable=False)
    contact_person = Column(String(200), nullable=False)
    contact_number = Column(String(20), nullable=False)
    service_engineer = Column(String(200), nullable=False)
    date = Column(Date, nullable=False)
    place = Column(String(200), nullable=False)
    place_options = Column(String(50), nullable=False)
    nature_of_job = Column(String(200), nullable=False)
    make_model_number_of_the_instrument_quantity = Column(Text, nullable=False)
    serial_number_of_the_instrument_calibrated_ok = Column(Text, nullable=False)
    serial_number_of_the_faulty_non_working_instruments = Column(Text, nullable=False)
    engineer_report = Column(Text, nullable=False)
    customer_report = Column(Text, nullable=False, default="")
    engineer_remarks = Column(JSON, nullable=False, default=list)
    engineer_name = Column(String(200), nullable=False)
    status = Column(
        SQLEnum(ServiceStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=ServiceStatus.CHECKED,
    )

    def __repr__(self):
        return f"<ServiceReport {self.report_no}>"
