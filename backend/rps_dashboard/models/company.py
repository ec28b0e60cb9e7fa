import enum

from sqlalchemy import Column, String, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from rps_dashboard.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin


class CompanyFlag(str, enum.Enum):
    """Relationship health marker shown on the company list"""
    RED = "Red"
    YELLOW = "Yellow"
    GREEN = "Green"


class Company(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Customer companies

    Contact persons belong to a company and are removed with it.
    Certificates keep their own copy of the customer name and only lose the link.
    """
    __tablename__ = "companies"

    company_name = Column(String(200), nullable=False, index=True)
    address = Column(Text, nullable=False)
    industries = Column(String(200), nullable=False)
    industries_type = Column(String(200), nullable=False)
    gst_number = Column(String(20), nullable=True)
    website = Column(String(200), nullable=True)
    flag = Column(
        SQLEnum(CompanyFlag, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
    )

    # Relationships
    contact_persons = relationship(
        "ContactPerson",
        back_populates="company",
        cascade="all, delete-orphan",
    )
    certificates = relationship("Certificate", back_populates="company")

    def __repr__(self):
        return f"<Company {self.company_name}>"
