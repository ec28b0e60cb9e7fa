from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from rps_dashboard.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin


class ContactPerson(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    People to contact at a customer company
    Email is unique across all contacts
    """
    __tablename__ = "contact_persons"

    first_name = Column(String(100), nullable=False)
    contact_no = Column(String(20), nullable=False)
    email = Column(String(200), nullable=False, unique=True, index=True)
    designation = Column(String(100), nullable=False)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)

    company = relationship("Company", back_populates="contact_persons")

    @property
    def company_name(self):
        """Name of the company, listed next to the contact"""
        return self.company.company_name if self.company else None

    def __repr__(self):
        return f"<ContactPerson {self.first_name} <{self.email}>>"
