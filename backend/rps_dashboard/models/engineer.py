from sqlalchemy import Column, String
from rps_dashboard.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin


class Engineer(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Calibration engineers who sign certificates"""
    __tablename__ = "engineers"

    name = Column(String(200), nullable=False)

    def __repr__(self):
        return f"<Engineer {self.name}>"


class ServiceEngineer(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Field engineers who carry out service jobs"""
    __tablename__ = "service_engineers"

    name = Column(String(200), nullable=False)

    def __repr__(self):
        return f"<ServiceEngineer {self.name}>"
