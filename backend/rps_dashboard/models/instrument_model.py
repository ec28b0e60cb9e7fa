from sqlalchemy import Column, String
from rps_dashboard.models.base import Base, UUIDPrimaryKeyMixin, TimestampMixin


class InstrumentModel(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Gas detector make/model with its measuring range, offered on the certificate form"""
    __tablename__ = "models"

    model_name = Column(String(200), nullable=False)
    range = Column(String(100), nullable=False)

    def __repr__(self):
        return f"<InstrumentModel {self.model_name} ({self.range})>"
