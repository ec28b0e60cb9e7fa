import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from rps_dashboard.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class UUIDPrimaryKeyMixin:
    """
    Text UUID primary key shared by every record table
    Ids are generated server side unless the client sends one
    """
    id = Column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    """
    Audit timestamps
    Every table gets created_at and updated_at
    """
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


# Base is defined in database.py
# Re-exported here so models only import from this module
__all__ = ['Base', 'UUIDPrimaryKeyMixin', 'TimestampMixin', 'new_id']
