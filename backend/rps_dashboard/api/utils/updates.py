"""
Update Helpers - persisting and updating entities
"""
from typing import TypeVar, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pydantic import BaseModel
import structlog

from rps_dashboard.services.exceptions import StorageError

T = TypeVar('T')

logger = structlog.get_logger(__name__)


def commit_or_raise(db: Session, action: str) -> None:
    """
    Commits the session, turning database failures into StorageError.

    Args:
        db: Database session
        action: Short description used in the log and the error message
    """
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Record store failure", action=action, error=str(exc))
        raise StorageError(f"Could not {action}") from exc


def save_entity(db: Session, entity: T, action: str = "save record") -> T:
    """
    Adds a new entity and commits.

    Usage:
        company = save_entity(db, Company(**payload.model_dump()), "create company")
    """
    db.add(entity)
    commit_or_raise(db, action)
    db.refresh(entity)
    return entity


def update_entity(
    db: Session,
    entity: T,
    update_data: BaseModel,
    exclude_fields: List[str] = None,
    commit: bool = True
) -> T:
    """
    Updates an entity with the fields set on a Pydantic schema.

    Args:
        db: Database session
        entity: Entity to update
        update_data: Pydantic schema with the changes (unset fields are ignored)
        exclude_fields: Fields to skip
        commit: Whether to commit right away

    Returns:
        The updated entity

    Usage:
        company = update_entity(db, company, company_update)
        certificate = update_entity(db, certificate, data, exclude_fields=["certificate_no"])
    """
    data = update_data.model_dump(exclude_unset=True)

    if exclude_fields:
        data = {k: v for k, v in data.items() if k not in exclude_fields}

    for field, value in data.items():
        if hasattr(entity, field):
            setattr(entity, field, value)

    if commit:
        commit_or_raise(db, f"update {entity.__class__.__name__}")
        db.refresh(entity)

    return entity


def delete_entity(db: Session, entity: T) -> None:
    """Deletes an entity and commits."""
    db.delete(entity)
    commit_or_raise(db, f"delete {entity.__class__.__name__}")
