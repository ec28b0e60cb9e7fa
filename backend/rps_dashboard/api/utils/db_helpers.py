"""
Database Helpers - utility functions for database operations
Shared by every record route
"""
from typing import Type, TypeVar, Optional, Any
from sqlalchemy.orm import Session

from rps_dashboard.services.exceptions import NotFoundError, ValidationError

T = TypeVar('T')


def get_by_id(
    db: Session,
    model: Type[T],
    entity_id: str,
    raise_not_found: bool = True,
    error_message: str = None
) -> Optional[T]:
    """
    Fetches an entity by ID.

    Args:
        db: Database session
        model: SQLAlchemy model class
        entity_id: Entity ID
        raise_not_found: If True, raises NotFoundError when missing
        error_message: Custom error message (optional)

    Returns:
        The entity, or None

    Raises:
        NotFoundError if raise_not_found=True and the entity does not exist

    Usage:
        certificate = get_by_id(db, Certificate, certificate_id)
    """
    entity = db.get(model, entity_id)

    if not entity and raise_not_found:
        msg = error_message or f"{model.__name__} not found"
        raise NotFoundError(msg)

    return entity


def validate_fk(
    db: Session,
    model: Type[T],
    fk_id: str,
    field_name: str = None
) -> T:
    """
    Validates that a foreign key points at an existing row.

    Args:
        db: Database session
        model: Model class of the FK
        fk_id: FK id to validate
        field_name: Name used in the error message (optional)

    Returns:
        The referenced entity

    Raises:
        NotFoundError if the FK does not exist

    Usage:
        company = validate_fk(db, Company, contact.company_id, "Company")
    """
    entity = db.get(model, fk_id)

    if not entity:
        name = field_name or model.__name__
        raise NotFoundError(f"{name} not found")

    return entity


def validate_unique(
    db: Session,
    model: Type[T],
    field_name: str,
    field_value: Any,
    exclude_id: str = None,
    display_name: str = None
) -> None:
    """
    Validates that a column value is not used by another row.

    Args:
        db: Database session
        model: Model class
        field_name: Column to check
        field_value: Value to check
        exclude_id: ID excluded from the check (for updates)
        display_name: Name used in the error message

    Raises:
        ValidationError if the value is already taken

    Usage:
        validate_unique(db, ContactPerson, "email", email)
        validate_unique(db, ContactPerson, "email", email, exclude_id=contact.id)
    """
    field = getattr(model, field_name)
    query = db.query(model).filter(field == field_value)

    if exclude_id:
        query = query.filter(model.id != exclude_id)

    if query.first():
        name = display_name or field_name
        raise ValidationError(f"{name} already registered", fields=[field_name])
