"""
Contact person routes
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from rps_dashboard.api.deps import get_db
from rps_dashboard.api.utils import get_by_id, validate_fk, validate_unique, save_entity, update_entity, delete_entity
from rps_dashboard.models.company import Company
from rps_dashboard.models.contact_person import ContactPerson
from rps_dashboard.schemas.contact_person import (
    ContactPersonCreate,
    ContactPersonUpdate,
    ContactPersonResponse,
)

router = APIRouter()


@router.post("/", response_model=ContactPersonResponse, status_code=201)
def create_contact_person(contact: ContactPersonCreate, db: Session = Depends(get_db)):
    """Create a contact person (email must be unused)"""
    validate_fk(db, Company, contact.company_id, "Company")
    validate_unique(db, ContactPerson, "email", contact.email)
    return save_entity(db, ContactPerson(**contact.model_dump()), "create contact person")


@router.get("/", response_model=List[ContactPersonResponse])
def list_contact_persons(
    company_id: Optional[str] = Query(None, description="Only contacts of this company"),
    db: Session = Depends(get_db)
):
    """List contact persons with their company name, optionally for one company"""
    query = db.query(ContactPerson).options(joinedload(ContactPerson.company))
    if company_id:
        query = query.filter(ContactPerson.company_id == company_id)
    return query.order_by(ContactPerson.first_name).all()


@router.get("/{contact_id}", response_model=ContactPersonResponse)
def get_contact_person(contact_id: str, db: Session = Depends(get_db)):
    return get_by_id(db, ContactPerson, contact_id, error_message="Contact person not found")


@router.put("/{contact_id}", response_model=ContactPersonResponse)
def update_contact_person(
    contact_id: str,
    contact_update: ContactPersonUpdate,
    db: Session = Depends(get_db)
):
    """Update a contact person (partial)"""
    contact = get_by_id(db, ContactPerson, contact_id, error_message="Contact person not found")

    if contact_update.company_id is not None:
        validate_fk(db, Company, contact_update.company_id, "Company")
    if contact_update.email is not None:
        validate_unique(db, ContactPerson, "email", contact_update.email,
                        exclude_id=contact.id)

    return update_entity(db, contact, contact_update)


@router.delete("/{contact_id}", status_code=204)
def delete_contact_person(contact_id: str, db: Session = Depends(get_db)):
    contact = get_by_id(db, ContactPerson, contact_id, error_message="Contact person not found")
    delete_entity(db, contact)
    return None
