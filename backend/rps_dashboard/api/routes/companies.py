"""
Company routes
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rps_dashboard.api.deps import get_db
from rps_dashboard.api.utils import get_by_id, save_entity, update_entity, delete_entity
from rps_dashboard.models.company import Company
from rps_dashboard.schemas.company import CompanyCreate, CompanyUpdate, CompanyResponse

router = APIRouter()


@router.post("/", response_model=CompanyResponse, status_code=201)
def create_company(company: CompanyCreate, db: Session = Depends(get_db)):
    """Create a company"""
    return save_entity(db, Company(**company.model_dump()), "create company")


@router.get("/", response_model=List[CompanyResponse])
def list_companies(db: Session = Depends(get_db)):
    """List all companies, by name"""
    return db.query(Company).order_by(Company.company_name).all()


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(company_id: str, db: Session = Depends(get_db)):
    return get_by_id(db, Company, company_id, error_message="Company not found")


@router.put("/{company_id}", response_model=CompanyResponse)
def update_company(company_id: str, company_update: CompanyUpdate, db: Session = Depends(get_db)):
    """Update a company (partial)"""
    company = get_by_id(db, Company, company_id, error_message="Company not found")
    return update_entity(db, company, company_update)


@router.delete("/{company_id}", status_code=204)
def delete_company(company_id: str, db: Session = Depends(get_db)):
    """Delete a company together with its contact persons; certificates keep their data"""
    company = get_by_id(db, Company, company_id, error_message="Company not found")
    delete_entity(db, company)
    return None
