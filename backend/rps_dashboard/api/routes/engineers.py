"""
Engineer routes

Calibration engineers (/engineers) and service engineers
(/service-engineers) are separate tables with the same shape, so both
routers come from build_engineer_router.
"""
from typing import List, Type, Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rps_dashboard.api.deps import get_db
from rps_dashboard.api.utils import get_by_id, save_entity, update_entity, delete_entity
from rps_dashboard.models.engineer import Engineer, ServiceEngineer
from rps_dashboard.schemas.engineer import EngineerCreate, EngineerUpdate, EngineerResponse


def build_engineer_router(model: Type[Union[Engineer, ServiceEngineer]], label: str) -> APIRouter:
    router = APIRouter()
    not_found = f"{label} not found"

    @router.post("/", response_model=EngineerResponse, status_code=201)
    def create_engineer(engineer: EngineerCreate, db: Session = Depends(get_db)):
        return save_entity(db, model(**engineer.model_dump()), f"create {label.lower()}")

    @router.get("/", response_model=List[EngineerResponse])
    def list_engineers(db: Session = Depends(get_db)):
        return db.query(model).order_by(model.name).all()

    @router.get("/{engineer_id}", response_model=EngineerResponse)
    def get_engineer(engineer_id: str, db: Session = Depends(get_db)):
        return get_by_id(db, model, engineer_id, error_message=not_found)

    @router.put("/{engineer_id}", response_model=EngineerResponse)
    def update_engineer(engineer_id: str, engineer_update: EngineerUpdate, db: Session = Depends(get_db)):
        engineer = get_by_id(db, model, engineer_id, error_message=not_found)
        return update_entity(db, engineer, engineer_update)

    @router.delete("/{engineer_id}", status_code=204)
    def delete_engineer(engineer_id: str, db: Session = Depends(get_db)):
        engineer = get_by_id(db, model, engineer_id, error_message=not_found)
        delete_entity(db, engineer)
        return None

    return router


router = build_engineer_router(Engineer, "Engineer")
service_engineers_router = build_engineer_router(ServiceEngineer, "Service engineer")
