"""
Instrument model routes (make/model + range offered on the certificate form)
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rps_dashboard.api.deps import get_db
from rps_dashboard.api.utils import get_by_id, save_entity, update_entity, delete_entity
from rps_dashboard.models.instrument_model import InstrumentModel
from rps_dashboard.schemas.instrument_model import (
    InstrumentModelCreate,
    InstrumentModelUpdate,
    InstrumentModelResponse,
)

router = APIRouter()


@router.post("/", response_model=InstrumentModelResponse, status_code=201)
def create_model(model: InstrumentModelCreate, db: Session = Depends(get_db)):
    return save_entity(db, InstrumentModel(**model.model_dump()), "create instrument model")


@router.get("/", response_model=List[InstrumentModelResponse])
def list_models(db: Session = Depends(get_db)):
    return db.query(InstrumentModel).order_by(InstrumentModel.model_name).all()


@router.get("/{model_id}", response_model=InstrumentModelResponse)
def get_model(model_id: str, db: Session = Depends(get_db)):
    return get_by_id(db, InstrumentModel, model_id, error_message="Model not found")


@router.put("/{model_id}", response_model=InstrumentModelResponse)
def update_model(model_id: str, model_update: InstrumentModelUpdate, db: Session = Depends(get_db)):
    model = get_by_id(db, InstrumentModel, model_id, error_message="Model not found")
    return update_entity(db, model, model_update)


@router.delete("/{model_id}", status_code=204)
def delete_model(model_id: str, db: Session = Depends(get_db)):
    model = get_by_id(db, InstrumentModel, model_id, error_message="Model not found")
    delete_entity(db, model)
    return None
