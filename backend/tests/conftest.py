"""
Shared fixtures: a throwaway SQLite file database per test, a TestClient
wired to it, and payload factories matching what the web forms send.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import rps_dashboard.models  # noqa: F401  (registers every table)
from rps_dashboard.api.deps import get_db
from rps_dashboard.database import Base, build_engine
from rps_dashboard.main import app


@pytest.fixture
def engine(tmp_path):
    # File database so concurrent sessions really contend for the lock
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def year_window():
    year = date.today().year
    return f"{year % 100:02d}-{(year + 1) % 100:02d}"


def make_company(**overrides):
    payload = {
        "companyName": "Acme Gases",
        "address": "Plot 7, MIDC, Pune",
        "industries": "Chemicals",
        "industriesType": "Manufacturing",
        "gstNumber": "27AAACA1234A1Z5",
        "website": "https://acme.example.com",
        "flag": "Green",
    }
    payload.update(overrides)
    return payload


def make_contact(company_id, **overrides):
    payload = {
        "firstName": "Priya",
        "contactNo": "9876543210",
        "email": "priya@acme.example.com",
        "designation": "Safety Officer",
        "companyId": company_id,
    }
    payload.update(overrides)
    return payload


def make_observation(index=1):
    return {"gas": f"{index * 10} %LEL Methane", "before": f"{index * 10 - 1}", "after": f"{index * 10}"}


def make_certificate(observations=1, **overrides):
    payload = {
        "customerName": "Acme Gases",
        "siteLocation": "Pune Plant 2",
        "makeModel": "Drager X-am 2500",
        "range": "0-100 %LEL",
        "serialNo": "ARFH-0042",
        "calibrationGas": "Methane 2.5% Vol",
        "gasCanisterDetails": "Lot 2231, expires 2026-12",
        "dateOfCalibration": "2025-06-01",
        "calibrationDueDate": "2026-06-01",
        "observations": [make_observation(i) for i in range(1, observations + 1)],
        "engineerName": "R. Kulkarni",
        "status": "Checked",
    }
    payload.update(overrides)
    return payload


def make_remark(index=1):
    return {
        "serviceSpares": f"Sensor replacement {index}",
        "partNo": f"P-{index:03d}",
        "rate": "1500",
        "quantity": "2",
        "total": "3000",
        "poNo": f"PO-{index}",
    }


def make_service(remarks=1, **overrides):
    payload = {
        "customerName": "Acme Gases",
        "customerLocation": "Pune",
        "contactPerson": "Priya",
        "contactNumber": "9876543210",
        "serviceEngineer": "S. Patil",
        "date": "2025-06-02",
        "place": "Pune Plant 2",
        "placeOptions": "At Site",
        "natureOfJob": "AMC",
        "makeModelNumberoftheInstrumentQuantity": "Drager X-am 2500 x 3",
        "serialNumberoftheInstrumentCalibratedOK": "ARFH-0042, ARFH-0043",
        "serialNumberoftheFaultyNonWorkingInstruments": "ARFH-0044",
        "engineerReport": "Calibrated three detectors; one sensor replaced.",
        "customerReport": "Satisfied with the service.",
        "engineerRemarks": [make_remark(i) for i in range(1, remarks + 1)],
        "engineerName": "S. Patil",
        "status": "checked",
    }
    payload.update(overrides)
    return payload
