import pytest
from sqlalchemy.orm import Session

from rps_dashboard.api.deps import get_db
from rps_dashboard.database import build_engine
from rps_dashboard.main import app


def test_certificate_preview_on_empty_store(client, year_window):
    response = client.post("/api/v1/certificate-report", json={"increment": False})

    assert response.status_code == 200
    assert response.json() == {"certificateNumber": f"RPS/CER/{year_window}/0001"}


def test_certificate_commit_then_preview(client, year_window):
    first = client.post("/api/v1/certificate-report", json={"increment": True}).json()
    second = client.post("/api/v1/certificate-report", json={"increment": True}).json()
    preview = client.post("/api/v1/certificate-report", json={"increment": False}).json()

    assert first["certificateNumber"] == f"RPS/CER/{year_window}/0001"
    assert second["certificateNumber"] == f"RPS/CER/{year_window}/0002"
    # Preview shows the last issued number
    assert preview["certificateNumber"] == f"RPS/CER/{year_window}/0002"


def test_missing_body_commits(client, year_window):
    client.post("/api/v1/service-report")
    response = client.post("/api/v1/service-report")

    assert response.status_code == 200
    assert response.json() == {"serviceReportNo": f"RPS/SER/{year_window}/0002"}


def test_service_and_certificate_counters_are_separate(client, year_window):
    client.post("/api/v1/certificate-report", json={"increment": True})
    client.post("/api/v1/certificate-report", json={"increment": True})

    response = client.post("/api/v1/service-report", json={"increment": True})

    assert response.json()["serviceReportNo"] == f"RPS/SER/{year_window}/0001"


@pytest.fixture
def broken_client(client, tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")

    def broken_db():
        session = Session(bind=engine)
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = broken_db
    yield client
    engine.dispose()


@pytest.mark.parametrize("path", ["/api/v1/certificate-report", "/api/v1/service-report"])
@pytest.mark.parametrize("increment", [True, False])
def test_store_failure_returns_500_with_error(broken_client, path, increment):
    response = broken_client.post(path, json={"increment": increment})

    assert response.status_code == 500
    body = response.json()
    assert set(body) == {"error"}
    assert body["error"]


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
