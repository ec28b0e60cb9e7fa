import io

import pytest
from pypdf import PdfReader

from conftest import make_certificate, make_company, make_contact, make_service
from rps_dashboard.api.deps import get_email_service
from rps_dashboard.main import app
from rps_dashboard.models.certificate import Certificate
from rps_dashboard.models.contact_person import ContactPerson


@pytest.fixture
def company(client):
    response = client.post("/api/v1/companies/", json=make_company())
    assert response.status_code == 201
    return response.json()


class TestCompanies:
    def test_create_and_get(self, client, company):
        assert company["company_name"] == "Acme Gases"
        assert company["flag"] == "Green"

        response = client.get(f"/api/v1/companies/{company['id']}")
        assert response.status_code == 200
        assert response.json()["gst_number"] == "27AAACA1234A1Z5"

    def test_empty_optional_fields_become_null(self, client):
        response = client.post("/api/v1/companies/", json=make_company(gstNumber="", website=""))
        assert response.status_code == 201
        assert response.json()["website"] is None

    def test_invalid_website_rejected(self, client):
        response = client.post("/api/v1/companies/", json=make_company(website="not a url"))
        assert response.status_code == 422

    def test_invalid_flag_rejected(self, client):
        response = client.post("/api/v1/companies/", json=make_company(flag="Blue"))
        assert response.status_code == 422

    def test_partial_update(self, client, company):
        response = client.put(f"/api/v1/companies/{company['id']}", json={"flag": "Red"})

        assert response.status_code == 200
        assert response.json()["flag"] == "Red"
        assert response.json()["company_name"] == "Acme Gases"

    def test_optional_fields_can_be_cleared(self, client, company):
        response = client.put(f"/api/v1/companies/{company['id']}", json={"website": None})

        assert response.status_code == 200
        assert response.json()["website"] is None

    def test_required_field_cannot_be_nulled(self, client, company):
        response = client.put(f"/api/v1/companies/{company['id']}", json={"companyName": None})
        assert response.status_code == 422

    def test_unknown_id(self, client):
        response = client.get("/api/v1/companies/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"detail": "Company not found"}

    def test_delete_removes_contacts_and_unlinks_certificates(self, client, company, db):
        contact = client.post("/api/v1/contact-persons/", json=make_contact(company["id"])).json()
        certificate = client.post(
            "/api/v1/certificates/", json=make_certificate(companyId=company["id"])
        ).json()

        response = client.delete(f"/api/v1/companies/{company['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/v1/companies/{company['id']}").status_code == 404
        assert db.get(ContactPerson, contact["id"]) is None
        kept = db.get(Certificate, certificate["id"])
        assert kept is not None
        assert kept.company_id is None
        assert kept.customer_name == "Acme Gases"


class TestContactPersons:
    def test_create(self, client, company):
        response = client.post("/api/v1/contact-persons/", json=make_contact(company["id"]))

        assert response.status_code == 201
        assert response.json()["email"] == "priya@acme.example.com"
        assert response.json()["company_name"] == "Acme Gases"

    def test_list_includes_company_name(self, client, company):
        client.post("/api/v1/contact-persons/", json=make_contact(company["id"]))

        response = client.get("/api/v1/contact-persons/")

        assert response.status_code == 200
        assert [c["company_name"] for c in response.json()] == ["Acme Gases"]

    def test_email_cannot_be_nulled(self, client, company):
        contact = client.post("/api/v1/contact-persons/", json=make_contact(company["id"])).json()

        response = client.put(f"/api/v1/contact-persons/{contact['id']}", json={"email": None})

        assert response.status_code == 422
        assert client.get(f"/api/v1/contact-persons/{contact['id']}").json()["email"] == "priya@acme.example.com"

    def test_duplicate_email_rejected(self, client, company):
        client.post("/api/v1/contact-persons/", json=make_contact(company["id"]))
        response = client.post(
            "/api/v1/contact-persons/", json=make_contact(company["id"], firstName="Rahul")
        )

        assert response.status_code == 422
        assert response.json() == {"detail": "email already registered", "fields": ["email"]}

    def test_update_to_taken_email_rejected(self, client, company):
        client.post("/api/v1/contact-persons/", json=make_contact(company["id"]))
        other = client.post(
            "/api/v1/contact-persons/", json=make_contact(company["id"], email="rahul@acme.example.com")
        ).json()

        response = client.put(
            f"/api/v1/contact-persons/{other['id']}", json={"email": "priya@acme.example.com"}
        )
        assert response.status_code == 422

    def test_keeping_own_email_on_update_is_allowed(self, client, company):
        contact = client.post("/api/v1/contact-persons/", json=make_contact(company["id"])).json()

        response = client.put(
            f"/api/v1/contact-persons/{contact['id']}",
            json={"email": "priya@acme.example.com", "designation": "Plant Head"},
        )
        assert response.status_code == 200
        assert response.json()["designation"] == "Plant Head"

    @pytest.mark.parametrize("overrides", [
        {"contactNo": "98765-43210"},
        {"email": "not-an-email"},
        {"firstName": ""},
    ])
    def test_invalid_fields_rejected(self, client, company, overrides):
        response = client.post("/api/v1/contact-persons/", json=make_contact(company["id"], **overrides))
        assert response.status_code == 422

    def test_unknown_company(self, client):
        response = client.post("/api/v1/contact-persons/", json=make_contact("missing-company"))
        assert response.status_code == 404

    def test_filter_by_company(self, client, company):
        other = client.post("/api/v1/companies/", json=make_company(companyName="Beta Labs")).json()
        client.post("/api/v1/contact-persons/", json=make_contact(company["id"]))
        client.post("/api/v1/contact-persons/", json=make_contact(other["id"], email="x@beta.example.com"))

        response = client.get("/api/v1/contact-persons/", params={"company_id": other["id"]})

        assert [c["email"] for c in response.json()] == ["x@beta.example.com"]


class TestLookupTables:
    def test_models_crud(self, client):
        created = client.post("/api/v1/models/", json={"modelName": "Drager X-am 2500", "range": "0-100 %LEL"})
        assert created.status_code == 201
        model_id = created.json()["id"]

        updated = client.put(f"/api/v1/models/{model_id}", json={"range": "0-5 %Vol"})
        assert updated.json()["range"] == "0-5 %Vol"
        assert updated.json()["model_name"] == "Drager X-am 2500"

        assert client.delete(f"/api/v1/models/{model_id}").status_code == 204
        assert client.get(f"/api/v1/models/{model_id}").status_code == 404

    @pytest.mark.parametrize("path", ["/api/v1/engineers/", "/api/v1/service-engineers/"])
    def test_engineers_crud(self, client, path):
        created = client.post(path, json={"name": "R. Kulkarni"}).json()

        assert client.get(path).json()[0]["name"] == "R. Kulkarni"
        renamed = client.put(f"{path}{created['id']}", json={"name": "R. S. Kulkarni"})
        assert renamed.json()["name"] == "R. S. Kulkarni"
        assert client.delete(f"{path}{created['id']}").status_code == 204

    def test_engineer_tables_are_separate(self, client):
        client.post("/api/v1/engineers/", json={"name": "R. Kulkarni"})
        assert client.get("/api/v1/service-engineers/").json() == []


class TestCertificates:
    def test_create_allocates_number_when_missing(self, client, year_window):
        response = client.post("/api/v1/certificates/", json=make_certificate())

        assert response.status_code == 201
        body = response.json()
        assert body["certificate_no"] == f"RPS/CER/{year_window}/0001"
        assert body["observations"][0]["gas"] == "10 %LEL Methane"

    def test_create_keeps_number_committed_by_the_form(self, client, year_window):
        number = client.post("/api/v1/certificate-report", json={"increment": True}).json()["certificateNumber"]

        response = client.post("/api/v1/certificates/", json=make_certificate(certificateNo=number))

        assert response.json()["certificate_no"] == number
        # Nothing else was consumed
        preview = client.post("/api/v1/certificate-report", json={"increment": False}).json()
        assert preview["certificateNumber"] == number

    @pytest.mark.parametrize("count,status", [(0, 422), (1, 201), (5, 201), (6, 422)])
    def test_observation_count_limits(self, client, count, status):
        response = client.post("/api/v1/certificates/", json=make_certificate(observations=count))
        assert response.status_code == status

    def test_due_date_before_calibration_rejected(self, client):
        response = client.post(
            "/api/v1/certificates/", json=make_certificate(calibrationDueDate="2025-01-01")
        )
        assert response.status_code == 422

    def test_update_checks_merged_dates(self, client):
        created = client.post("/api/v1/certificates/", json=make_certificate()).json()

        response = client.put(
            f"/api/v1/certificates/{created['id']}", json={"calibrationDueDate": "2025-05-01"}
        )

        assert response.status_code == 422
        assert response.json()["fields"] == ["calibration_due_date"]

    def test_update_observations(self, client):
        created = client.post("/api/v1/certificates/", json=make_certificate()).json()

        response = client.put(
            f"/api/v1/certificates/{created['id']}",
            json={"observations": [{"gas": "50 %LEL", "before": "48", "after": "50"}], "status": "Unchecked"},
        )

        assert response.status_code == 200
        assert response.json()["observations"] == [{"gas": "50 %LEL", "before": "48", "after": "50"}]
        assert response.json()["status"] == "Unchecked"

    @pytest.mark.parametrize("payload", [
        {"observations": None},
        {"customerName": None},
        {"dateOfCalibration": None},
    ])
    def test_null_for_required_field_rejected(self, client, payload):
        created = client.post("/api/v1/certificates/", json=make_certificate()).json()

        response = client.put(f"/api/v1/certificates/{created['id']}", json=payload)

        assert response.status_code == 422
        # The stored record is untouched and still lists and renders
        assert client.get("/api/v1/certificates/").status_code == 200
        assert client.get(f"/api/v1/certificates/{created['id']}").status_code == 200
        assert client.get(f"/api/v1/certificates/{created['id']}/pdf").status_code == 200

    def test_blank_company_means_no_company(self, client, company):
        created = client.post("/api/v1/certificates/", json=make_certificate(companyId=""))
        assert created.status_code == 201
        assert created.json()["company_id"] is None

        linked = client.put(
            f"/api/v1/certificates/{created.json()['id']}", json={"companyId": company["id"]}
        )
        assert linked.json()["company_id"] == company["id"]

        unlinked = client.put(f"/api/v1/certificates/{created.json()['id']}", json={"companyId": ""})
        assert unlinked.status_code == 200
        assert unlinked.json()["company_id"] is None

    def test_unknown_company_rejected(self, client):
        response = client.post("/api/v1/certificates/", json=make_certificate(companyId="missing"))
        assert response.status_code == 404

    def test_pdf_download(self, client, year_window):
        created = client.post("/api/v1/certificates/", json=make_certificate()).json()

        response = client.get(f"/api/v1/certificates/{created['id']}/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        expected = f"calibration-certificate-rps_cer_{year_window.replace('-', '_')}_0001-acme_gases.pdf"
        assert expected in response.headers["content-disposition"]
        text = PdfReader(io.BytesIO(response.content)).pages[0].extract_text()
        assert created["certificate_no"] in text

    def test_pdf_for_unknown_certificate(self, client):
        assert client.get("/api/v1/certificates/missing/pdf").status_code == 404

    def test_delete(self, client):
        created = client.post("/api/v1/certificates/", json=make_certificate()).json()

        assert client.delete(f"/api/v1/certificates/{created['id']}").status_code == 204
        assert client.get(f"/api/v1/certificates/{created['id']}").status_code == 404


class FakeMailer:
    def __init__(self, address="ops@rps.example.com", result=True):
        self.notification_address = address
        self.result = result
        self.sent = []

    def send_service_report(self, report_no, customer_name, filename, content):
        self.sent.append((report_no, customer_name, filename, content))
        return self.result


class TestServices:
    def test_create_accepts_form_field_names(self, client, year_window):
        response = client.post("/api/v1/services/", json=make_service(remarks=3))

        assert response.status_code == 201
        body = response.json()
        assert body["report_no"] == f"RPS/SER/{year_window}/0001"
        assert body["make_model_number_of_the_instrument_quantity"] == "Drager X-am 2500 x 3"
        assert body["serial_number_of_the_faulty_non_working_instruments"] == "ARFH-0044"
        assert len(body["engineer_remarks"]) == 3

    @pytest.mark.parametrize("count,status", [(0, 422), (10, 201), (11, 422)])
    def test_remark_count_limits(self, client, count, status):
        response = client.post("/api/v1/services/", json=make_service(remarks=count))
        assert response.status_code == status

    def test_contact_number_must_be_digits(self, client):
        response = client.post("/api/v1/services/", json=make_service(contactNumber="+91 98765"))
        assert response.status_code == 422

    def test_pdf_download(self, client):
        created = client.post("/api/v1/services/", json=make_service()).json()

        response = client.get(f"/api/v1/services/{created['id']}/pdf")

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")
        assert "service-acme_gases-rps_ser_" in response.headers["content-disposition"]

    def test_send_dispatches_rendered_report(self, client):
        mailer = FakeMailer()
        app.dependency_overrides[get_email_service] = lambda: mailer
        created = client.post("/api/v1/services/", json=make_service()).json()

        response = client.post(f"/api/v1/services/{created['id']}/send")

        assert response.status_code == 200
        assert response.json()["sent"] is True
        report_no, customer, filename, content = mailer.sent[0]
        assert report_no == created["report_no"]
        assert customer == "Acme Gases"
        assert filename == response.json()["filename"]
        assert content.startswith(b"%PDF")

    def test_send_failure_is_reported_not_raised(self, client):
        app.dependency_overrides[get_email_service] = lambda: FakeMailer(result=False)
        created = client.post("/api/v1/services/", json=make_service()).json()

        response = client.post(f"/api/v1/services/{created['id']}/send")

        assert response.status_code == 200
        assert response.json()["sent"] is False

    def test_send_without_mailbox(self, client):
        app.dependency_overrides[get_email_service] = lambda: FakeMailer(address="")
        created = client.post("/api/v1/services/", json=make_service()).json()

        response = client.post(f"/api/v1/services/{created['id']}/send")

        assert response.status_code == 400
        assert response.json() == {"detail": "Notification mailbox not configured"}

    def test_null_remarks_rejected(self, client):
        created = client.post("/api/v1/services/", json=make_service()).json()

        response = client.put(f"/api/v1/services/{created['id']}", json={"engineerRemarks": None})

        assert response.status_code == 422
        assert client.get("/api/v1/services/").status_code == 200
        assert client.get(f"/api/v1/services/{created['id']}/pdf").status_code == 200

    def test_update_and_delete(self, client):
        created = client.post("/api/v1/services/", json=make_service()).json()

        updated = client.put(f"/api/v1/services/{created['id']}", json={"status": "unchecked"})
        assert updated.json()["status"] == "unchecked"

        assert client.delete(f"/api/v1/services/{created['id']}").status_code == 204
        assert client.get("/api/v1/services/").json() == []
