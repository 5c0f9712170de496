"""
HTTP tests for the invoice and catalog routers.
"""

import pytest
from fastapi.testclient import TestClient

from invoicing.config import Settings
from invoicing.infrastructure.payment_links import SimulatedPaymentLinkIssuer
from invoicing.main import create_application


API = "/api/v1"


@pytest.fixture
def issuer():
    return SimulatedPaymentLinkIssuer(code_factory=lambda: "KQTW4827")


@pytest.fixture
def client(issuer):
    settings = Settings(_env_file=None, environment="testing", storage_backend="memory")
    with TestClient(create_application(settings, payment_link_issuer=issuer)) as test_client:
        yield test_client


def create_invoice(client, **overrides):
    payload = {
        "merchant_id": "m_1",
        "currency": "EUR",
        "items": [
            {"description": "Consulting", "quantity": 2, "unit_amount": 5000, "tax_rate_id": "vat",
             "discount_id": "ten"},
            {"description": "Setup", "quantity": 1, "unit_amount": 1000},
        ],
    }
    payload.update(overrides)
    response = client.post(f"{API}/invoices", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def setup_catalog(client):
    assert client.post(f"{API}/catalog/m_1/tax-rates", json={"id": "vat", "rate": "20"}).status_code == 201
    assert client.post(
        f"{API}/catalog/m_1/discounts", json={"id": "ten", "kind": "percentage", "value": "10"}
    ).status_code == 201


class TestHealth:

    def test_health(self, client):
        response = client.get(f"{API}/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["dependencies"] == {"storage": "memory", "payment_links": "simulated"}

    def test_root(self, client):
        assert client.get("/").json()["health"] == f"{API}/health"

    def test_unknown_path_is_problem(self, client):
        response = client.get(f"{API}/nothing-here")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["type"] == "https://httpstatuses.com/404"
        assert set(response.json()) == {"type", "title", "status", "detail"}


class TestCatalogApi:

    def test_catalog_flow(self, client):
        setup_catalog(client)

        rates = client.get(f"{API}/catalog/m_1/tax-rates").json()
        discounts = client.get(f"{API}/catalog/m_1/discounts").json()

        assert [rate["id"] for rate in rates] == ["vat"]
        assert rates[0]["inclusive"] is False
        assert discounts[0]["kind"] == "percentage"
        assert client.get(f"{API}/catalog/m_2/tax-rates").json() == []

    def test_invalid_tax_rate(self, client):
        response = client.post(f"{API}/catalog/m_1/tax-rates", json={"id": "vat", "rate": "150"})

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_tax_rate_precision_limited(self, client):
        response = client.post(f"{API}/catalog/m_1/tax-rates", json={"id": "vat", "rate": "7.12345"})

        assert response.status_code == 422
        assert response.json()["field"] == "rate"
        assert client.get(f"{API}/catalog/m_1/tax-rates").json() == []


class TestInvoiceApi:

    def test_create_computes_totals(self, client):
        setup_catalog(client)

        invoice = create_invoice(client)

        assert invoice["status"] == "draft"
        assert invoice["number"] == "INV-000001"
        assert invoice["subtotal"] == 11000
        assert invoice["discount_total"] == 1000
        assert invoice["tax_total"] == 1800
        assert invoice["total"] == 11800
        assert invoice["amount_due"] == 11800
        assert [item["amount"] for item in invoice["items"]] == [10000, 1000]
        assert invoice["payment_link_url"] is None

    def test_get_invoice(self, client):
        created = create_invoice(client)

        response = client.get(f"{API}/invoices/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_unknown_invoice(self, client):
        response = client.get(f"{API}/invoices/inv_missing")

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "ENTITY_NOT_FOUND"
        assert body["title"] == "Not Found"
        assert set(body) == {"type", "title", "status", "detail", "code"}

    def test_zero_quantity_rejected(self, client):
        response = client.post(f"{API}/invoices", json={
            "merchant_id": "m_1",
            "items": [{"description": "Consulting", "quantity": 0, "unit_amount": 5000}],
        })

        assert response.status_code == 422
        body = response.json()
        assert body["status"] == 422
        assert "quantity" in body["field"]

    def test_invalid_currency(self, client):
        response = client.post(f"{API}/invoices", json={"merchant_id": "m_1", "currency": "12$"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_open_and_pay(self, client, issuer):
        setup_catalog(client)
        created = create_invoice(client)

        opened = client.post(f"{API}/invoices/{created['id']}/open")
        assert opened.status_code == 200
        assert opened.json()["status"] == "open"
        assert opened.json()["payment_link_url"] == "https://pay.globapay.com/link/KQTW4827"
        assert issuer.issued[0][1:] == (11800, "EUR")

        paid = client.post(f"{API}/invoices/{created['id']}/mark-paid")
        assert paid.json()["status"] == "paid"
        assert paid.json()["total"] == 11800
        assert paid.json()["amount_due"] == 0

    def test_edit_after_open_conflicts(self, client):
        created = create_invoice(client)
        client.post(f"{API}/invoices/{created['id']}/open")

        response = client.patch(f"{API}/invoices/{created['id']}", json={"memo": "too late"})

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "ILLEGAL_TRANSITION"
        assert body["type"] == "https://httpstatuses.com/409"
        assert client.get(f"{API}/invoices/{created['id']}").json()["memo"] is None

    def test_edit_draft(self, client):
        created = create_invoice(client)

        response = client.patch(f"{API}/invoices/{created['id']}", json={
            "items": [{"description": "Consulting", "quantity": 3, "unit_amount": 5000}],
        })

        assert response.status_code == 200
        assert response.json()["total"] == 15000
        assert response.json()["version"] == 2

    def test_stale_version_conflicts(self, client):
        created = create_invoice(client)

        response = client.post(f"{API}/invoices/{created['id']}/void", params={"expected_version": 5})

        assert response.status_code == 409
        assert response.json()["code"] == "CONCURRENCY_CONFLICT"

    def test_provider_failure_keeps_draft(self, client, issuer):
        created = create_invoice(client)
        issuer.failure_strategy = lambda amount, currency, description: "service unavailable"

        response = client.post(f"{API}/invoices/{created['id']}/open")

        assert response.status_code == 502
        assert response.json()["code"] == "EXTERNAL_PROVIDER_ERROR"
        stored = client.get(f"{API}/invoices/{created['id']}").json()
        assert stored["status"] == "draft"
        assert stored["payment_link_id"] is None

    def test_illegal_transition_from_draft(self, client):
        created = create_invoice(client)

        response = client.post(f"{API}/invoices/{created['id']}/mark-uncollectible")

        assert response.status_code == 409

    def test_recalculate_picks_up_catalog(self, client):
        created = create_invoice(client)
        assert created["total"] == 11000
        setup_catalog(client)

        response = client.post(f"{API}/invoices/{created['id']}/recalculate")

        assert response.status_code == 200
        body = response.json()
        assert body["persisted"] is True
        assert body["totals"]["total"] == 11800
        assert body["invoice"]["total"] == 11800

    def test_list_filters_by_status(self, client):
        first = create_invoice(client)
        create_invoice(client)
        create_invoice(client, merchant_id="m_2")
        client.post(f"{API}/invoices/{first['id']}/void")

        response = client.get(f"{API}/invoices", params={"merchant_id": "m_1", "status": "void"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert [invoice["id"] for invoice in body["items"]] == [first["id"]]

        everything = client.get(f"{API}/invoices", params={"merchant_id": "m_1", "limit": 1}).json()
        assert everything["total"] == 2
        assert everything["has_more"] is True

    def test_list_search(self, client):
        acme = create_invoice(client, customer_id="cus_acme")
        create_invoice(client, memo="Quarterly retainer")
        create_invoice(client, merchant_id="m_2", customer_id="cus_acme")

        response = client.get(f"{API}/invoices", params={"merchant_id": "m_1", "search": "Acme"})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert [invoice["id"] for invoice in body["items"]] == [acme["id"]]
        retainer = client.get(f"{API}/invoices", params={"merchant_id": "m_1", "search": "RETAINER"}).json()
        assert retainer["items"][0]["memo"] == "Quarterly retainer"

    def test_duplicate_number_conflicts(self, client):
        create_invoice(client, number="2024-001")

        response = client.post(f"{API}/invoices", json={"merchant_id": "m_1", "number": "2024-001"})

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_ENTITY"
        assert client.get(f"{API}/invoices", params={"merchant_id": "m_1"}).json()["total"] == 1
