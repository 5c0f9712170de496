"""
Tests for the payment link issuers.
"""

import re
from unittest.mock import Mock

import pytest
import requests

from invoicing.config import Settings
from invoicing.domain.models.base import ExternalProviderError
from invoicing.infrastructure.payment_links import (
    HttpPaymentLinkIssuer, SimulatedPaymentLinkIssuer, create_payment_link_issuer, generate_short_code
)


LINK_PATTERN = re.compile(r"^https://pay\.globapay\.com/link/[A-HJ-NP-Z]{4}[2-9]{4}$")


class TestSimulatedPaymentLinkIssuer:

    def test_short_code_alphabet(self):
        for _ in range(50):
            assert re.fullmatch(r"[A-HJ-NP-Z]{4}[2-9]{4}", generate_short_code())

    @pytest.mark.asyncio
    async def test_create_link(self):
        issuer = SimulatedPaymentLinkIssuer()

        link = await issuer.create_link(12000, "EUR", "Invoice INV-000001")

        assert LINK_PATTERN.match(link.url)
        assert link.id == "plink_" + link.url.rsplit("/", 1)[1].lower()
        assert issuer.call_count == 1
        assert list(issuer.issued) == [(link, 12000, "EUR")]

    @pytest.mark.asyncio
    async def test_failure_strategy(self):
        issuer = SimulatedPaymentLinkIssuer(
            failure_strategy=lambda amount, currency, description: "declined" if amount > 100 else None
        )

        assert (await issuer.create_link(100, "EUR", "small")).url
        with pytest.raises(ExternalProviderError, match="declined"):
            await issuer.create_link(101, "EUR", "large")
        assert issuer.call_count == 2
        assert len(issuer.issued) == 1

    @pytest.mark.asyncio
    async def test_history_is_bounded(self):
        issuer = SimulatedPaymentLinkIssuer(history_size=2)

        for amount in (100, 200, 300):
            await issuer.create_link(amount, "EUR", "order")

        assert issuer.call_count == 3
        assert [amount for _, amount, _ in issuer.issued] == [200, 300]


class TestHttpPaymentLinkIssuer:

    def _issuer(self, response=None, error=None):
        session = Mock(spec=requests.Session)
        if error is not None:
            session.post.side_effect = error
        else:
            session.post.return_value = response
        return HttpPaymentLinkIssuer("https://payments.test/v1/", api_key="sk_test", timeout=3, session=session), session

    def _response(self, status_code=201, body=None):
        response = Mock()
        response.status_code = status_code
        response.ok = status_code < 400
        response.json.return_value = body
        return response

    @pytest.mark.asyncio
    async def test_successful_request(self):
        issuer, session = self._issuer(self._response(body={
            "data": {"id": "plink_1", "url": "https://pay.globapay.com/link/ABCD2345"}
        }))

        link = await issuer.create_link(5000, "EUR", "Invoice INV-000001")

        assert link.id == "plink_1"
        assert link.url == "https://pay.globapay.com/link/ABCD2345"
        session.post.assert_called_once_with(
            "https://payments.test/v1/payment-links",
            json={"amount": 5000, "currency": "EUR", "description": "Invoice INV-000001"},
            headers={"Content-Type": "application/json", "Authorization": "Bearer sk_test"},
            timeout=3,
        )

    @pytest.mark.asyncio
    async def test_error_status(self):
        issuer, _ = self._issuer(self._response(status_code=500))

        with pytest.raises(ExternalProviderError, match="unexpected status 500"):
            await issuer.create_link(5000, "EUR", "Invoice")

    @pytest.mark.asyncio
    async def test_timeout(self):
        issuer, _ = self._issuer(error=requests.Timeout("slow"))

        with pytest.raises(ExternalProviderError, match="timed out"):
            await issuer.create_link(5000, "EUR", "Invoice")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        issuer, _ = self._issuer(error=requests.ConnectionError("refused"))

        with pytest.raises(ExternalProviderError, match="request failed"):
            await issuer.create_link(5000, "EUR", "Invoice")

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        issuer, _ = self._issuer(self._response(body={"id": "plink_1"}))

        with pytest.raises(ExternalProviderError, match="malformed"):
            await issuer.create_link(5000, "EUR", "Invoice")


class TestIssuerFactory:

    def test_simulated_by_default(self):
        issuer = create_payment_link_issuer(Settings(_env_file=None, payment_link_base_url="https://pay.example.com/"))

        assert isinstance(issuer, SimulatedPaymentLinkIssuer)
        assert issuer.base_url == "https://pay.example.com"

    def test_http_provider(self):
        issuer = create_payment_link_issuer(Settings(
            _env_file=None,
            payment_link_provider="http",
            payment_link_api_url="https://payments.test",
            payment_link_timeout_seconds=2.5,
        ))

        assert isinstance(issuer, HttpPaymentLinkIssuer)
        assert issuer.timeout == 2.5

    def test_http_provider_requires_url(self):
        with pytest.raises(ValueError):
            create_payment_link_issuer(Settings(_env_file=None, payment_link_provider="http"))
