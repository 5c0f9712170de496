"""
Payment link issuer backed by the payments HTTP API.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from invoicing.domain.models.base import ExternalProviderError
from invoicing.domain.services.payment_link_issuer import PaymentLink, PaymentLinkIssuer


logger = logging.getLogger(__name__)

PROVIDER_NAME = "payments api"


class HttpPaymentLinkIssuer(PaymentLinkIssuer):
    """
    Creates payment links with ``POST {api_url}/payment-links``.

    The API answers ``{"data": {"id": ..., "url": ...}}``. Any transport
    error, non-2xx status or malformed body is raised as ExternalProviderError.
    The blocking request runs in a worker thread.
    """

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    async def create_link(self, amount: int, currency: str, description: str) -> PaymentLink:
        payload = {
            "amount": amount,
            "currency": currency,
            "description": description,
        }
        return await asyncio.to_thread(self._post, payload)

    def _post(self, payload: Dict[str, Any]) -> PaymentLink:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = self.session.post(
                f"{self.api_url}/payment-links",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise ExternalProviderError(PROVIDER_NAME, "request timed out") from e
        except requests.RequestException as e:
            raise ExternalProviderError(PROVIDER_NAME, f"request failed: {str(e)}") from e

        if not response.ok:
            logger.warning(f"Payment link creation rejected with status {response.status_code}")
            raise ExternalProviderError(PROVIDER_NAME, f"unexpected status {response.status_code}")

        try:
            data = response.json()["data"]
            return PaymentLink(id=str(data["id"]), url=str(data["url"]))
        except (ValueError, KeyError, TypeError) as e:
            raise ExternalProviderError(PROVIDER_NAME, "malformed response body") from e
