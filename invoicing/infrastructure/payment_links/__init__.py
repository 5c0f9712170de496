"""
Payment link issuer implementations.
"""

from invoicing.config import Settings
from invoicing.domain.services.payment_link_issuer import PaymentLinkIssuer

from .http_issuer import HttpPaymentLinkIssuer
from .simulated_issuer import SimulatedPaymentLinkIssuer, generate_short_code


def create_payment_link_issuer(settings: Settings) -> PaymentLinkIssuer:
    """Build the issuer selected by ``payment_link_provider``."""
    if settings.payment_link_provider == "http":
        if not settings.payment_link_api_url:
            raise ValueError("INVOICING_PAYMENT_LINK_API_URL is required for the http provider")
        return HttpPaymentLinkIssuer(
            api_url=settings.payment_link_api_url,
            api_key=settings.payment_link_api_key,
            timeout=settings.payment_link_timeout_seconds,
        )
    return SimulatedPaymentLinkIssuer(base_url=settings.payment_link_base_url)


__all__ = [
    "HttpPaymentLinkIssuer",
    "SimulatedPaymentLinkIssuer",
    "generate_short_code",
    "create_payment_link_issuer",
]
