"""
Simulated payment link issuer.
Mints links locally without calling out; used in development and tests.
"""

import secrets
from collections import deque
from typing import Callable, Deque, Optional, Tuple

from invoicing.domain.models.base import ExternalProviderError
from invoicing.domain.services.payment_link_issuer import PaymentLink, PaymentLinkIssuer


# Ambiguous characters (I, O, 0, 1) are left out.
CODE_LETTERS = "ABCDEFGHJKLMNPQRSTUVWXYZ"
CODE_DIGITS = "23456789"


def generate_short_code() -> str:
    """Four letters followed by four digits, e.g. ``KQTW4827``."""
    letters = "".join(secrets.choice(CODE_LETTERS) for _ in range(4))
    digits = "".join(secrets.choice(CODE_DIGITS) for _ in range(4))
    return letters + digits


FailureStrategy = Callable[[int, str, str], Optional[str]]


class SimulatedPaymentLinkIssuer(PaymentLinkIssuer):
    """
    Issues ``{base_url}/link/{code}`` links.

    ``failure_strategy`` receives (amount, currency, description) and returns
    an error message to simulate a provider failure, or None to succeed.
    """

    def __init__(
        self,
        base_url: str = "https://pay.globapay.com",
        failure_strategy: Optional[FailureStrategy] = None,
        code_factory: Callable[[], str] = generate_short_code,
        history_size: int = 1000,
    ):
        self.base_url = base_url.rstrip("/")
        self.failure_strategy = failure_strategy
        self.code_factory = code_factory
        # Most recent links only, oldest first
        self.issued: Deque[Tuple[PaymentLink, int, str]] = deque(maxlen=history_size)
        self.call_count = 0

    async def create_link(self, amount: int, currency: str, description: str) -> PaymentLink:
        self.call_count += 1
        if self.failure_strategy is not None:
            error = self.failure_strategy(amount, currency, description)
            if error:
                raise ExternalProviderError("simulated payments", error)

        code = self.code_factory()
        link = PaymentLink(id=f"plink_{code.lower()}", url=f"{self.base_url}/link/{code}")
        self.issued.append((link, amount, currency))
        return link
