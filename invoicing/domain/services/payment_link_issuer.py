"""
Payment link issuer interface.
Opening an invoice requests a hosted payment link for its total.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentLink:
    """A payment link issued by the payments provider."""

    id: str
    url: str


class PaymentLinkIssuer(ABC):
    """
    Payment link service interface.
    Implementations raise ExternalProviderError on transport or provider failure.
    """

    @abstractmethod
    async def create_link(self, amount: int, currency: str, description: str) -> PaymentLink:
        """
        Create a payment link for amount (minor units) in currency.
        """
        pass
