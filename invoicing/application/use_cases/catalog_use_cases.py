"""
Catalog use cases for tax rates and discounts.
"""

import logging
from dataclasses import dataclass
from typing import List

from invoicing.application.dto.catalog_dto import (
    TaxRateRequestDTO, TaxRateResponseDTO, DiscountRequestDTO, DiscountResponseDTO
)
from invoicing.application.use_cases.base_use_case import CommandUseCase, QueryUseCase
from invoicing.domain.models.base import ValidationError
from invoicing.domain.repositories.catalog_repository import CatalogRepository


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveTaxRateRequest:
    merchant_id: str
    tax_rate: TaxRateRequestDTO


@dataclass(frozen=True)
class SaveDiscountRequest:
    merchant_id: str
    discount: DiscountRequestDTO


def _require_merchant(merchant_id: str) -> None:
    if not merchant_id or not merchant_id.strip():
        raise ValidationError("Merchant ID is required", "merchant_id")


class SaveTaxRateUseCase(CommandUseCase[SaveTaxRateRequest, TaxRateResponseDTO]):
    """Create or replace a tax rate. Existing invoices pick it up on their next recalculation."""

    def __init__(self, catalog_repository: CatalogRepository):
        super().__init__()
        self.catalog_repository = catalog_repository

    async def _validate_request(self, request: SaveTaxRateRequest) -> None:
        _require_merchant(request.merchant_id)

    async def _execute_command_logic(self, request: SaveTaxRateRequest) -> TaxRateResponseDTO:
        tax_rate = await self.catalog_repository.save_tax_rate(
            request.merchant_id, request.tax_rate.to_domain()
        )
        logger.info(f"Saved tax rate {tax_rate.id} for merchant {request.merchant_id}")
        return TaxRateResponseDTO.from_domain(tax_rate)


class SaveDiscountUseCase(CommandUseCase[SaveDiscountRequest, DiscountResponseDTO]):
    """Create or replace a discount."""

    def __init__(self, catalog_repository: CatalogRepository):
        super().__init__()
        self.catalog_repository = catalog_repository

    async def _validate_request(self, request: SaveDiscountRequest) -> None:
        _require_merchant(request.merchant_id)

    async def _execute_command_logic(self, request: SaveDiscountRequest) -> DiscountResponseDTO:
        discount = await self.catalog_repository.save_discount(
            request.merchant_id, request.discount.to_domain()
        )
        logger.info(f"Saved discount {discount.id} for merchant {request.merchant_id}")
        return DiscountResponseDTO.from_domain(discount)


class ListTaxRatesUseCase(QueryUseCase[str, List[TaxRateResponseDTO]]):

    def __init__(self, catalog_repository: CatalogRepository):
        self.catalog_repository = catalog_repository

    async def _execute_business_logic(self, merchant_id: str) -> List[TaxRateResponseDTO]:
        rates = await self.catalog_repository.list_tax_rates(merchant_id)
        return [TaxRateResponseDTO.from_domain(rate) for rate in rates]


class ListDiscountsUseCase(QueryUseCase[str, List[DiscountResponseDTO]]):

    def __init__(self, catalog_repository: CatalogRepository):
        self.catalog_repository = catalog_repository

    async def _execute_business_logic(self, merchant_id: str) -> List[DiscountResponseDTO]:
        discounts = await self.catalog_repository.list_discounts(merchant_id)
        return [DiscountResponseDTO.from_domain(discount) for discount in discounts]
