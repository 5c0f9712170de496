"""
Unit tests for catalog use cases.
"""

from decimal import Decimal

import pytest

from invoicing.application.dto.catalog_dto import DiscountRequestDTO, TaxRateRequestDTO
from invoicing.application.use_cases.catalog_use_cases import (
    ListDiscountsUseCase, ListTaxRatesUseCase, SaveDiscountRequest, SaveDiscountUseCase,
    SaveTaxRateRequest, SaveTaxRateUseCase
)
from invoicing.domain.models.catalog import DiscountKind
from invoicing.infrastructure.repositories import InMemoryCatalogRepository


class TestCatalogUseCases:

    def setup_method(self):
        self.repository = InMemoryCatalogRepository()

    @pytest.mark.asyncio
    async def test_save_and_list_tax_rates(self):
        save = SaveTaxRateUseCase(self.repository)
        await save.execute(SaveTaxRateRequest("m_1", TaxRateRequestDTO(id="vat", rate=Decimal("20"))))
        await save.execute(SaveTaxRateRequest("m_1", TaxRateRequestDTO(id="vat", rate=Decimal("21"), inclusive=True)))

        result = await ListTaxRatesUseCase(self.repository).execute("m_1")

        assert len(result.data) == 1
        assert result.data[0].rate == Decimal("21")
        assert result.data[0].inclusive is True

    @pytest.mark.asyncio
    async def test_save_amount_discount(self):
        result = await SaveDiscountUseCase(self.repository).execute(
            SaveDiscountRequest("m_1", DiscountRequestDTO(id="off", kind="amount", value=Decimal("500")))
        )

        assert result.success, result.error
        assert result.data.kind == DiscountKind.AMOUNT
        listed = await ListDiscountsUseCase(self.repository).execute("m_1")
        assert [discount.id for discount in listed.data] == ["off"]

    @pytest.mark.asyncio
    async def test_fractional_amount_discount_rejected(self):
        result = await SaveDiscountUseCase(self.repository).execute(
            SaveDiscountRequest("m_1", DiscountRequestDTO(id="off", kind="amount", value=Decimal("5.5")))
        )

        assert result.error_code == "VALIDATION_ERROR"
        assert await self.repository.list_discounts("m_1") == []

    @pytest.mark.asyncio
    async def test_merchant_required(self):
        result = await SaveTaxRateUseCase(self.repository).execute(
            SaveTaxRateRequest(" ", TaxRateRequestDTO(id="vat", rate=Decimal("20")))
        )
        assert result.error_code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_catalogs_are_per_merchant(self):
        await SaveTaxRateUseCase(self.repository).execute(
            SaveTaxRateRequest("m_1", TaxRateRequestDTO(id="vat", rate=Decimal("20")))
        )

        result = await ListTaxRatesUseCase(self.repository).execute("m_2")
        assert result.data == []
