"""
Catalog router.
Manages a merchant's tax rates and discounts.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from invoicing.application.dto.catalog_dto import (
    TaxRateRequestDTO,
    TaxRateResponseDTO,
    DiscountRequestDTO,
    DiscountResponseDTO
)
from invoicing.application.use_cases.catalog_use_cases import (
    SaveTaxRateUseCase,
    SaveDiscountUseCase,
    ListTaxRatesUseCase,
    ListDiscountsUseCase,
    SaveTaxRateRequest,
    SaveDiscountRequest
)
from invoicing.infrastructure.web.dependencies import (
    get_save_tax_rate_use_case,
    get_save_discount_use_case,
    get_list_tax_rates_use_case,
    get_list_discounts_use_case
)
from invoicing.infrastructure.web.middleware.error_handler import unwrap


router = APIRouter()


@router.get("/{merchant_id}/tax-rates", response_model=List[TaxRateResponseDTO])
async def list_tax_rates(
    merchant_id: str,
    use_case: Annotated[ListTaxRatesUseCase, Depends(get_list_tax_rates_use_case)]
):
    """List a merchant's tax rates."""
    return unwrap(await use_case.execute(merchant_id))


@router.post("/{merchant_id}/tax-rates", status_code=status.HTTP_201_CREATED, response_model=TaxRateResponseDTO)
async def save_tax_rate(
    merchant_id: str,
    request: TaxRateRequestDTO,
    use_case: Annotated[SaveTaxRateUseCase, Depends(get_save_tax_rate_use_case)]
):
    """
    Create or replace a tax rate.

    - **rate**: Percentage between 0 and 100
    - **inclusive**: Whether line prices already include the tax
    """
    return unwrap(await use_case.execute(SaveTaxRateRequest(merchant_id, request)))


@router.get("/{merchant_id}/discounts", response_model=List[DiscountResponseDTO])
async def list_discounts(
    merchant_id: str,
    use_case: Annotated[ListDiscountsUseCase, Depends(get_list_discounts_use_case)]
):
    """List a merchant's discounts."""
    return unwrap(await use_case.execute(merchant_id))


@router.post("/{merchant_id}/discounts", status_code=status.HTTP_201_CREATED, response_model=DiscountResponseDTO)
async def save_discount(
    merchant_id: str,
    request: DiscountRequestDTO,
    use_case: Annotated[SaveDiscountUseCase, Depends(get_save_discount_use_case)]
):
    """
    Create or replace a discount.

    - **kind**: `percentage` (value 0-100) or `amount` (value in minor units)
    """
    return unwrap(await use_case.execute(SaveDiscountRequest(merchant_id, request)))
