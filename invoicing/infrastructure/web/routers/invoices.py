"""
Invoice router.
Handles invoice creation, editing and lifecycle transitions.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from invoicing.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    ListInvoicesRequestDTO,
    InvoiceResponseDTO,
    InvoiceListResponseDTO,
    RecalculationResponseDTO
)
from invoicing.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase,
    UpdateInvoiceUseCase,
    GetInvoiceByIdUseCase,
    ListInvoicesUseCase,
    OpenInvoiceUseCase,
    MarkInvoicePaidUseCase,
    VoidInvoiceUseCase,
    MarkInvoiceUncollectibleUseCase,
    RecalculateInvoiceUseCase,
    InvoiceCommandRequest,
    UpdateInvoiceRequest
)
from invoicing.domain.models.invoice import InvoiceStatus
from invoicing.infrastructure.web.dependencies import (
    get_create_invoice_use_case,
    get_update_invoice_use_case,
    get_invoice_use_case,
    get_list_invoices_use_case,
    get_open_invoice_use_case,
    get_mark_paid_use_case,
    get_void_invoice_use_case,
    get_mark_uncollectible_use_case,
    get_recalculate_invoice_use_case
)
from invoicing.infrastructure.web.middleware.error_handler import unwrap


router = APIRouter()

# Optimistic concurrency: clients may pin the version they last read.
ExpectedVersion = Annotated[Optional[int], Query(ge=1, description="Version the change is based on")]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def create_invoice(
    request: CreateInvoiceRequestDTO,
    use_case: Annotated[CreateInvoiceUseCase, Depends(get_create_invoice_use_case)]
):
    """
    Create a draft invoice.

    - **merchant_id**: Owning merchant (required)
    - **currency**: ISO 4217 code (default from settings)
    - **number**: Invoice number (generated if not provided)
    - **items**: Line items with integer minor-unit prices and optional
      tax rate / discount references
    """
    return unwrap(await use_case.execute(request))


@router.get("", response_model=InvoiceListResponseDTO)
async def list_invoices(
    use_case: Annotated[ListInvoicesUseCase, Depends(get_list_invoices_use_case)],
    merchant_id: str = Query(..., min_length=1, description="Owning merchant"),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status", description="Filter by status"),
    search: Optional[str] = Query(None, max_length=100, description="Matches number, customer or memo"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of invoices"),
    offset: int = Query(0, ge=0, description="Number of invoices to skip")
):
    """List a merchant's invoices, newest first."""
    request = ListInvoicesRequestDTO(
        merchant_id=merchant_id,
        status=invoice_status,
        search=search,
        limit=limit,
        offset=offset
    )
    return unwrap(await use_case.execute(request))


@router.get("/{invoice_id}", response_model=InvoiceResponseDTO)
async def get_invoice(
    invoice_id: str,
    use_case: Annotated[GetInvoiceByIdUseCase, Depends(get_invoice_use_case)]
):
    """Get an invoice with its line items and totals."""
    return unwrap(await use_case.execute(invoice_id))


@router.patch("/{invoice_id}", response_model=InvoiceResponseDTO)
async def update_invoice(
    invoice_id: str,
    request: UpdateInvoiceRequestDTO,
    use_case: Annotated[UpdateInvoiceUseCase, Depends(get_update_invoice_use_case)],
    expected_version: ExpectedVersion = None
):
    """
    Edit a draft invoice. Totals are recomputed.
    Invoices that are no longer drafts answer 409.
    """
    return unwrap(await use_case.execute(
        UpdateInvoiceRequest(invoice_id=invoice_id, expected_version=expected_version, changes=request)
    ))


@router.post("/{invoice_id}/open", response_model=InvoiceResponseDTO)
async def open_invoice(
    invoice_id: str,
    use_case: Annotated[OpenInvoiceUseCase, Depends(get_open_invoice_use_case)],
    expected_version: ExpectedVersion = None
):
    """
    Finalize a draft and issue its payment link.
    A payment provider failure answers 502 and leaves the invoice a draft.
    """
    return unwrap(await use_case.execute(InvoiceCommandRequest(invoice_id, expected_version)))


@router.post("/{invoice_id}/mark-paid", response_model=InvoiceResponseDTO)
async def mark_invoice_paid(
    invoice_id: str,
    use_case: Annotated[MarkInvoicePaidUseCase, Depends(get_mark_paid_use_case)],
    expected_version: ExpectedVersion = None
):
    """Mark an open invoice as paid."""
    return unwrap(await use_case.execute(InvoiceCommandRequest(invoice_id, expected_version)))


@router.post("/{invoice_id}/void", response_model=InvoiceResponseDTO)
async def void_invoice(
    invoice_id: str,
    use_case: Annotated[VoidInvoiceUseCase, Depends(get_void_invoice_use_case)],
    expected_version: ExpectedVersion = None
):
    """Void a draft or open invoice."""
    return unwrap(await use_case.execute(InvoiceCommandRequest(invoice_id, expected_version)))


@router.post("/{invoice_id}/mark-uncollectible", response_model=InvoiceResponseDTO)
async def mark_invoice_uncollectible(
    invoice_id: str,
    use_case: Annotated[MarkInvoiceUncollectibleUseCase, Depends(get_mark_uncollectible_use_case)],
    expected_version: ExpectedVersion = None
):
    """Write off an open invoice."""
    return unwrap(await use_case.execute(InvoiceCommandRequest(invoice_id, expected_version)))


@router.post("/{invoice_id}/recalculate", response_model=RecalculationResponseDTO)
async def recalculate_invoice(
    invoice_id: str,
    use_case: Annotated[RecalculateInvoiceUseCase, Depends(get_recalculate_invoice_use_case)]
):
    """
    Re-derive totals against the current catalog.
    Only drafts are updated; other invoices report the computed totals.
    """
    return unwrap(await use_case.execute(InvoiceCommandRequest(invoice_id)))
