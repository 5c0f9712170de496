"""
Invoice use cases for the application layer.
Loads invoices and catalogs, applies lifecycle commands and saves the results.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from invoicing.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO, UpdateInvoiceRequestDTO, ListInvoicesRequestDTO,
    InvoiceResponseDTO, InvoiceListResponseDTO, InvoiceTotalsResponseDTO,
    RecalculationResponseDTO
)
from invoicing.application.locks import InvoiceLockRegistry
from invoicing.application.use_cases.base_use_case import (
    CommandUseCase, QueryUseCase, PaginatedQueryUseCase
)
from invoicing.domain.events.base import EventDispatcher
from invoicing.domain.models.base import EntityNotFoundError
from invoicing.domain.models.invoice import Invoice
from invoicing.domain.models.value_objects import InvoiceNumber
from invoicing.domain.repositories.catalog_repository import CatalogRepository
from invoicing.domain.repositories.invoice_repository import InvoiceRepository
from invoicing.domain.services.invoice_lifecycle import (
    InvoiceLifecycle, MarkInvoicePaid, MarkInvoiceUncollectible, OpenInvoice,
    RecalculateInvoice, Transition, VoidInvoice
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceCommandRequest:
    """Targets an existing invoice. ``expected_version`` defaults to the loaded one."""

    invoice_id: str
    expected_version: Optional[int] = None


@dataclass(frozen=True)
class UpdateInvoiceRequest(InvoiceCommandRequest):
    changes: UpdateInvoiceRequestDTO = field(default_factory=UpdateInvoiceRequestDTO)


class CreateInvoiceUseCase(CommandUseCase[CreateInvoiceRequestDTO, InvoiceResponseDTO]):
    """Use case for creating a new draft invoice."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        catalog_repository: CatalogRepository,
        lifecycle: InvoiceLifecycle,
        event_dispatcher: Optional[EventDispatcher] = None,
        default_currency: str = "EUR",
        number_prefix: str = "INV",
    ):
        super().__init__(event_dispatcher)
        self.invoice_repository = invoice_repository
        self.catalog_repository = catalog_repository
        self.lifecycle = lifecycle
        self.default_currency = default_currency
        self.number_prefix = number_prefix

    async def _execute_command_logic(self, request: CreateInvoiceRequestDTO) -> InvoiceResponseDTO:
        number = request.number
        if not number:
            number = await self._next_number(request.merchant_id)

        catalog = await self.catalog_repository.load_catalog(request.merchant_id)
        transition = self.lifecycle.create(request.to_command(self.default_currency, number), catalog)

        saved = await self.invoice_repository.save(transition.invoice)
        logger.info(f"Created invoice {saved.id} ({saved.number}) for merchant {saved.merchant_id}")

        await self._publish_events(transition.events)
        return InvoiceResponseDTO.from_domain(saved)

    async def _next_number(self, merchant_id: str) -> str:
        # Deleted drafts leave gaps in the count, so skip numbers already in use
        sequence = await self.invoice_repository.count_by_merchant(merchant_id) + 1
        while True:
            number = InvoiceNumber.generate_sequential(self.number_prefix, sequence).value
            if await self.invoice_repository.find_by_number(merchant_id, number) is None:
                return number
            sequence += 1


class InvoiceCommandUseCase(CommandUseCase[InvoiceCommandRequest, Any]):
    """
    Shared flow for commands against an existing invoice.
    Holds the invoice lock for the whole load-apply-save cycle.
    """

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        catalog_repository: CatalogRepository,
        lifecycle: InvoiceLifecycle,
        lock_registry: InvoiceLockRegistry,
        event_dispatcher: Optional[EventDispatcher] = None,
    ):
        super().__init__(event_dispatcher)
        self.invoice_repository = invoice_repository
        self.catalog_repository = catalog_repository
        self.lifecycle = lifecycle
        self.lock_registry = lock_registry

    async def _execute_command_logic(self, request: InvoiceCommandRequest) -> Any:
        async with self.lock_registry.hold(request.invoice_id):
            invoice = await self.invoice_repository.find_by_id(request.invoice_id)
            if invoice is None:
                raise EntityNotFoundError("Invoice", request.invoice_id)

            catalog = await self.catalog_repository.load_catalog(invoice.merchant_id)
            transition = await self.lifecycle.apply(invoice, self._command(request), catalog)

            saved = invoice
            if transition.invoice is not invoice:
                expected = request.expected_version
                saved = await self.invoice_repository.save(
                    transition.invoice,
                    expected_version=invoice.version if expected is None else expected,
                )

        await self._publish_events(transition.events)
        return self._respond(saved, transition)

    def _command(self, request: InvoiceCommandRequest) -> Any:
        raise NotImplementedError

    def _respond(self, saved: Invoice, transition: Transition) -> Any:
        logger.info(f"Invoice {saved.id} is now {saved.status.value} (version {saved.version})")
        return InvoiceResponseDTO.from_domain(saved)


class UpdateInvoiceUseCase(InvoiceCommandUseCase):
    """Use case for editing a draft invoice."""

    def _command(self, request: UpdateInvoiceRequest):
        return request.changes.to_command()


class OpenInvoiceUseCase(InvoiceCommandUseCase):
    """Use case for finalizing a draft and issuing its payment link."""

    def _command(self, request: InvoiceCommandRequest):
        return OpenInvoice()


class MarkInvoicePaidUseCase(InvoiceCommandUseCase):
    """Use case for recording that an open invoice was paid."""

    def _command(self, request: InvoiceCommandRequest):
        return MarkInvoicePaid()


class VoidInvoiceUseCase(InvoiceCommandUseCase):
    """Use case for voiding a draft or open invoice."""

    def _command(self, request: InvoiceCommandRequest):
        return VoidInvoice()


class MarkInvoiceUncollectibleUseCase(InvoiceCommandUseCase):
    """Use case for writing off an open invoice."""

    def _command(self, request: InvoiceCommandRequest):
        return MarkInvoiceUncollectible()


class RecalculateInvoiceUseCase(InvoiceCommandUseCase):
    """
    Use case for re-deriving totals against the current catalog.
    Drafts are saved with the new totals; other invoices are reported as stored.
    """

    def _command(self, request: InvoiceCommandRequest):
        return RecalculateInvoice()

    def _respond(self, saved: Invoice, transition: Transition) -> RecalculationResponseDTO:
        return RecalculationResponseDTO(
            invoice=InvoiceResponseDTO.from_domain(saved),
            totals=InvoiceTotalsResponseDTO.from_domain(transition.totals),
            persisted=saved.is_draft,
        )


class GetInvoiceByIdUseCase(QueryUseCase[str, InvoiceResponseDTO]):
    """Use case for getting invoice by ID."""

    def __init__(self, invoice_repository: InvoiceRepository):
        self.invoice_repository = invoice_repository

    async def _execute_business_logic(self, invoice_id: str) -> InvoiceResponseDTO:
        invoice = await self.invoice_repository.find_by_id(invoice_id)
        if not invoice:
            raise EntityNotFoundError("Invoice", invoice_id)

        return InvoiceResponseDTO.from_domain(invoice)


class ListInvoicesUseCase(PaginatedQueryUseCase[ListInvoicesRequestDTO, InvoiceListResponseDTO]):
    """Use case for listing a merchant's invoices."""

    def __init__(self, invoice_repository: InvoiceRepository, default_page_size: int = 20, max_page_size: int = 100):
        super().__init__(default_page_size, max_page_size)
        self.invoice_repository = invoice_repository

    async def _execute_business_logic(self, request: ListInvoicesRequestDTO) -> InvoiceListResponseDTO:
        invoices: List[Invoice] = await self.invoice_repository.find_by_merchant(
            request.merchant_id,
            status=request.status,
            search=request.search,
            limit=request.limit,
            offset=request.offset,
        )
        total = await self.invoice_repository.count_by_merchant(
            request.merchant_id, status=request.status, search=request.search
        )

        return InvoiceListResponseDTO.create(
            items=[InvoiceResponseDTO.from_domain(invoice) for invoice in invoices],
            total=total,
            limit=request.limit,
            offset=request.offset,
        )
