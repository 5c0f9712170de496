"""
Dependency wiring for the web layer.
A container is built once per application from settings and kept on
``app.state``; use cases are assembled per request from it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine

from invoicing.application.locks import InvoiceLockRegistry
from invoicing.application.use_cases.catalog_use_cases import (
    ListDiscountsUseCase, ListTaxRatesUseCase, SaveDiscountUseCase, SaveTaxRateUseCase
)
from invoicing.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase, GetInvoiceByIdUseCase, ListInvoicesUseCase,
    MarkInvoicePaidUseCase, MarkInvoiceUncollectibleUseCase, OpenInvoiceUseCase,
    RecalculateInvoiceUseCase, UpdateInvoiceUseCase, VoidInvoiceUseCase
)
from invoicing.config import Settings
from invoicing.domain.events.base import EventDispatcher
from invoicing.domain.repositories.catalog_repository import CatalogRepository
from invoicing.domain.repositories.invoice_repository import InvoiceRepository
from invoicing.domain.services.invoice_lifecycle import InvoiceLifecycle
from invoicing.domain.services.payment_link_issuer import PaymentLinkIssuer
from invoicing.infrastructure.db.database import create_all_tables, create_db_engine, create_session_factory
from invoicing.infrastructure.events.event_setup import setup_event_handlers
from invoicing.infrastructure.payment_links import create_payment_link_issuer
from invoicing.infrastructure.repositories import (
    InMemoryCatalogRepository, InMemoryInvoiceRepository,
    SQLAlchemyCatalogRepository, SQLAlchemyInvoiceRepository
)


logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Collaborators shared by all requests of one application."""

    settings: Settings
    invoice_repository: InvoiceRepository
    catalog_repository: CatalogRepository
    payment_link_issuer: PaymentLinkIssuer
    lifecycle: InvoiceLifecycle
    lock_registry: InvoiceLockRegistry
    event_dispatcher: EventDispatcher
    engine: Optional[Engine] = None

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def build_container(
    settings: Settings,
    payment_link_issuer: Optional[PaymentLinkIssuer] = None,
    invoice_repository: Optional[InvoiceRepository] = None,
    catalog_repository: Optional[CatalogRepository] = None,
) -> ServiceContainer:
    """Build the container for the configured storage backend and issuer."""
    engine = None
    if invoice_repository is None or catalog_repository is None:
        if settings.storage_backend == "sql":
            engine = create_db_engine(settings.database_url, echo=settings.debug)
            create_all_tables(engine)
            session_factory = create_session_factory(engine)
            invoice_repository = invoice_repository or SQLAlchemyInvoiceRepository(session_factory)
            catalog_repository = catalog_repository or SQLAlchemyCatalogRepository(session_factory)
            logger.info("Using SQL storage backend")
        else:
            invoice_repository = invoice_repository or InMemoryInvoiceRepository()
            catalog_repository = catalog_repository or InMemoryCatalogRepository()
            logger.info("Using in-memory storage backend")

    issuer = payment_link_issuer or create_payment_link_issuer(settings)
    lifecycle = InvoiceLifecycle(
        issuer,
        strict_references=settings.strict_catalog_references,
        issuer_timeout=settings.payment_link_timeout_seconds,
    )

    return ServiceContainer(
        settings=settings,
        invoice_repository=invoice_repository,
        catalog_repository=catalog_repository,
        payment_link_issuer=issuer,
        lifecycle=lifecycle,
        lock_registry=InvoiceLockRegistry(),
        event_dispatcher=setup_event_handlers(EventDispatcher()),
        engine=engine,
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


# Use case factories

def _command_use_case(cls, container: ServiceContainer):
    return cls(
        container.invoice_repository,
        container.catalog_repository,
        container.lifecycle,
        container.lock_registry,
        container.event_dispatcher,
    )


def get_create_invoice_use_case(request: Request) -> CreateInvoiceUseCase:
    container = get_container(request)
    return CreateInvoiceUseCase(
        container.invoice_repository,
        container.catalog_repository,
        container.lifecycle,
        container.event_dispatcher,
        default_currency=container.settings.default_currency,
        number_prefix=container.settings.invoice_number_prefix,
    )


def get_update_invoice_use_case(request: Request) -> UpdateInvoiceUseCase:
    return _command_use_case(UpdateInvoiceUseCase, get_container(request))


def get_open_invoice_use_case(request: Request) -> OpenInvoiceUseCase:
    return _command_use_case(OpenInvoiceUseCase, get_container(request))


def get_mark_paid_use_case(request: Request) -> MarkInvoicePaidUseCase:
    return _command_use_case(MarkInvoicePaidUseCase, get_container(request))


def get_void_invoice_use_case(request: Request) -> VoidInvoiceUseCase:
    return _command_use_case(VoidInvoiceUseCase, get_container(request))


def get_mark_uncollectible_use_case(request: Request) -> MarkInvoiceUncollectibleUseCase:
    return _command_use_case(MarkInvoiceUncollectibleUseCase, get_container(request))


def get_recalculate_invoice_use_case(request: Request) -> RecalculateInvoiceUseCase:
    return _command_use_case(RecalculateInvoiceUseCase, get_container(request))


def get_invoice_use_case(request: Request) -> GetInvoiceByIdUseCase:
    return GetInvoiceByIdUseCase(get_container(request).invoice_repository)


def get_list_invoices_use_case(request: Request) -> ListInvoicesUseCase:
    container = get_container(request)
    return ListInvoicesUseCase(
        container.invoice_repository,
        default_page_size=container.settings.default_page_size,
        max_page_size=container.settings.max_page_size,
    )


def get_save_tax_rate_use_case(request: Request) -> SaveTaxRateUseCase:
    return SaveTaxRateUseCase(get_container(request).catalog_repository)


def get_list_tax_rates_use_case(request: Request) -> ListTaxRatesUseCase:
    return ListTaxRatesUseCase(get_container(request).catalog_repository)


def get_save_discount_use_case(request: Request) -> SaveDiscountUseCase:
    return SaveDiscountUseCase(get_container(request).catalog_repository)


def get_list_discounts_use_case(request: Request) -> ListDiscountsUseCase:
    return ListDiscountsUseCase(get_container(request).catalog_repository)
