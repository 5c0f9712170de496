"""
Invoice repository implementation using SQLAlchemy.
"""

from dataclasses import replace
from typing import Optional, List

from sqlalchemy import func, desc, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, selectinload, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from invoicing.domain.models.base import ConcurrencyConflictError, DuplicateEntityError
from invoicing.domain.models.invoice import Invoice, InvoiceStatus
from invoicing.domain.repositories.invoice_repository import InvoiceRepository as InvoiceRepositoryInterface
from invoicing.infrastructure.db.models import InvoiceModel
from invoicing.infrastructure.mappers.invoice_mapper import InvoiceMapper


class SQLAlchemyInvoiceRepository(InvoiceRepositoryInterface):
    """
    SQLAlchemy implementation of invoice repository.
    Each call runs in its own session and commits before returning.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.mapper = InvoiceMapper()

    async def save(self, invoice: Invoice, expected_version: Optional[int] = None) -> Invoice:
        """
        Insert or update an invoice.
        The stored version is checked here and again by the UPDATE itself, so a
        writer that committed in between is reported as a conflict.
        """
        with self.session_factory() as session:
            model = session.query(InvoiceModel).options(
                selectinload(InvoiceModel.line_items)
            ).filter_by(id=invoice.id).first()
            actual = model.version if model is not None else 0

            if expected_version is not None and actual != expected_version:
                raise ConcurrencyConflictError("Invoice", invoice.id, expected_version, actual)

            # Check for duplicate invoice number within merchant
            if self._number_taken(session, invoice):
                raise DuplicateEntityError("Invoice", "number", invoice.number)

            saved = replace(invoice, version=actual + 1)
            if model is None:
                session.add(self.mapper.domain_to_model(saved))
            else:
                self.mapper.update_model(model, saved)

            try:
                session.commit()
            except StaleDataError as e:
                session.rollback()
                raise ConcurrencyConflictError("Invoice", invoice.id, actual, actual + 1) from e
            except IntegrityError as e:
                session.rollback()
                if self._number_taken(session, saved):
                    raise DuplicateEntityError("Invoice", "number", saved.number) from e
                if model is None and session.query(InvoiceModel.id).filter_by(id=saved.id).first():
                    raise ConcurrencyConflictError("Invoice", saved.id, 0, 1) from e
                raise
            return saved

    async def find_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """Get invoice by ID."""
        with self.session_factory() as session:
            model = session.query(InvoiceModel).options(
                selectinload(InvoiceModel.line_items)
            ).filter_by(id=invoice_id).first()

            if not model:
                return None

            return self.mapper.model_to_domain(model)

    async def find_by_number(self, merchant_id: str, number: str) -> Optional[Invoice]:
        """Get a merchant's invoice by number."""
        with self.session_factory() as session:
            model = session.query(InvoiceModel).options(
                selectinload(InvoiceModel.line_items)
            ).filter_by(merchant_id=merchant_id, number=number).first()

            return self.mapper.model_to_domain(model) if model else None

    async def find_by_merchant(
        self,
        merchant_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Invoice]:
        """Get invoices by merchant with optional status and search filters and pagination."""
        with self.session_factory() as session:
            query = session.query(InvoiceModel).options(
                selectinload(InvoiceModel.line_items)
            )
            query = self._filter(query, merchant_id, status, search)
            query = query.order_by(desc(InvoiceModel.created_at), desc(InvoiceModel.id))

            if offset:
                query = query.offset(offset)
            if limit:
                query = query.limit(limit)

            return [self.mapper.model_to_domain(model) for model in query.all()]

    async def count_by_merchant(
        self,
        merchant_id: str,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None
    ) -> int:
        """Count invoices for a merchant."""
        with self.session_factory() as session:
            query = self._filter(session.query(func.count(InvoiceModel.id)), merchant_id, status, search)
            return query.scalar() or 0

    async def delete(self, invoice_id: str) -> bool:
        """Delete invoice by ID."""
        with self.session_factory() as session:
            model = session.query(InvoiceModel).filter_by(id=invoice_id).first()
            if not model:
                return False

            session.delete(model)
            session.commit()
            return True

    def _filter(
        self,
        query: Query,
        merchant_id: str,
        status: Optional[InvoiceStatus],
        search: Optional[str]
    ) -> Query:
        query = query.filter(InvoiceModel.merchant_id == merchant_id)
        if status is not None:
            query = query.filter(InvoiceModel.status == InvoiceStatus(status).value)
        if search and search.strip():
            pattern = f"%{_escape_like(search.strip())}%"
            query = query.filter(or_(
                InvoiceModel.number.ilike(pattern, escape="\\"),
                InvoiceModel.customer_id.ilike(pattern, escape="\\"),
                InvoiceModel.memo.ilike(pattern, escape="\\"),
            ))
        return query

    def _number_taken(self, session, invoice: Invoice) -> bool:
        if not invoice.number:
            return False
        return session.query(InvoiceModel.id).filter(
            InvoiceModel.merchant_id == invoice.merchant_id,
            InvoiceModel.number == invoice.number,
            InvoiceModel.id != invoice.id,
        ).first() is not None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
