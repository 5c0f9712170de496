"""
Catalog repository implementation using SQLAlchemy.
"""

from typing import List

from sqlalchemy.orm import sessionmaker

from invoicing.domain.models.catalog import Catalog, Discount, TaxRate
from invoicing.domain.repositories.catalog_repository import CatalogRepository as CatalogRepositoryInterface
from invoicing.infrastructure.db.models import DiscountModel, TaxRateModel
from invoicing.infrastructure.mappers.catalog_mapper import CatalogMapper


class SQLAlchemyCatalogRepository(CatalogRepositoryInterface):
    """SQLAlchemy implementation of catalog repository."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.mapper = CatalogMapper()

    async def load_catalog(self, merchant_id: str) -> Catalog:
        return Catalog.of(
            tax_rates=await self.list_tax_rates(merchant_id),
            discounts=await self.list_discounts(merchant_id),
        )

    async def save_tax_rate(self, merchant_id: str, tax_rate: TaxRate) -> TaxRate:
        """Create or replace a tax rate."""
        with self.session_factory() as session:
            model = session.query(TaxRateModel).filter_by(
                merchant_id=merchant_id, id=tax_rate.id
            ).first()
            if model is None:
                session.add(self.mapper.tax_rate_to_model(merchant_id, tax_rate))
            else:
                model.name = tax_rate.name
                model.rate = tax_rate.rate
                model.inclusive = tax_rate.inclusive
            session.commit()
        return tax_rate

    async def save_discount(self, merchant_id: str, discount: Discount) -> Discount:
        """Create or replace a discount."""
        with self.session_factory() as session:
            model = session.query(DiscountModel).filter_by(
                merchant_id=merchant_id, id=discount.id
            ).first()
            if model is None:
                session.add(self.mapper.discount_to_model(merchant_id, discount))
            else:
                self.mapper.update_discount_model(model, discount)
            session.commit()
        return discount

    async def list_tax_rates(self, merchant_id: str) -> List[TaxRate]:
        with self.session_factory() as session:
            models = session.query(TaxRateModel).filter_by(
                merchant_id=merchant_id
            ).order_by(TaxRateModel.id).all()
            return [self.mapper.tax_rate_to_domain(model) for model in models]

    async def list_discounts(self, merchant_id: str) -> List[Discount]:
        with self.session_factory() as session:
            models = session.query(DiscountModel).filter_by(
                merchant_id=merchant_id
            ).order_by(DiscountModel.id).all()
            return [self.mapper.discount_to_domain(model) for model in models]
