"""
SQLAlchemy models for the database.
Maps domain entities to database tables. Money columns hold minor units.
"""

from sqlalchemy import (
    Column, Integer, BigInteger, String, DateTime, Date, Text, Boolean,
    Numeric, ForeignKey, JSON, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship

from invoicing.infrastructure.db.database import Base


class InvoiceModel(Base):
    """Invoice table"""
    __tablename__ = 'invoices'

    id = Column(String(64), primary_key=True)
    merchant_id = Column(String(64), nullable=False)
    platform_id = Column(String(64))
    customer_id = Column(String(64))

    # Invoice details
    number = Column(String(50))
    currency = Column(String(3), nullable=False)
    status = Column(String(20), nullable=False, default='draft')

    # Derived totals, minor units
    subtotal = Column(BigInteger, nullable=False, default=0)
    discount_total = Column(BigInteger, nullable=False, default=0)
    tax_total = Column(BigInteger, nullable=False, default=0)
    total = Column(BigInteger, nullable=False, default=0)
    amount_due = Column(BigInteger, nullable=False, default=0)

    # Content
    due_date = Column(Date)
    memo = Column(Text)
    footer = Column(Text)
    extra = Column('metadata', JSON, default=dict)

    # Payment link
    payment_link_id = Column(String(64))
    payment_link_url = Column(String(500))

    # Timestamps and optimistic locking
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    line_items = relationship(
        "InvoiceLineItemModel",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLineItemModel.position",
    )

    # Indexes
    __table_args__ = (
        Index('idx_invoices_merchant_status', 'merchant_id', 'status'),
        Index('idx_invoices_created_at', 'created_at'),
        UniqueConstraint('merchant_id', 'number', name='uq_invoice_number_per_merchant'),
        CheckConstraint('total >= 0', name='check_total_non_negative'),
        CheckConstraint('amount_due >= 0', name='check_amount_due_non_negative'),
    )

    # UPDATEs carry "WHERE version = <loaded version>"; the caller sets the new value
    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": False,
    }


class InvoiceLineItemModel(Base):
    """Invoice line item table"""
    __tablename__ = 'invoice_line_items'

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False)
    invoice_id = Column(String(64), ForeignKey('invoices.id', ondelete='CASCADE'), nullable=False)
    position = Column(Integer, nullable=False)

    description = Column(String(500), nullable=False)
    quantity = Column(BigInteger, nullable=False)
    unit_amount = Column(BigInteger, nullable=False)
    tax_rate_id = Column(String(64))
    discount_id = Column(String(64))
    extra = Column('metadata', JSON, default=dict)

    invoice = relationship("InvoiceModel", back_populates="line_items")

    __table_args__ = (
        Index('idx_line_items_invoice', 'invoice_id', 'position'),
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        CheckConstraint('unit_amount >= 0', name='check_unit_amount_non_negative'),
    )


class TaxRateModel(Base):
    """Tax rate catalog table"""
    __tablename__ = 'tax_rates'

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False)
    merchant_id = Column(String(64), nullable=False)
    name = Column(String(255))
    rate = Column(Numeric(9, 4), nullable=False)
    inclusive = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint('merchant_id', 'id', name='uq_tax_rate_per_merchant'),
    )


class DiscountModel(Base):
    """Discount catalog table"""
    __tablename__ = 'discounts'

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False)
    merchant_id = Column(String(64), nullable=False)
    name = Column(String(255))
    kind = Column(String(20), nullable=False)
    # Exactly one is set, depending on kind
    percentage = Column(Numeric(9, 4))
    amount = Column(BigInteger)

    __table_args__ = (
        CheckConstraint(
            "(kind = 'percentage' AND percentage IS NOT NULL AND amount IS NULL) OR "
            "(kind = 'amount' AND amount IS NOT NULL AND percentage IS NULL)",
            name="check_discount_value_matches_kind",
        ),
        UniqueConstraint('merchant_id', 'id', name='uq_discount_per_merchant'),
    )
