"""
Repository tests, run against both the in-memory and the SQLAlchemy
implementations with an in-memory SQLite database.
"""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from invoicing.domain.models.base import ConcurrencyConflictError, DuplicateEntityError
from invoicing.domain.models.catalog import Discount, DiscountKind, TaxRate
from invoicing.domain.models.invoice import Invoice, InvoiceStatus, InvoiceTotals, LineItem
from invoicing.domain.models.value_objects import Money
from invoicing.infrastructure.db import create_all_tables, create_db_engine, create_session_factory
from invoicing.infrastructure.db.models import InvoiceModel
from invoicing.infrastructure.mappers.invoice_mapper import InvoiceMapper
from invoicing.infrastructure.repositories import (
    InMemoryCatalogRepository, InMemoryInvoiceRepository,
    SQLAlchemyCatalogRepository, SQLAlchemyInvoiceRepository
)


BASE_TIME = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_invoice(invoice_id="inv_1", merchant_id="m_1", minutes=0, **kwargs):
    items = kwargs.pop("items", (
        LineItem(id="item_1", description="Hosting", quantity=2, unit_amount=Money(2500), tax_rate_id="vat"),
        LineItem(id="item_2", description="Setup", quantity=1, unit_amount=Money(1000), metadata={"sku": "S-1"}),
    ))
    created = BASE_TIME + timedelta(minutes=minutes)
    number = kwargs.pop("number", f"INV-{invoice_id.upper()}")
    return Invoice(
        id=invoice_id,
        merchant_id=merchant_id,
        number=number,
        currency="EUR",
        items=items,
        totals=InvoiceTotals(subtotal=6000, tax_total=1000, total=7000, amount_due=7000),
        due_date=date(2024, 3, 31),
        metadata={"order": "A-1"},
        created_at=created,
        updated_at=created,
        **kwargs
    )


@pytest.fixture(params=["memory", "sql"])
def repositories(request):
    if request.param == "memory":
        yield InMemoryInvoiceRepository(), InMemoryCatalogRepository()
        return

    engine = create_db_engine("sqlite://")
    create_all_tables(engine)
    session_factory = create_session_factory(engine)
    yield SQLAlchemyInvoiceRepository(session_factory), SQLAlchemyCatalogRepository(session_factory)
    engine.dispose()


@pytest.fixture
def invoices(repositories):
    return repositories[0]


@pytest.fixture
def catalog(repositories):
    return repositories[1]


class TestInvoiceRepository:

    @pytest.mark.asyncio
    async def test_save_and_find_round_trip(self, invoices):
        saved = await invoices.save(make_invoice())
        found = await invoices.find_by_id("inv_1")

        assert saved.version == 1
        assert found.version == 1
        assert found.number == "INV-INV_1"
        assert found.status == InvoiceStatus.DRAFT
        assert found.totals == InvoiceTotals(subtotal=6000, tax_total=1000, total=7000, amount_due=7000)
        assert [item.id for item in found.items] == ["item_1", "item_2"]
        assert found.items[0].unit_amount == Money(2500)
        assert found.items[0].tax_rate_id == "vat"
        assert found.items[1].metadata == {"sku": "S-1"}
        assert found.due_date == date(2024, 3, 31)
        assert found.metadata == {"order": "A-1"}
        assert found.created_at == BASE_TIME

    @pytest.mark.asyncio
    async def test_find_missing(self, invoices):
        assert await invoices.find_by_id("inv_missing") is None

    @pytest.mark.asyncio
    async def test_update_replaces_items_and_bumps_version(self, invoices):
        first = await invoices.save(make_invoice())
        items = (LineItem(id="item_3", description="Support", quantity=1, unit_amount=Money(900)),)
        opened = replace(
            first,
            items=items,
            status=InvoiceStatus.OPEN,
            payment_link_id="plink_abcd2345",
            payment_link_url="https://pay.globapay.com/link/ABCD2345",
        )

        saved = await invoices.save(opened, expected_version=1)
        found = await invoices.find_by_id("inv_1")

        assert saved.version == 2
        assert found.version == 2
        assert found.status == InvoiceStatus.OPEN
        assert [item.id for item in found.items] == ["item_3"]
        assert found.payment_link_url == "https://pay.globapay.com/link/ABCD2345"

    @pytest.mark.asyncio
    async def test_stale_version_rejected(self, invoices):
        first = await invoices.save(make_invoice())
        await invoices.save(replace(first, memo="first writer"), expected_version=1)

        with pytest.raises(ConcurrencyConflictError):
            await invoices.save(replace(first, memo="second writer"), expected_version=1)

        assert (await invoices.find_by_id("inv_1")).memo == "first writer"

    @pytest.mark.asyncio
    async def test_expected_version_on_missing_invoice(self, invoices):
        with pytest.raises(ConcurrencyConflictError):
            await invoices.save(make_invoice(), expected_version=1)

    @pytest.mark.asyncio
    async def test_stored_copy_is_isolated(self, invoices):
        invoice = make_invoice()
        await invoices.save(invoice)
        invoice.metadata["order"] = "changed"

        assert (await invoices.find_by_id("inv_1")).metadata == {"order": "A-1"}

    @pytest.mark.asyncio
    async def test_find_by_merchant_newest_first(self, invoices):
        for index in range(3):
            await invoices.save(make_invoice(f"inv_{index}", minutes=index))
        await invoices.save(make_invoice("inv_other", merchant_id="m_2"))
        await invoices.save(make_invoice("inv_void", minutes=10, status=InvoiceStatus.VOID))

        page = await invoices.find_by_merchant("m_1", limit=2, offset=1)
        drafts = await invoices.find_by_merchant("m_1", status=InvoiceStatus.DRAFT)

        assert [inv.id for inv in page] == ["inv_2", "inv_1"]
        assert [inv.id for inv in drafts] == ["inv_2", "inv_1", "inv_0"]
        assert await invoices.count_by_merchant("m_1") == 4
        assert await invoices.count_by_merchant("m_1", status=InvoiceStatus.VOID) == 1
        assert await invoices.count_by_merchant("m_3") == 0

    @pytest.mark.asyncio
    async def test_delete(self, invoices):
        await invoices.save(make_invoice())

        assert await invoices.delete("inv_1") is True
        assert await invoices.delete("inv_1") is False
        assert await invoices.find_by_id("inv_1") is None

    @pytest.mark.asyncio
    async def test_duplicate_number_rejected(self, invoices):
        await invoices.save(make_invoice("inv_1", number="INV-000001"))
        await invoices.save(make_invoice("inv_2", merchant_id="m_2", number="INV-000001"))

        with pytest.raises(DuplicateEntityError):
            await invoices.save(make_invoice("inv_3", number="INV-000001"))

        assert await invoices.find_by_id("inv_3") is None
        assert (await invoices.find_by_number("m_1", "INV-000001")).id == "inv_1"
        assert (await invoices.find_by_number("m_2", "INV-000001")).id == "inv_2"
        assert await invoices.find_by_number("m_1", "INV-000002") is None

    @pytest.mark.asyncio
    async def test_search_matches_number_customer_and_memo(self, invoices):
        await invoices.save(make_invoice("inv_a", number="INV-000001", customer_id="cus_acme"))
        await invoices.save(make_invoice("inv_b", number="INV-000002", memo="March hosting", minutes=1))
        await invoices.save(make_invoice("inv_c", number="OTHER-7", minutes=2))
        await invoices.save(make_invoice("inv_d", merchant_id="m_2", number="INV-000003", customer_id="cus_acme"))
        await invoices.save(make_invoice("inv_e", number="50%_OFF", minutes=3))

        async def ids(term):
            return [inv.id for inv in await invoices.find_by_merchant("m_1", search=term)]

        assert await ids("inv-") == ["inv_b", "inv_a"]
        assert await ids("  ACME ") == ["inv_a"]
        assert await ids("Hosting") == ["inv_b"]
        assert await ids("%_") == ["inv_e"]
        assert await ids("missing") == []
        assert await invoices.count_by_merchant("m_1", search="inv-") == 2
        assert await invoices.count_by_merchant("m_1", search="   ") == 4
        assert await invoices.count_by_merchant("m_1", status=InvoiceStatus.VOID, search="inv-") == 0


class TestCatalogRepository:

    @pytest.mark.asyncio
    async def test_tax_rate_upsert(self, catalog):
        await catalog.save_tax_rate("m_1", TaxRate(id="vat", rate=Decimal("20")))
        await catalog.save_tax_rate("m_1", TaxRate(id="vat", rate=Decimal("7.5"), inclusive=True, name="Reduced"))
        await catalog.save_tax_rate("m_1", TaxRate(id="gst", rate=Decimal("10")))

        rates = await catalog.list_tax_rates("m_1")

        assert [rate.id for rate in rates] == ["gst", "vat"]
        assert rates[1].rate == Decimal("7.5")
        assert rates[1].inclusive is True
        assert rates[1].name == "Reduced"

    @pytest.mark.asyncio
    async def test_discounts_and_catalog_snapshot(self, catalog):
        await catalog.save_discount("m_1", Discount(id="ten", kind=DiscountKind.PERCENTAGE, value=Decimal("10")))
        await catalog.save_discount("m_1", Discount(id="flat", kind=DiscountKind.AMOUNT, value=Decimal("500")))
        await catalog.save_tax_rate("m_2", TaxRate(id="vat", rate=Decimal("20")))

        snapshot = await catalog.load_catalog("m_1")

        assert set(snapshot.discounts) == {"ten", "flat"}
        assert snapshot.discounts["flat"].kind == DiscountKind.AMOUNT
        assert snapshot.discounts["flat"].value == Decimal("500")
        assert snapshot.discounts["ten"].value == Decimal("10")
        assert snapshot.tax_rates == {}

    @pytest.mark.asyncio
    async def test_catalog_values_stored_exactly(self, catalog):
        large_amount = 2 ** 53 + 1
        await catalog.save_tax_rate("m_1", TaxRate(id="third", rate=Decimal("33.3333")))
        await catalog.save_discount("m_1", Discount(id="big", kind=DiscountKind.AMOUNT, value=large_amount))
        await catalog.save_discount("m_1", Discount(id="pct", kind=DiscountKind.PERCENTAGE, value=Decimal("12.3456")))

        snapshot = await catalog.load_catalog("m_1")

        assert snapshot.tax_rates["third"].rate == Decimal("33.3333")
        assert snapshot.discounts["big"].value == Decimal(large_amount)
        assert int(snapshot.discounts["big"].value) == 9007199254740993
        assert snapshot.discounts["pct"].value == Decimal("12.3456")

    @pytest.mark.asyncio
    async def test_discount_kind_change_replaces_value(self, catalog):
        await catalog.save_discount("m_1", Discount(id="promo", kind=DiscountKind.PERCENTAGE, value=Decimal("15")))
        await catalog.save_discount("m_1", Discount(id="promo", kind=DiscountKind.AMOUNT, value=250))

        [discount] = await catalog.list_discounts("m_1")

        assert discount.kind == DiscountKind.AMOUNT
        assert discount.value == Decimal(250)


class TestSQLInvoiceRepositoryVersioning:
    """Two sessions on one database file, as two worker processes would have."""

    def setup_method(self):
        self.engine = None

    def teardown_method(self):
        if self.engine is not None:
            self.engine.dispose()

    @pytest.mark.asyncio
    async def test_write_committed_after_load_is_a_conflict(self, tmp_path):
        self.engine = create_db_engine(f"sqlite:///{tmp_path / 'invoices.db'}")
        create_all_tables(self.engine)
        session_factory = create_session_factory(self.engine)
        invoices = SQLAlchemyInvoiceRepository(session_factory)
        first = await invoices.save(make_invoice())

        class InterleavedWriterMapper(InvoiceMapper):
            def update_model(self, model, invoice):
                # The other writer commits after our read and before our UPDATE
                with session_factory() as other:
                    other.query(InvoiceModel).filter_by(id=model.id).update(
                        {"version": model.version + 1, "memo": "other writer"}
                    )
                    other.commit()
                super().update_model(model, invoice)

        invoices.mapper = InterleavedWriterMapper()

        with pytest.raises(ConcurrencyConflictError):
            await invoices.save(replace(first, memo="late writer"), expected_version=1)

        found = await invoices.find_by_id("inv_1")
        assert found.memo == "other writer"
        assert found.version == 2
        assert [item.id for item in found.items] == ["item_1", "item_2"]
