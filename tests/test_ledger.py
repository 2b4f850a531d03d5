from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.data.catalog import Catalog
from storefront.domain.ledger import PricingLedger
from storefront.domain.schemas import CatalogItem


@pytest.mark.parametrize(
    "regular, sale, expected, on_sale",
    [
        ("12.00", "10.00", "10.00", True),
        ("12.00", "0.00", "12.00", False),    # 0 = brak promocji
        ("12.00", "12.00", "12.00", False),
        ("12.00", "15.00", "12.00", False),
        ("0.00", "0.00", "0.00", False),
    ],
)
def test_effective_price(regular, sale, expected, on_sale):
    item = CatalogItem(id="X", name="X", regular_price=Decimal(regular), sale_price=Decimal(sale))
    assert item.effective_price == Decimal(expected)
    assert item.on_sale is on_sale


def test_catalog_item_is_immutable(item_a):
    with pytest.raises(ValidationError):
        item_a.sale_price = Decimal("1.00")


def test_add_accumulates_quantity(ledger, item_a):
    ledger.add_line(item_a, 2)
    ledger.add_line(item_a, 3)

    assert ledger.quantity_of("A") == 5
    assert len(ledger) == 1


@pytest.mark.parametrize("quantity", [0, -1, -10])
def test_add_non_positive_is_noop(ledger, item_a, quantity):
    ledger.add_line(item_a, quantity)

    assert ledger.is_empty()


def test_remove_absent_item_is_noop(ledger, item_a, item_b):
    ledger.add_line(item_a, 1)
    ledger.remove_line(item_b, 1)

    assert ledger.quantity_of("A") == 1
    assert ledger.quantity_of("B") == 0


def test_remove_decrements_or_deletes(ledger, item_a):
    ledger.add_line(item_a, 5)

    ledger.remove_line(item_a, 2)
    assert ledger.quantity_of("A") == 3

    ledger.remove_line(item_a, 10)
    assert ledger.quantity_of("A") == 0
    assert ledger.is_empty()


def test_lines_keep_insertion_order(ledger, item_a, item_b):
    ledger.add_line(item_b, 1)
    ledger.add_line(item_a, 1)
    ledger.add_line(item_b, 1)

    assert [l.item.id for l in ledger.lines()] == ["B", "A"]
    assert [(l.item_id, l.quantity) for l in ledger.order_lines()] == [("B", 2), ("A", 1)]


def test_lines_are_copies(ledger, item_a):
    ledger.add_line(item_a, 1)
    ledger.lines()[0].quantity = 99

    assert ledger.quantity_of("A") == 1


def test_keys_compare_by_identifier(ledger, item_a):
    same_id = CatalogItem(id="A", name="Item A", regular_price=Decimal("12.00"), sale_price=Decimal("10.00"))
    ledger.add_line(item_a, 1)
    ledger.add_line(same_id, 1)

    assert len(ledger) == 1
    assert ledger.quantity_of("A") == 2


@pytest.mark.parametrize("quantity", [1, 2, 7])
def test_add_then_remove_restores_previous_state(ledger, item_a, item_b, quantity):
    ledger.add_line(item_b, 3)
    before = [(l.item_id, l.quantity) for l in ledger.order_lines()]

    ledger.add_line(item_a, quantity)
    ledger.remove_line(item_a, quantity)

    assert [(l.item_id, l.quantity) for l in ledger.order_lines()] == before


def test_pricing_scenario(ledger, item_a):
    ledger.add_line(item_a, 2)

    assert ledger.subtotal() == Decimal("20.00")
    assert ledger.tax_amount() == Decimal("1.60")
    assert ledger.total() == Decimal("21.60")


def test_total_is_subtotal_with_tax(ledger):
    for item in Catalog().all():
        ledger.add_line(item, 3)

    assert abs(ledger.total() - ledger.subtotal() * Decimal("1.08")) <= Decimal("0.01")


def test_custom_tax_rate(item_b):
    ledger = PricingLedger(tax_rate=Decimal("0.10"))
    ledger.add_line(item_b, 2)

    assert ledger.subtotal() == Decimal("11.00")
    assert ledger.tax_amount() == Decimal("1.10")


def test_empty_ledger_totals(ledger):
    assert ledger.is_empty()
    assert ledger.subtotal() == Decimal("0")
    assert ledger.total() == Decimal("0")


def test_clear(ledger, item_a, item_b):
    ledger.add_line(item_a, 1)
    ledger.add_line(item_b, 4)

    ledger.clear()

    assert ledger.is_empty()
    assert ledger.lines() == []


def test_catalog_lookup_is_case_insensitive():
    catalog = Catalog()

    assert catalog.get("m003").name == "Wireless Mouse"
    assert catalog.get(" M003 ").effective_price == Decimal("25.00")
    assert catalog.get("M999") is None
    assert len(catalog.all()) == 5
