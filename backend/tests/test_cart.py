"""Tests for the POS cart helpers."""

from decimal import Decimal

import pytest

from app.services.cart import Cart, cart_total, line_total

from factories import make_business, make_product


@pytest.fixture
def widget():
    return make_product(make_business(), name="Widget", price="10.00")


def test_line_total_rounds_to_cents():
    assert line_total(Decimal("0.333"), 3) == Decimal("1.00")
    assert line_total(Decimal("2.50"), 4) == Decimal("10.00")


def test_adding_same_product_merges_lines(widget):
    cart = Cart()
    cart.add_product(widget)
    cart.add_product(widget)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2
    assert cart.total == Decimal("20.00")


def test_custom_item_has_no_product(widget):
    cart = Cart()
    cart.add_product(widget)
    item = cart.add_custom_item("Gift wrap", Decimal("1.50"))

    assert item.product_id is None
    assert len(cart.items) == 2
    assert cart.total == Decimal("11.50")


@pytest.mark.parametrize(("name", "price"), [("", Decimal("1.00")), ("Tip", Decimal("-1.00"))])
def test_custom_item_validation(name, price):
    with pytest.raises(ValueError):
        Cart().add_custom_item(name, price)


def test_quantity_change_to_zero_removes_line(widget):
    cart = Cart()
    item = cart.add_product(widget)
    cart.update_quantity(item.id, +2)
    assert item.quantity == 3

    cart.update_quantity(item.id, -5)
    assert cart.is_empty()


def test_quantity_change_unknown_line(widget):
    with pytest.raises(KeyError):
        Cart().update_quantity("missing", 1)


def test_remove_and_clear(widget):
    cart = Cart()
    first = cart.add_product(widget)
    cart.add_custom_item("Bag", Decimal("0.20"))

    cart.remove(first.id)
    assert [i.name for i in cart.items] == ["Bag"]

    cart.clear()
    assert cart.total == Decimal("0.00")


def test_sale_lines_payload(widget):
    cart = Cart()
    cart.add_product(widget)
    lines = cart.to_sale_lines()

    assert lines == [
        {"name": "Widget", "unit_price": Decimal("10.00"), "quantity": 1, "product_id": widget.id}
    ]
    assert cart_total(cart.items) == Decimal("10.00")
