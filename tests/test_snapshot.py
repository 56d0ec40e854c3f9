"""
Export snapshot tests — deep copies, timestamps, exportability filter, payload layout.
"""

from datetime import datetime
from types import SimpleNamespace

import pytest

from quotecalc.cart import QuoteCart
from quotecalc.pricing import build_line
from quotecalc.schemas import CustomFeatureInput, Product
from quotecalc.snapshot import (
    build_snapshot,
    filter_exportable,
    snapshot_from_payload,
    snapshot_payload,
)


def _line(product_id, name, can_export=True, base_price=100.0):
    product = Product(id=product_id, name=name, category_id=1, base_price=base_price,
                      price_per_square_meter=False, can_export=can_export)
    return build_line(product, 100, 100, [])


def _cart():
    cart = QuoteCart(company_name="ACME")
    cart.add_line(_line(1, "A"))
    cart.add_line(_line(2, "Hidden", can_export=False, base_price=40.0))
    cart.add_line(_line(3, "C", base_price=60.0))
    return cart


def test_snapshot_copies_cart_state():
    snapshot = build_snapshot(_cart(), SimpleNamespace(id=7, username="seller"))
    assert [l.product.name for l in snapshot.selected_products] == ["A", "Hidden", "C"]
    assert snapshot.company_name == "ACME"
    assert snapshot.total_price == pytest.approx(200.0)
    assert snapshot.user_id == 7
    assert snapshot.username == "seller"


def test_snapshot_has_iso_timestamp():
    snapshot = build_snapshot(_cart(), SimpleNamespace(id=1, username="x"))
    parsed = datetime.fromisoformat(snapshot.date)
    assert parsed.tzinfo is not None


def test_snapshot_is_independent_of_later_cart_changes():
    cart = _cart()
    snapshot = build_snapshot(cart, SimpleNamespace(id=1, username="x"))

    cart.add_feature_to_line(0, CustomFeatureInput(name="Fitting", price=15.0))
    cart.remove_line(2)
    cart.set_company_name("Other")

    assert len(snapshot.selected_products) == 3
    assert snapshot.selected_products[0].price == pytest.approx(100.0)
    assert snapshot.selected_products[0].custom_features == []
    assert snapshot.company_name == "ACME"
    assert snapshot.total_price == pytest.approx(200.0)


def test_snapshot_is_frozen():
    snapshot = build_snapshot(_cart(), SimpleNamespace(id=1, username="x"))
    with pytest.raises(AttributeError):
        snapshot.total_price = 0


def test_snapshot_without_actor():
    snapshot = build_snapshot(QuoteCart())
    assert snapshot.user_id is None
    assert snapshot.selected_products == ()
    assert snapshot.total_price == 0


def test_filter_exportable_renumbers_from_one():
    numbered = filter_exportable(_cart().lines)
    assert [(n.number, n.line.product.name) for n in numbered] == [(1, "A"), (2, "C")]


def test_filter_exportable_keeps_everything_when_all_exportable():
    lines = [_line(i, f"P{i}") for i in range(1, 5)]
    assert [n.number for n in filter_exportable(lines)] == [1, 2, 3, 4]


def test_filter_exportable_of_nothing_exportable():
    assert filter_exportable([_line(1, "X", can_export=False)]) == []


def test_payload_layout():
    snapshot = build_snapshot(_cart(), SimpleNamespace(id=1, username="x"))
    payload = snapshot_payload(snapshot)
    assert set(payload) == {"selected_products", "company_name", "total_price", "date"}
    assert len(payload["selected_products"]) == 3  # history keeps non-exportable lines
    assert payload["selected_products"][0]["product"]["name"] == "A"


def test_payload_round_trip_for_rendering():
    snapshot = build_snapshot(_cart(), SimpleNamespace(id=3, username="seller"))
    restored = snapshot_from_payload(snapshot_payload(snapshot), user_id=3, username="seller")
    assert restored == snapshot
