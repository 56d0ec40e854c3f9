"""
PDF output tests — valid bytes, currency formatting, filenames, exportable filtering.
"""

import zlib
import re
from types import SimpleNamespace

import pytest

from quotecalc.cart import QuoteCart
from quotecalc.pdf_generator import format_currency, generate_quote_pdf, pdf_filename
from quotecalc.pricing import build_line
from quotecalc.schemas import CustomFeatureInput, ExtraDimension, ExtraOption, Product
from quotecalc.snapshot import build_snapshot


def _snapshot(company="ACME Shading", hidden=False):
    awning = Product(
        id=1, name="Awning", description="Retractable awning", category_id=1,
        base_price=50.0, price_per_square_meter=True,
        extras=[
            ExtraOption(id=10, name="Motor cover", price=10.0, price_per_square_meter=True),
            ExtraOption(id=20, name="Side panel", price=10.0, price_per_square_meter=True,
                        use_product_dimensions=False),
        ],
    )
    cart = QuoteCart(company_name=company)
    cart.add_line(build_line(awning, 200, 100, [10, 20],
                             [ExtraDimension(extra_id=20, width=100, height=50)]))
    cart.add_feature_to_line(0, CustomFeatureInput(name="Coating", price=5.0,
                                                   is_price_per_square_meter=True,
                                                   use_product_dimensions=True))
    if hidden:
        secret = Product(id=2, name="Secret Prototype", category_id=1, base_price=40.0,
                         price_per_square_meter=False, can_export=False)
        cart.add_line(build_line(secret, 100, 100, []))
        cart.move_up(1)
    return build_snapshot(cart, SimpleNamespace(id=1, username="seller"))


def _pdf_text(pdf_bytes) -> str:
    """Inflate every content stream so rendered text can be searched."""
    chunks = []
    for match in re.finditer(rb"stream\r?\n(.*?)\r?\nendstream", bytes(pdf_bytes), re.S):
        data = match.group(1)
        try:
            chunks.append(zlib.decompress(data).decode("latin-1"))
        except zlib.error:
            chunks.append(data.decode("latin-1"))
    return "\n".join(chunks)


# ============================================================
# Currency formatting
# ============================================================

def test_format_currency_euro():
    assert format_currency(1234.5) == "€1,234.50"


def test_format_currency_negative_and_bad_input():
    assert format_currency(-10) == "-€10.00"
    assert format_currency("abc") == "€0.00"
    assert format_currency(None) == "€0.00"


def test_format_currency_other_code():
    assert format_currency(5, "USD") == "$5.00"
    assert format_currency(5, "RON") == "RON 5.00"


# ============================================================
# PDF generation
# ============================================================

def test_pdf_generates_valid_bytes():
    pdf_bytes = generate_quote_pdf(_snapshot())
    assert isinstance(pdf_bytes, bytes)
    assert len(pdf_bytes) > 1000
    assert pdf_bytes[:5] == b"%PDF-"


def test_pdf_contains_line_details():
    text = _pdf_text(generate_quote_pdf(_snapshot()))
    assert "1. Awning" in text
    assert "Motor cover" in text
    assert "Side panel" in text
    assert "Coating" in text
    assert "ACME Shading" in text
    assert "seller" in text


def test_pdf_leaves_out_non_exportable_lines():
    text = _pdf_text(generate_quote_pdf(_snapshot(hidden=True)))
    assert "Secret Prototype" not in text
    assert "1. Awning" in text
    assert "2. Awning" not in text


def test_pdf_without_company_name():
    pdf_bytes = generate_quote_pdf(_snapshot(company=""))
    assert pdf_bytes[:5] == b"%PDF-"


def test_pdf_of_many_lines_spans_pages():
    product = Product(id=1, name="Door", description="Garage door " * 20, category_id=1,
                      base_price=100.0, price_per_square_meter=False)
    cart = QuoteCart()
    for _ in range(25):
        cart.add_line(build_line(product, 100, 100, []))
    text = _pdf_text(generate_quote_pdf(build_snapshot(cart, SimpleNamespace(id=1, username="x"))))
    assert "Page 2/" in text
    assert "25. Door" in text


# ============================================================
# Filenames
# ============================================================

def test_pdf_filename_with_company():
    snapshot = _snapshot(company="ACME  Shading Co")
    assert pdf_filename(snapshot) == f"product-calculation-acme-shading-co-{snapshot.date[:10]}.pdf"


def test_pdf_filename_without_company():
    snapshot = _snapshot(company="")
    assert pdf_filename(snapshot) == f"product-calculation-{snapshot.date[:10]}.pdf"


@pytest.mark.parametrize("amount,expected", [(0, "€0.00"), (0.004, "€0.00"), (1000000, "€1,000,000.00")])
def test_format_currency_rounding(amount, expected):
    assert format_currency(amount) == expected
