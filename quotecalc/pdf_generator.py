"""
PDF Quote Generator.

Renders an export snapshot as a product calculation PDF.
Uses fpdf2 (pure Python, no system dependencies).

Layout:
1. Title, date, exported-by, company name
2. One numbered block per exportable line — name, description,
   dimensions, extras, custom features, price
3. Total price
4. Footer on every page

Lines whose product can't be exported are left out and the numbering
closes up. The total printed is the snapshot total, which covers every line.
"""

from datetime import datetime

from fpdf import FPDF

from .config import settings
from .snapshot import ExportSnapshot, filter_exportable

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


def format_currency(amount, currency: str = None) -> str:
    """Format a number as €1,234.50"""
    symbol = CURRENCY_SYMBOLS.get(currency or settings.CURRENCY, (currency or settings.CURRENCY) + " ")
    try:
        value = float(amount)
    except (ValueError, TypeError):
        value = 0.0
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def _fmt_dims(width, height) -> str:
    """200 cm x 150 cm = 3.00 m²"""
    sqm = (width * height) / 10000 if width and height else 0.0
    return f"{_num(width)} cm x {_num(height)} cm = {sqm:.2f} m²"


def _num(value) -> str:
    """Drop a trailing .0 from whole numbers."""
    try:
        value = float(value)
    except (ValueError, TypeError):
        return "0"
    return str(int(value)) if value.is_integer() else f"{value:g}"


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        text
        .replace("€", "EUR ")  # euro sign is outside latin-1
        .replace("•", "-")    # bullet
        .replace("—", " - ")  # em dash
        .replace("–", "-")    # en dash
        .replace("×", "x")    # multiplication sign
        .replace("“", '"')    # left double quote
        .replace("”", '"')    # right double quote
        .replace("‘", "'")    # left single quote
        .replace("’", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


class QuotePDF(FPDF):
    """Custom PDF class for product calculation documents."""

    def __init__(self, footer_text=""):
        super().__init__()
        self.footer_text = footer_text
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # Title is drawn once on the first page

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "", 9)
        self.set_text_color(120, 120, 120)
        self.cell(0, 10, _safe(self.footer_text), align="L")
        self.set_x(self.l_margin)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="R")
        self.set_text_color(0, 0, 0)

    def separator(self, gray=200, width=0.2):
        self.set_draw_color(gray, gray, gray)
        self.set_line_width(width)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())

    def text_line(self, text, size=10, style="", indent=0):
        self.set_font("Helvetica", style, size)
        self.set_x(self.l_margin + indent)
        self.multi_cell(self.w - self.l_margin - self.r_margin - indent, size * 0.5,
                        _safe(text), new_x="LMARGIN", new_y="NEXT")


def _render_line(pdf: QuotePDF, number: int, line) -> None:
    product = line.product

    pdf.text_line(f"{number}. {product.name}", size=14, style="B")
    pdf.ln(1)
    if product.description:
        pdf.text_line(product.description, size=10)
        pdf.ln(1)

    pdf.text_line(f"Dimensions: {_fmt_dims(line.width, line.height)}", size=10)

    extras = [product.get_extra(extra_id) for extra_id in line.selected_extras]
    extras = [e for e in extras if e is not None]
    if extras:
        pdf.text_line("Extras:", size=10)
        for extra in extras:
            mode = "per m²" if extra.price_per_square_meter else "fixed price"
            text = f"- {extra.name}: {format_currency(extra.price)} {mode}"
            if not extra.use_product_dimensions:
                dim = next((d for d in line.custom_extras if d.extra_id == extra.id), None)
                if dim is not None:
                    text += f" ({_fmt_dims(dim.width, dim.height)})"
            pdf.text_line(text, size=10, indent=6)

    if line.custom_features:
        pdf.text_line("Custom features:", size=10)
        for feature in line.custom_features:
            text = f"- {feature.name}: {format_currency(feature.price)}"
            if feature.is_price_per_square_meter and feature.width and feature.height:
                text += f" ({_fmt_dims(feature.width, feature.height)})"
            pdf.text_line(text, size=10, indent=6)

    pdf.ln(1)
    pdf.text_line(f"Price: {format_currency(line.price)}", size=12)
    pdf.ln(3)
    pdf.separator()
    pdf.ln(5)


def generate_quote_pdf(snapshot: ExportSnapshot, title: str = None) -> bytes:
    """
    Generate a PDF for an export snapshot.

    Args:
        snapshot: ExportSnapshot (live cart or stored export)
        title: document title, defaults to "<COMPANY_NAME> - Product Calculation"

    Returns:
        PDF bytes
    """
    pdf = QuotePDF(footer_text=f"Thank you for choosing {settings.COMPANY_NAME}")
    pdf.alias_nb_pages()
    pdf.add_page()

    # ── Title block ──
    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(0, 10, _safe(title or f"{settings.COMPANY_NAME} - Product Calculation"),
             new_x="LMARGIN", new_y="NEXT")

    try:
        dt = datetime.fromisoformat(snapshot.date.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        dt = datetime.utcnow()
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 6, f"Generated on: {dt.strftime('%d.%m.%Y')}", new_x="LMARGIN", new_y="NEXT")

    if snapshot.username:
        pdf.cell(0, 6, _safe(f"Exported by: {snapshot.username}"), new_x="LMARGIN", new_y="NEXT")

    if snapshot.company_name:
        pdf.cell(0, 6, _safe(f"Company name: {snapshot.company_name}"), new_x="LMARGIN", new_y="NEXT")
        pdf.separator(gray=0, width=0.5)

    pdf.ln(6)

    # ── Lines ──
    for numbered in filter_exportable(snapshot.selected_products):
        _render_line(pdf, numbered.number, numbered.line)

    # ── Total ──
    pdf.separator(gray=100, width=0.5)
    pdf.ln(4)
    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, _safe(f"Total price: {format_currency(snapshot.total_price)}"),
             new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())


def pdf_filename(snapshot: ExportSnapshot) -> str:
    """product-calculation-<company>-YYYY-MM-DD.pdf"""
    company = "-".join((snapshot.company_name or "").lower().split())
    day = (snapshot.date or datetime.utcnow().isoformat())[:10]
    return f"product-calculation-{company + '-' if company else ''}{day}.pdf"
