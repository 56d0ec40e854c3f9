"""
Export Snapshot Builder.

Turns the live cart into an immutable, timestamped copy for export history
and the PDF renderer. No pricing happens here, only copying and filtering.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .cart import QuoteCart
from .schemas import QuoteLine


@dataclass(frozen=True)
class ExportSnapshot:
    """A frozen copy of a cart at export time."""
    selected_products: tuple
    company_name: str
    total_price: float
    date: str
    user_id: Optional[int] = None
    username: Optional[str] = None


@dataclass(frozen=True)
class NumberedLine:
    """A line as printed: numbering starts at 1 and skips nothing."""
    number: int
    line: QuoteLine


def build_snapshot(cart: QuoteCart, actor=None) -> ExportSnapshot:
    """
    Deep-copy the cart's lines, company name and total and stamp the time.

    All lines are kept, exportable or not; export history stores
    everything for audit.

    actor is the exporting user (anything with .id and .username).
    """
    lines = tuple(line.model_copy(deep=True) for line in cart.lines)
    return ExportSnapshot(
        selected_products=lines,
        company_name=cart.company_name,
        total_price=cart.total_price,
        date=datetime.now(timezone.utc).isoformat(),
        user_id=getattr(actor, "id", None),
        username=getattr(actor, "username", None),
    )


def filter_exportable(lines) -> list:
    """Drop lines whose product can't be exported and renumber from 1."""
    exportable = [line for line in lines if line.product.can_export is not False]
    return [NumberedLine(number=i, line=line) for i, line in enumerate(exportable, start=1)]


def snapshot_payload(snapshot: ExportSnapshot) -> dict:
    """The persisted layout: {selected_products, company_name, total_price, date}."""
    return {
        "selected_products": [line.model_dump(mode="json") for line in snapshot.selected_products],
        "company_name": snapshot.company_name,
        "total_price": snapshot.total_price,
        "date": snapshot.date,
    }


def snapshot_from_payload(payload: dict, user_id: int = None, username: str = None) -> ExportSnapshot:
    """Rebuild a snapshot from a stored export row (for re-rendering its PDF)."""
    return ExportSnapshot(
        selected_products=tuple(QuoteLine.model_validate(item) for item in payload.get("selected_products", [])),
        company_name=payload.get("company_name", ""),
        total_price=payload.get("total_price", 0.0),
        date=payload.get("date", ""),
        user_id=user_id,
        username=username,
    )
