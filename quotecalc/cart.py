"""
Quote Cart — the ordered collection of committed lines.

Owns the line order and the company name. The total is always derived
from the lines; it is never stored. Every operation validates before it
mutates, so a failed call leaves the cart exactly as it was.
"""

import logging
from typing import Optional

from . import pricing
from .errors import IndexOutOfRange, InvalidDimension, MissingDimension
from .schemas import CustomFeature, CustomFeatureInput, QuoteLine

logger = logging.getLogger(__name__)


class QuoteCart:
    """One user's live quote."""

    def __init__(self, lines: list = None, company_name: str = ""):
        self._lines: list[QuoteLine] = list(lines or [])
        self.company_name = company_name

    # --- Read access ---

    @property
    def lines(self) -> tuple:
        return tuple(self._lines)

    @property
    def total_price(self) -> float:
        """Sum of line prices, recomputed on every read."""
        return round(sum(line.price for line in self._lines), 2)

    def __len__(self) -> int:
        return len(self._lines)

    def _check_index(self, index: int):
        if not isinstance(index, int) or index < 0 or index >= len(self._lines):
            raise IndexOutOfRange(f"No line at index {index} (cart has {len(self._lines)} lines)")

    # --- Lines ---

    def add_line(self, line: QuoteLine) -> QuoteLine:
        """
        Append an already-priced line.

        Refuses lines whose own-size extras lack positive dimensions; the
        calculator prices those flat, which must never reach the cart. Lines
        without a positive size or price are refused too.
        """
        if line.width <= 0 or line.height <= 0:
            raise InvalidDimension(
                f"Line for '{line.product.name}' needs a width and height greater than zero "
                f"(got {line.width} x {line.height})"
            )
        if line.price <= 0:
            raise InvalidDimension(f"Line for '{line.product.name}' must have a price greater than zero")

        missing = pricing.missing_extra_dimensions(line.product, line.selected_extras, line.custom_extras)
        if missing:
            raise MissingDimension(
                f"Line for '{line.product.name}' is missing dimensions for extras {missing}",
                extra_ids=missing,
            )
        self._lines.append(line)
        logger.info("Added '%s' to cart at %.2f (total %.2f)", line.product.name, line.price, self.total_price)
        return line

    def remove_line(self, index: int) -> QuoteLine:
        self._check_index(index)
        return self._lines.pop(index)

    def move_up(self, index: int):
        """Swap with the line above. No-op at the top."""
        if index <= 0 or index >= len(self._lines):
            return
        self._lines[index - 1], self._lines[index] = self._lines[index], self._lines[index - 1]

    def move_down(self, index: int):
        """Swap with the line below. No-op at the bottom."""
        if index < 0 or index >= len(self._lines) - 1:
            return
        self._lines[index], self._lines[index + 1] = self._lines[index + 1], self._lines[index]

    # --- Custom features on committed lines ---

    def add_feature_to_line(self, line_index: int, feature: CustomFeatureInput) -> CustomFeature:
        """
        Resolve a custom feature against the line's committed size and attach it.

        The line price grows by exactly the resolved feature price.
        """
        self._check_index(line_index)
        line = self._lines[line_index]

        created = pricing.create_custom_feature(line.product.id, feature, line.width, line.height)

        self._lines[line_index] = line.model_copy(update={
            "custom_features": [*line.custom_features, created],
            "price": round(line.price + created.price, 2),
        })
        return created

    def remove_feature_from_line(self, line_index: int, feature_id: str) -> Optional[CustomFeature]:
        """Detach a feature by id. Unknown ids are ignored."""
        self._check_index(line_index)
        line = self._lines[line_index]

        removed = next((f for f in line.custom_features if f.id == feature_id), None)
        if removed is None:
            return None

        self._lines[line_index] = line.model_copy(update={
            "custom_features": [f for f in line.custom_features if f.id != feature_id],
            "price": round(line.price - removed.price, 2),
        })
        return removed

    # --- Misc ---

    def set_company_name(self, name: str):
        self.company_name = name or ""

    def clear(self):
        self._lines = []
        self.company_name = ""

    # --- Persistence ---

    def to_dict(self) -> dict:
        return {
            "selected_products": [line.model_dump(mode="json") for line in self._lines],
            "company_name": self.company_name,
            "total_price": self.total_price,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteCart":
        data = data or {}
        lines = [QuoteLine.model_validate(item) for item in data.get("selected_products", [])]
        return cls(lines=lines, company_name=data.get("company_name", ""))
