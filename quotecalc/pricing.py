"""
Pricing Calculator — turns raw user input into a priced quote line.

Pure math, no state, no I/O. Every price in the cart comes from here; the
cart never computes a price on its own.

Dimensions are centimeters, areas are square meters:
    area = width * height / 10000

Line price = base contribution + extras contributions + custom features.
Prices are rounded to cents; areas are kept exact.
"""

import logging
import uuid

from .errors import InvalidDimension, MissingDimension
from .schemas import CustomFeature, CustomFeatureInput, ExtraDimension, Product, QuoteLine

logger = logging.getLogger(__name__)

AREA_DIVISOR = 10000.0  # cm² → m²


def compute_area(width: float, height: float) -> float:
    """Area in m² from centimeter dimensions. Both must be > 0."""
    if width is None or height is None or width <= 0 or height <= 0:
        raise InvalidDimension(f"Width and height must be greater than zero (got {width} x {height})")
    return (width * height) / AREA_DIVISOR


def _has_area(width, height) -> bool:
    return bool(width and height and width > 0 and height > 0)


def _find_dimension(extra_dimensions: list, extra_id: int):
    for dim in extra_dimensions or []:
        if dim.extra_id == extra_id:
            return dim
    return None


def extra_contribution(extra, line_area: float, extra_dimensions: list) -> float:
    """
    Price of one selected extra.

    Extras that use the product's dimensions scale with the line area.
    Extras with their own dimensions scale with their own area; without
    usable dimensions they fall back to the flat price whatever their flag.
    """
    if extra.use_product_dimensions:
        return line_area * extra.price if extra.price_per_square_meter else extra.price

    dim = _find_dimension(extra_dimensions, extra.id)
    if dim is not None and _has_area(dim.width, dim.height):
        custom_area = compute_area(dim.width, dim.height)
        return custom_area * extra.price if extra.price_per_square_meter else extra.price

    # Fallback to fixed price if no dimensions
    return extra.price


def compute_line_price(
    product: Product,
    width: float,
    height: float,
    selected_extra_ids: list,
    extra_dimensions: list = None,
    pending_features: list = None,
) -> tuple:
    """
    Price a pending line.

    Args:
        product: catalog product (trusted as given)
        width, height: line dimensions in cm
        selected_extra_ids: ids of the extras the buyer ticked; ids that
            don't belong to the product are ignored
        extra_dimensions: ExtraDimension list for extras with their own size
        pending_features: CustomFeature list, already resolved

    Returns:
        (price, area) — (0.0, 0.0) when the line has no usable dimensions.
        area is the product's own area, not any extra's.
    """
    if not _has_area(width, height):
        return 0.0, 0.0

    area = compute_area(width, height)

    price = area * product.base_price if product.price_per_square_meter else product.base_price

    for extra_id in selected_extra_ids or []:
        extra = product.get_extra(extra_id)
        if extra is None:
            continue
        price += extra_contribution(extra, area, extra_dimensions)

    for feature in pending_features or []:
        price += feature.price

    return round(price, 2), area


def resolve_feature_price(feature: CustomFeatureInput, line_width: float, line_height: float) -> float:
    """
    Resolved price of a custom feature.

    Flat features cost what was entered. Area-priced features multiply the
    entered rate by the line's area (use_product_dimensions) or by their
    own area; the dimensions used must be > 0 or MissingDimension is raised.
    """
    if not feature.is_price_per_square_meter:
        return round(feature.price, 2)

    if feature.use_product_dimensions:
        width, height = line_width, line_height
    else:
        width, height = feature.width, feature.height

    if not _has_area(width, height):
        raise MissingDimension(
            f"Custom feature '{feature.name}' is priced per m² and needs a width and height"
        )
    return round(compute_area(width, height) * feature.price, 2)


def create_custom_feature(product_id: int, feature: CustomFeatureInput,
                          line_width: float, line_height: float) -> CustomFeature:
    """Resolve a feature's price once and give it a fresh id."""
    price = resolve_feature_price(feature, line_width, line_height)
    if feature.use_product_dimensions:
        width, height = line_width, line_height
    else:
        width, height = feature.width, feature.height
    return CustomFeature(
        id=uuid.uuid4().hex,
        product_id=product_id,
        name=feature.name,
        unit_price=feature.price,
        price=price,
        width=width,
        height=height,
        is_price_per_square_meter=feature.is_price_per_square_meter,
        use_product_dimensions=feature.use_product_dimensions,
    )


def missing_extra_dimensions(product: Product, selected_extra_ids: list, extra_dimensions: list) -> list:
    """Ids of selected extras that need their own size but don't have a usable one."""
    missing = []
    for extra_id in selected_extra_ids or []:
        extra = product.get_extra(extra_id)
        if extra is None or extra.use_product_dimensions:
            continue
        dim = _find_dimension(extra_dimensions, extra_id)
        if dim is None or not _has_area(dim.width, dim.height):
            missing.append(extra_id)
    return missing


def _normalize_dimensions(extra_dimensions: list) -> list:
    """Copy ExtraDimension entries with square_meters filled in."""
    normalized = []
    for dim in extra_dimensions or []:
        sqm = compute_area(dim.width, dim.height) if _has_area(dim.width, dim.height) else 0.0
        normalized.append(ExtraDimension(
            extra_id=dim.extra_id, width=dim.width, height=dim.height, square_meters=sqm,
        ))
    return normalized


def preview_line(product: Product, width: float, height: float, selected_extra_ids: list,
                 extra_dimensions: list = None, feature_inputs: list = None) -> dict:
    """
    Lenient price preview for a line that is still being edited.

    Never raises: extras missing their dimensions are priced flat and
    listed in missing_dimensions, features that can't be resolved yet are
    left out of the price.
    """
    features = []
    for feature_input in feature_inputs or []:
        try:
            features.append(create_custom_feature(product.id, feature_input, width, height))
        except MissingDimension:
            continue

    price, area = compute_line_price(product, width, height, selected_extra_ids,
                                     extra_dimensions, features)
    missing = missing_extra_dimensions(product, selected_extra_ids, extra_dimensions)
    return {
        "price": price,
        "square_meters": area,
        "missing_dimensions": missing,
        "can_commit": price > 0 and not missing,
    }


def build_line(product: Product, width: float, height: float, selected_extra_ids: list,
               extra_dimensions: list = None, feature_inputs: list = None) -> QuoteLine:
    """
    Build a committable, fully-priced QuoteLine.

    Commit gate. Unlike compute_line_price this is strict:
    - width/height must be > 0 (InvalidDimension)
    - every selected extra with its own size needs positive dimensions
      (MissingDimension, with the offending extra ids)
    - area-priced custom features need usable dimensions (MissingDimension)
    - the resulting price must be > 0 (InvalidDimension)
    """
    compute_area(width, height)

    missing = missing_extra_dimensions(product, selected_extra_ids, extra_dimensions)
    if missing:
        raise MissingDimension(
            f"Enter dimensions for all extras that don't use the product size (extras {missing})",
            extra_ids=missing,
        )

    features = [
        create_custom_feature(product.id, feature_input, width, height)
        for feature_input in feature_inputs or []
    ]

    # Unknown extra ids are dropped so the stored selection matches what was priced
    known_extras = [extra_id for extra_id in selected_extra_ids or [] if product.get_extra(extra_id)]

    price, area = compute_line_price(product, width, height, known_extras, extra_dimensions, features)
    if price <= 0:
        raise InvalidDimension("Line price must be greater than zero")

    logger.debug("Priced line for product %s: %.2f (%.4f m²)", product.id, price, area)

    return QuoteLine(
        product=product.model_copy(deep=True),
        width=width,
        height=height,
        square_meters=area,
        selected_extras=known_extras,
        custom_extras=_normalize_dimensions(extra_dimensions),
        price=price,
        custom_features=features,
    )
