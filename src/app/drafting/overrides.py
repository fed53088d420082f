"""Override layer

Precedence, highest first:
1. explicit per-item override (quantity and/or unit price)
2. service-wide quantity ("bill N weeks", "bill N sessions")
3. resolver base value

Only explicit per-item overrides mark an item as overridden.
"""

from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Mapping, Optional, Union

from libs.money import multiply_money, parse_money_input, round2
from .descriptions import build_description
from .errors import DraftValidationError
from .models import AppliedPrice, ItemOverride, PriceQuote, PricedItem
from .pricing import resolve
from .sources import BillableSource


def _non_negative(value, field: str) -> Decimal:
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise DraftValidationError(f"{field} must be a number, got {value!r}", code="INVALID_OVERRIDE")
    if not number.is_finite() or number < 0:
        raise DraftValidationError(f"{field} must be a non-negative number, got {value!r}", code="INVALID_OVERRIDE")
    return number


def apply_override(
    base: PriceQuote,
    override: Optional[ItemOverride] = None,
    global_quantity: Optional[Decimal] = None,
) -> AppliedPrice:
    quantity = base.quantity
    unit_price = base.unit_price
    is_overridden = False

    if global_quantity is not None:
        quantity = _non_negative(global_quantity, "quantity")

    if override is not None:
        if override.quantity is not None:
            quantity = _non_negative(override.quantity, "quantity")
            is_overridden = True
        if override.unit_price is not None:
            unit_price = _non_negative(override.unit_price, "unit_price")
            is_overridden = True

    return AppliedPrice(quantity=quantity, unit_price=unit_price, is_overridden=is_overridden)


def implied_unit_price(amount: Decimal, quantity: Decimal) -> Decimal:
    """Unit price that reproduces a typed line total, rounded to the cent"""
    if quantity > 0:
        return round2(amount / quantity)
    return round2(amount)


def override_from_amount(amount: Union[str, Decimal], quantity: Decimal) -> ItemOverride:
    """
    Convert a typed line total into a quantity-preserving unit-price override

    Raises:
        DraftValidationError: amount is blank, non-numeric or negative
    """
    if isinstance(amount, str):
        parsed = parse_money_input(amount)
        if parsed is None:
            raise DraftValidationError(f"Invalid amount: {amount!r}", code="INVALID_OVERRIDE")
    else:
        parsed = _non_negative(amount, "amount")

    quantity = _non_negative(quantity, "quantity")
    return ItemOverride(quantity=quantity, unit_price=implied_unit_price(parsed, quantity))


def price_source(
    source: BillableSource,
    override: Optional[ItemOverride] = None,
    global_quantity: Optional[Decimal] = None,
) -> PricedItem:
    applied = apply_override(resolve(source), override, global_quantity)
    return PricedItem(
        item_id=source.item_id,
        kind=source.kind,
        source=source,
        customer_id=source.customer_id,
        customer_name=source.customer_name,
        service_code=source.service_code,
        quantity=applied.quantity,
        unit_price=applied.unit_price,
        final_amount=multiply_money(applied.quantity, applied.unit_price),
        description=build_description(source, applied.quantity, applied.unit_price),
        is_overridden=applied.is_overridden,
    )


def price_sources(
    sources: Iterable[BillableSource],
    overrides: Optional[Mapping[str, ItemOverride]] = None,
    global_quantities: Optional[Mapping[str, Decimal]] = None,
) -> List[PricedItem]:
    """
    Price every source, applying per-item overrides (keyed by item_id)
    and service-wide quantities (keyed by service code)
    """
    overrides = overrides or {}
    global_quantities = global_quantities or {}

    return [
        price_source(
            source,
            override=overrides.get(source.item_id),
            global_quantity=global_quantities.get(source.service_code) if source.service_code else None,
        )
        for source in sources
    ]
