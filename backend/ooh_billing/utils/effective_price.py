"""
Effective price resolution for bookable line items.

Line items carry several overlapping price fields. The authoritative monthly
rate is the first candidate, in a fixed precedence order, whose value is
strictly positive. A field set to 0 means "not yet negotiated", not "free".
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, NamedTuple, Optional, Sequence, Tuple


ZERO = Decimal("0")

# Highest precedence first; card_rate is the catalogue fallback
PLAN_PRICE_FIELDS: Tuple[str, ...] = ("negotiated_price", "negotiated_rate", "sales_price", "card_rate")
CAMPAIGN_PRICE_FIELDS: Tuple[str, ...] = ("negotiated_rate", "final_price", "card_rate")

PRICE_FIELDS_BY_CONTEXT = {
    "plan": PLAN_PRICE_FIELDS,
    "campaign": CAMPAIGN_PRICE_FIELDS,
}

# Where a negotiated rate is stored: the top-precedence field of each context
NEGOTIATED_FIELD_BY_CONTEXT = {
    context: fields[0] for context, fields in PRICE_FIELDS_BY_CONTEXT.items()
}


class ResolvedPrice(NamedTuple):
    """The winning price and the field it came from (None when nothing was set)."""
    value: Decimal
    source_field: Optional[str]


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a stored numeric value to Decimal, or None if it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def resolve_first_positive(candidates: Iterable[Tuple[str, Any]]) -> ResolvedPrice:
    """Return the first (field, value) candidate whose value is strictly positive."""
    for field_name, raw_value in candidates:
        value = to_decimal(raw_value)
        if value is not None and value > ZERO:
            return ResolvedPrice(value=value, source_field=field_name)
    return ResolvedPrice(value=ZERO, source_field=None)


def _field_value(item: Any, field_name: str) -> Any:
    if item is None:
        return None
    if isinstance(item, dict):
        return item.get(field_name)
    return getattr(item, field_name, None)


def price_candidates(item: Any, fields: Sequence[str]) -> list:
    return [(field_name, _field_value(item, field_name)) for field_name in fields]


def resolve_effective_price(item: Any, context: str = "plan") -> ResolvedPrice:
    """Resolve the effective monthly price of a plan or campaign line item."""
    try:
        fields = PRICE_FIELDS_BY_CONTEXT[context]
    except KeyError:
        raise ValueError(f"Unknown pricing context: {context!r}") from None
    return resolve_first_positive(price_candidates(item, fields))


def get_effective_plan_price(item: Any) -> Decimal:
    """negotiated_price, then negotiated_rate, then sales_price, then card_rate."""
    return resolve_effective_price(item, "plan").value


def get_effective_campaign_price(item: Any) -> Decimal:
    """negotiated_rate, then final_price, then card_rate."""
    return resolve_effective_price(item, "campaign").value
