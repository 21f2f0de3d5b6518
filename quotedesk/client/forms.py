"""
client/forms.py — Counter-offer form parsing.

Form inputs arrive as strings. Numbers are read by prefix the way the
browser form reads them ("12.5kg" → 12.5, "abc" → default). Integers also
accept a hex literal ("0x1A" → 26); floats do not ("0x1A" → 0.0).

Business Rules:
- Unparseable price → 0.0, unparseable moq → 1
- When price or moq is edited, totalPrice is recomputed as
  price × max(moq, requiredQty), rounded to cents
- When neither is edited, totalPrice is sent back unchanged
- Fields left out of the form keep the quotation's current value
"""

import math
import re
from collections.abc import Mapping

from pydantic.alias_generators import to_camel

from ..schemas.quotations import QuotationUpdate
from ..utils.pricing import compute_total_price
from .api import endpoint_for

_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"[+-]?\d+")
_HEX_PREFIX = re.compile(r"([+-]?)0[xX]([0-9a-fA-F]+)")

__all__ = ["CounterOfferForm", "endpoint_for", "parse_float", "parse_int"]


def parse_float(value, default: float = 0.0) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) else default
    text = str(value or "").lstrip()
    m = _FLOAT_PREFIX.match(text)
    return float(m.group()) if m else default


def parse_int(value, default: int = 1) -> int:
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value or "").lstrip()
    hex_match = _HEX_PREFIX.match(text)
    if hex_match:
        sign, digits = hex_match.groups()
        return int(sign + digits, 16)
    m = _INT_PREFIX.match(text)
    return int(m.group()) if m else default


def _field(fields: Mapping, name: str):
    """Form fields may be keyed camelCase (as posted) or snake_case."""
    if name in fields:
        return fields[name]
    return fields.get(to_camel(name))


def _has(fields: Mapping, name: str) -> bool:
    return name in fields or to_camel(name) in fields


class CounterOfferForm(QuotationUpdate):
    """QuotationUpdate built from raw form fields on an existing quotation."""

    @classmethod
    def from_form(cls, quotation, fields: Mapping) -> "CounterOfferForm":
        repriced = _has(fields, "price_per_unit") or _has(fields, "moq")
        price = (
            parse_float(_field(fields, "price_per_unit"))
            if _has(fields, "price_per_unit") else quotation.price_per_unit
        )
        moq = parse_int(_field(fields, "moq")) if _has(fields, "moq") else quotation.moq
        if repriced:
            total = float(compute_total_price(price, moq, quotation.required_qty))
        else:
            total = quotation.total_price

        def text(name, current):
            return _field(fields, name) if _has(fields, name) else current

        valid_until = text("valid_until", quotation.valid_until)
        return cls(
            price_per_unit=price,
            total_price=total,
            moq=moq,
            lead_time=text("lead_time", quotation.lead_time),
            payment_terms=text("payment_terms", quotation.payment_terms),
            valid_until=valid_until or None,
            message=text("message", quotation.message),
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
