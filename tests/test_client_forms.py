"""
test_client_forms.py — Tests for quotedesk/client/forms.py

Form number parsing, total recompute, and endpoint selection.

Called by: pytest
Depends on: quotedesk.client.forms, quotedesk.utils.pricing
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from quotedesk.client.forms import CounterOfferForm, endpoint_for, parse_float, parse_int
from quotedesk.schemas.quotations import QuotationOut
from quotedesk.utils.pricing import compute_total_price


@pytest.fixture()
def quotation():
    return QuotationOut(
        id="q-42",
        type="rfq",
        status="sent",
        title="Stainless bolts",
        price_per_unit=10.0,
        total_price=1000.0,
        moq=100,
        lead_time="15 days",
        payment_terms="T/T",
        message="first offer",
    )


@pytest.mark.parametrize("raw,expected", [
    ("12.50", 12.5),
    ("  7", 7.0),
    ("12.5kg", 12.5),
    (".5", 0.5),
    ("1e2", 100.0),
    ("-3.25", -3.25),
    (4, 4.0),
])
def test_parse_float_prefix(raw, expected):
    assert parse_float(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", None, "Infinity", "$12"])
def test_parse_float_default(raw):
    assert parse_float(raw) == 0.0


@pytest.mark.parametrize("raw,expected", [("100", 100), ("12.9", 12), (" 5 pcs", 5), (7.8, 7)])
def test_parse_int_prefix(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("raw", ["", "pcs", None])
def test_parse_int_default(raw):
    assert parse_int(raw) == 1


@pytest.mark.parametrize("raw,expected", [("0x1A", 26), ("0XfF", 255), ("-0x10", -16), ("0x1Ag", 26)])
def test_parse_int_reads_hex_literals(raw, expected):
    assert parse_int(raw) == expected


def test_parse_float_does_not_read_hex():
    assert parse_float("0x1A") == 0.0


def test_total_price_rounds_to_cents():
    assert compute_total_price(12.50, 100) == Decimal("1250.00")
    assert compute_total_price("0.335", 3) == Decimal("1.01")


def test_total_price_uses_required_quantity_when_larger():
    assert compute_total_price(2, 10, required_qty=50) == Decimal("100.00")
    assert compute_total_price(2, 80, required_qty=50) == Decimal("160.00")


def test_from_form_recomputes_total(quotation):
    form = CounterOfferForm.from_form(quotation, {"pricePerUnit": "12.50", "moq": "100"})
    assert form.price_per_unit == 12.5
    assert form.moq == 100
    assert form.total_price == 1250.0


def test_from_form_keeps_untouched_fields(quotation):
    form = CounterOfferForm.from_form(quotation, {"message": "best price"})
    assert form.price_per_unit == 10.0
    assert form.moq == 100
    assert form.lead_time == "15 days"
    assert form.message == "best price"


def test_from_form_accepts_snake_case_keys(quotation):
    form = CounterOfferForm.from_form(quotation, {"price_per_unit": "3", "lead_time": " 5 days "})
    assert form.price_per_unit == 3.0
    assert form.lead_time == "5 days"


def test_from_form_bare_date_valid_through_end_of_day(quotation):
    form = CounterOfferForm.from_form(quotation, {"validUntil": "2026-07-01"})
    assert form.valid_until == datetime(2026, 7, 1, 23, 59, 59, tzinfo=timezone.utc)


def test_from_form_unparseable_price_fails_validation(quotation):
    with pytest.raises(ValidationError):
        CounterOfferForm.from_form(quotation, {"pricePerUnit": "abc"})


def test_payload_is_camel_case(quotation):
    payload = CounterOfferForm.from_form(quotation, {"pricePerUnit": "11"}).to_payload()
    assert payload["pricePerUnit"] == 11.0
    assert payload["totalPrice"] == 1100.0
    assert "price_per_unit" not in payload
    assert "validUntil" not in payload


def test_endpoint_for_rfq_and_inquiry(quotation):
    assert endpoint_for(quotation) == "/api/suppliers/quotations/q-42"
    inquiry = quotation.model_copy(update={"type": "inquiry"})
    assert endpoint_for(inquiry) == "/api/suppliers/inquiry-quotations/q-42"


def test_endpoint_for_unknown_type(quotation):
    with pytest.raises(ValueError):
        endpoint_for(quotation.model_copy(update={"type": "order"}))


@pytest.fixture()
def large_order(quotation):
    return quotation.model_copy(update={"required_qty": 500, "total_price": 5000.0})


def test_from_form_text_edit_keeps_stored_total(large_order):
    form = CounterOfferForm.from_form(large_order, {"leadTime": "10 days"})
    assert form.lead_time == "10 days"
    assert form.total_price == 5000.0


def test_from_form_new_validity_keeps_stored_total(large_order):
    form = CounterOfferForm.from_form(large_order, {"validUntil": "2026-12-31T00:00:00Z"})
    assert form.to_payload()["totalPrice"] == 5000.0


def test_from_form_price_edit_bills_required_quantity(large_order):
    form = CounterOfferForm.from_form(large_order, {"pricePerUnit": "9"})
    assert form.total_price == 4500.0


def test_from_form_moq_above_required_quantity(large_order):
    form = CounterOfferForm.from_form(large_order, {"moq": "600"})
    assert form.total_price == 6000.0
