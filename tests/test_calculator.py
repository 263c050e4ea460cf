from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.billing.calculator import compute, settle, validate_inputs
from app.billing.exceptions import InvalidBillInputException
from app.billing.schemas import BillInputs


def make_inputs(**overrides) -> BillInputs:
    values = {
        "opening_km": Decimal("100"),
        "closing_km": Decimal("250"),
        "rate_per_km": Decimal("15"),
        "driver_allowance": Decimal("300"),
        "toll_parking": Decimal("50"),
        "gst_enabled": True,
        "gst_percent": Decimal("5"),
        "advance": Decimal("1000"),
    }
    values.update(overrides)
    return BillInputs(**values)


def test_standard_trip_breakdown():
    result = compute(make_inputs())

    assert result.total_km == Decimal("150")
    assert result.base_amount == Decimal("2250")
    assert result.sub_total == Decimal("2600")
    assert result.gst_amount == Decimal("130")
    assert result.grand_total == Decimal("2730")
    assert result.balance_due == Decimal("1730")


def test_extras_are_added_to_sub_total():
    result = compute(make_inputs(
        extra_km=Decimal("10"), extra_hours=Decimal("2"), extra_hour_charge=Decimal("150"),
        night_charge=Decimal("250"), gst_enabled=False, advance=Decimal("0"),
    ))

    assert result.extra_km_amount == Decimal("150")
    assert result.extra_hours_amount == Decimal("300")
    assert result.sub_total == Decimal("2250") + Decimal("150") + Decimal("300") + Decimal("300") + Decimal("50") + Decimal("250")
    assert result.gst_amount == Decimal("0")
    assert result.grand_total == result.sub_total


def test_gst_percent_ignored_when_disabled():
    result = compute(make_inputs(gst_enabled=False, gst_percent=Decimal("18")))
    assert result.gst_amount == 0
    assert result.grand_total == Decimal("2600")


def test_no_rounding_mid_calculation():
    result = compute(make_inputs(
        opening_km=Decimal("0"), closing_km=Decimal("33"), rate_per_km=Decimal("12.5"),
        driver_allowance=Decimal("0"), toll_parking=Decimal("0"), gst_percent=Decimal("5"),
        advance=Decimal("0"),
    ))
    # 33 * 12.5 = 412.5, 5% = 20.625
    assert result.gst_amount == Decimal("20.625")
    assert result.grand_total == Decimal("433.125")


def test_defaults_for_a_fresh_bill_form():
    inputs = BillInputs(opening_km=Decimal("0"), closing_km=Decimal("10"))
    assert inputs.rate_per_km == Decimal("15")
    assert inputs.driver_allowance == Decimal("300")
    assert inputs.extra_km == 0
    assert inputs.extra_hours == 0
    assert inputs.gst_enabled is True
    assert inputs.gst_percent == Decimal("5")


def test_compute_is_deterministic():
    inputs = make_inputs(extra_hours=Decimal("1.5"), extra_hour_charge=Decimal("99.99"))
    assert compute(inputs) == compute(inputs)


@pytest.mark.parametrize("opening, closing", [("100", "250"), ("0", "0"), ("500", "500")])
def test_total_km_never_negative(opening, closing):
    assert compute(make_inputs(opening_km=Decimal(opening), closing_km=Decimal(closing))).total_km >= 0


def test_compute_clamps_reversed_readings():
    # validate_inputs rejects these first; compute itself still never goes below zero
    result = compute(make_inputs(opening_km=Decimal("100"), closing_km=Decimal("90")))
    assert result.total_km == 0
    assert result.base_amount == 0


def test_closing_below_opening_is_rejected():
    with pytest.raises(InvalidBillInputException) as exc_info:
        validate_inputs(make_inputs(opening_km=Decimal("100"), closing_km=Decimal("90")))
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Closing KM cannot be less than Opening KM"


def test_equal_readings_are_accepted():
    validate_inputs(make_inputs(opening_km=Decimal("100"), closing_km=Decimal("100")))


def test_settle_rounds_each_line_before_totalling():
    inputs = make_inputs(extra_hours=Decimal("1.5"), extra_hour_charge=Decimal("99.99"))
    exact = compute(inputs)
    settled = settle(inputs)

    # 1.5 * 99.99 = 149.985
    assert exact.extra_hours_amount == Decimal("149.985")
    assert settled.extra_hours_amount == Decimal("149.99")
    assert settled.sub_total == Decimal("2749.99")
    assert settled.gst_amount == Decimal("137.50")
    assert settled.grand_total == Decimal("2887.49")
    assert settled.grand_total == settled.sub_total + settled.gst_amount
    assert settled.balance_due == Decimal("1887.49")


def test_settle_matches_compute_on_whole_amounts():
    exact = compute(make_inputs())
    settled = settle(make_inputs())
    assert settled.grand_total == exact.grand_total
    assert settled.balance_due == exact.balance_due
    assert all(
        getattr(settled, field).as_tuple().exponent == -2
        for field in ("total_km", "base_amount", "sub_total", "gst_amount", "grand_total", "balance_due")
    )


@pytest.mark.parametrize("field, value", [("rate_per_km", "10.005"), ("advance", "1e30"), ("gst_percent", "5.125")])
def test_inputs_beyond_stored_precision_are_rejected(field, value):
    with pytest.raises(ValidationError):
        make_inputs(**{field: Decimal(value)})
