from decimal import Decimal

import pytest

from rent_ledger.domain.charges import compute_charge
from rent_ledger.domain.errors import InvalidInput
from rent_ledger.domain.models import ChargeBreakdown
from rent_ledger.domain.money import round2


def test_charge_breakdown_totals():
    charge = compute_charge(Decimal("40"), Decimal("13"), Decimal("500"), Decimal("12000"))

    assert charge.electricity_cost == Decimal("520")
    assert charge.rent_cost == Decimal("12000")
    assert charge.total_charge == Decimal("13020")


def test_rent_dropped_when_partial_already_billed():
    charge = compute_charge(Decimal("10"), Decimal("13"), Decimal("500"), Decimal("12000"), True)

    assert charge.rent_cost == Decimal("0")
    assert charge.total_charge == Decimal("630")


def test_electricity_cost_has_two_decimals():
    charge = compute_charge(Decimal("12.345"), Decimal("13"), Decimal("0"), Decimal("0"))

    assert charge.electricity_cost == Decimal("160.49")
    assert charge.electricity_cost.as_tuple().exponent >= -2


def test_round2_rounds_half_away_from_zero():
    assert round2(Decimal("0.125")) == Decimal("0.13")
    assert round2(Decimal("-0.125")) == Decimal("-0.13")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"units": "-1", "unit_rate": "13", "water_cost": "0", "rent_cost": "0"},
        {"units": "1", "unit_rate": "0", "water_cost": "0", "rent_cost": "0"},
        {"units": "1", "unit_rate": "13", "water_cost": "-5", "rent_cost": "0"},
        {"units": "1", "unit_rate": "13", "water_cost": "0", "rent_cost": "-100"},
    ],
)
def test_invalid_charge_inputs(kwargs):
    with pytest.raises(InvalidInput):
        compute_charge(**kwargs)


def test_breakdown_rejects_mismatched_total():
    with pytest.raises(InvalidInput):
        ChargeBreakdown(Decimal("1"), Decimal("13"), Decimal("0"), Decimal("100"), Decimal("200"))


def test_amounts_too_large_for_cents_rejected():
    with pytest.raises(InvalidInput, match="too large"):
        compute_charge("1e30", "13", "0", "0")
    with pytest.raises(InvalidInput):
        round2(Decimal("1e40"))
