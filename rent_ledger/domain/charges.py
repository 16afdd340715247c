"""Charge calculation for a single billing period."""
from __future__ import annotations

from decimal import Decimal

from .errors import InvalidInput
from .models import ChargeBreakdown
from .money import ZERO, non_negative, round2, to_decimal


def compute_charge(
    units: Decimal | int | str,
    unit_rate: Decimal | int | str,
    water_cost: Decimal | int | str,
    rent_cost: Decimal | int | str,
    was_partial_carry_rent_already_billed: bool = False,
) -> ChargeBreakdown:
    """Build the charge breakdown for one period.

    When the rent for this period was already billed by an earlier partial
    entry, only electricity and water remain due and the rent charge is zero.
    """
    units_value = non_negative(units, "electricity_units")
    rate = to_decimal(unit_rate, "unit_rate")
    if rate <= ZERO:
        raise InvalidInput(f"unit_rate must be positive, got {rate}")
    water = non_negative(water_cost, "water_cost")
    rent = non_negative(rent_cost, "rent_cost")

    electricity_cost = round2(units_value * rate)
    effective_rent = ZERO if was_partial_carry_rent_already_billed else rent
    total = round2(electricity_cost + water + effective_rent)
    return ChargeBreakdown(
        electricity_units=units_value,
        electricity_cost=electricity_cost,
        water_cost=water,
        rent_cost=effective_rent,
        total_charge=total,
    )
