"""
Household Emissions Calculator
===============================

Converts monthly/weekly household usage into an annual CO2e footprint:

  1. Annualise each usage quantity and convert lb CO2 -> metric tons
  2. Energy = electricity + natural gas
  3. Apply the regional multiplier to each of the four categories
  4. Total, per-person split, and comparison with the regional average
  5. Round for presentation (emissions 2 dp, comparison 1 dp)

Pure and deterministic: identical inputs give identical results.
"""
from __future__ import annotations

import logging

from carbon_models import (
    CHART_LABELS,
    ChartData,
    Comparison,
    EmissionResult,
    Region,
    UsageInput,
)
from common.formatters import round_to
from emission_factors import (
    COMPARISON_BAND_PCT,
    annual_tons,
    get_region_factor,
    get_regional_average,
)

log = logging.getLogger(__name__)


def _classify(comparison_percentage: float) -> Comparison:
    if comparison_percentage < -COMPARISON_BAND_PCT:
        return Comparison.BETTER
    if comparison_percentage > COMPARISON_BAND_PCT:
        return Comparison.WORSE
    return Comparison.AVERAGE


def calculate_emissions(usage: UsageInput) -> EmissionResult:
    """Calculate the annual footprint for a household.

    Args:
        usage: Monthly electricity/gas/water and weekly waste/transportation.

    Returns:
        EmissionResult with regionally adjusted category totals in tons CO2e/yr.
    """
    electricity = annual_tons("electricity", usage.electricity)
    natural_gas = annual_tons("natural_gas", usage.natural_gas)
    water = annual_tons("water", usage.water)
    waste = annual_tons("waste", usage.waste)
    transportation = annual_tons("transportation", usage.transportation)

    region_factor = get_region_factor(usage.region)

    energy_emission = (electricity + natural_gas) * region_factor
    water_emission = water * region_factor
    waste_emission = waste * region_factor
    transportation_emission = transportation * region_factor

    total_emission = (
        energy_emission + water_emission + waste_emission + transportation_emission
    )

    # Single-person households skip the split entirely.
    if usage.household_size > 1:
        per_person_emission = total_emission / usage.household_size
    else:
        per_person_emission = total_emission

    regional_average = get_regional_average(usage.region)
    comparison_percentage = (total_emission - regional_average) / regional_average * 100
    comparison = _classify(comparison_percentage)

    log.debug(
        "Footprint for region=%s factor=%.2f: total=%.4f t (%.1f%% vs %d t)",
        Region.parse(usage.region).value, region_factor, total_emission,
        comparison_percentage, regional_average,
    )

    energy = round_to(energy_emission, 2)
    transport = round_to(transportation_emission, 2)
    waste_t = round_to(waste_emission, 2)
    water_t = round_to(water_emission, 2)

    return EmissionResult(
        energy_emission=energy,
        transportation_emission=transport,
        waste_emission=waste_t,
        water_emission=water_t,
        total_emission=round_to(total_emission, 2),
        per_person_emission=round_to(per_person_emission, 2),
        comparison=comparison,
        comparison_percentage=round_to(comparison_percentage, 1),
        regional_average=regional_average,
        chart_data=ChartData(
            labels=CHART_LABELS,
            data=(energy, transport, waste_t, water_t),
        ),
    )
