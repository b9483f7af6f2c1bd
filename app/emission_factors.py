"""Emission factors and regional tables for the household footprint calculator.

Factors are pounds of CO2 per unit of usage. Regional multipliers scale the
annualised tonnage to reflect each region's grid mix, and regional averages
are the yearly household footprint (metric tons CO2e) used for comparison.
"""
from __future__ import annotations

from types import MappingProxyType

from carbon_models import Region


LBS_PER_METRIC_TON = 2204.62

MONTHS_PER_YEAR = 12
WEEKS_PER_YEAR = 52

# Passenger car at 19.6 lb CO2 per gallon of gasoline and 25 mpg.
_GASOLINE_LBS_PER_GALLON = 19.6
_ASSUMED_MPG = 25

USAGE_FACTORS = MappingProxyType({
    "electricity": MappingProxyType({
        "display_name": "Electricity",
        "unit": "kWh",
        "period": "month",
        "lbs_co2_per_unit": 0.92,
    }),
    "natural_gas": MappingProxyType({
        "display_name": "Natural Gas",
        "unit": "therm",
        "period": "month",
        "lbs_co2_per_unit": 11.7,
    }),
    "water": MappingProxyType({
        "display_name": "Water",
        "unit": "gallon",
        "period": "month",
        "lbs_co2_per_unit": 0.008,
    }),
    "waste": MappingProxyType({
        "display_name": "Waste",
        "unit": "lb",
        "period": "week",
        "lbs_co2_per_unit": 1.9,
    }),
    "transportation": MappingProxyType({
        "display_name": "Transportation",
        "unit": "mile",
        "period": "week",
        "lbs_co2_per_unit": _GASOLINE_LBS_PER_GALLON / _ASSUMED_MPG,
    }),
})

PERIODS_PER_YEAR = MappingProxyType({
    "month": MONTHS_PER_YEAR,
    "week": WEEKS_PER_YEAR,
})

REGION_FACTORS = MappingProxyType({
    Region.NORTHEAST: 1.1,
    Region.MIDWEST: 1.2,
    Region.SOUTH: 0.9,
    Region.WEST: 1.0,
    Region.PACIFIC: 0.8,
    Region.OTHER: 1.0,
})

# Tons CO2e per household per year
REGION_AVERAGES = MappingProxyType({
    Region.NORTHEAST: 10,
    Region.MIDWEST: 12,
    Region.SOUTH: 11,
    Region.WEST: 9,
    Region.PACIFIC: 8,
    Region.OTHER: 10,
})

# Percent band around the regional average classified as "Average".
COMPARISON_BAND_PCT = 10.0


def annual_tons(usage_type: str, quantity: float) -> float:
    """Convert a periodic usage quantity to metric tons CO2 per year.

    Args:
        usage_type: Key from USAGE_FACTORS (e.g. "electricity", "waste").
        quantity: Usage per period (monthly or weekly, per the factor table).

    Returns:
        Unadjusted annual emissions in metric tons.

    Raises:
        ValueError: If usage_type is unknown.
    """
    if usage_type not in USAGE_FACTORS:
        raise ValueError(f"Unknown usage type: {usage_type}")
    factor = USAGE_FACTORS[usage_type]
    periods = PERIODS_PER_YEAR[factor["period"]]
    return quantity * factor["lbs_co2_per_unit"] * periods / LBS_PER_METRIC_TON


def get_region_factor(region: Region | str) -> float:
    """Return the regional adjustment multiplier, defaulting to OTHER."""
    return REGION_FACTORS[Region.parse(region)]


def get_regional_average(region: Region | str) -> int:
    """Return the regional yearly average in tons CO2e, defaulting to OTHER."""
    return REGION_AVERAGES[Region.parse(region)]
