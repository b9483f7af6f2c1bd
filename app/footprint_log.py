"""Activity entry log: per-entry kg CO2 estimates, category totals and tips.

Entries are individual logged activities (a car trip, a meal, a bag of
rubbish). Each carries its own emission estimate in kg CO2; the totals
re-aggregate every entry by category.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Optional


ENTRY_TYPES = ("transportation", "energy", "food", "waste", "water", "other")
ENTRY_UNITS = ("kg", "km", "kWh", "L", "pieces", "hours", "days")

# entry_type -> (unit the factor applies to, kg CO2 per unit)
ENTRY_FACTORS = MappingProxyType({
    "transportation": ("km", 0.12),   # average car
    "energy": ("kWh", 0.5),
    "food": ("kg", 2.0),
    "waste": ("kg", 0.5),
    "water": ("L", 0.001),
})
DEFAULT_ENTRY_FACTOR = 0.1

DEFAULT_MONTHLY_GOAL_KG = 500.0

# Ranking order for tips; ties keep this order.
TIP_CATEGORIES = ("transportation", "energy", "food", "waste", "water")

CATEGORY_TIPS = MappingProxyType({
    "transportation": (
        "Use public transportation instead of driving alone",
        "Consider carpooling or ridesharing",
        "Walk or bike for short distances",
        "Maintain your vehicle properly for better fuel efficiency",
        "Consider switching to an electric or hybrid vehicle",
    ),
    "energy": (
        "Switch to LED light bulbs",
        "Unplug electronics when not in use",
        "Use a programmable thermostat",
        "Wash clothes in cold water",
        "Consider installing solar panels",
    ),
    "food": (
        "Reduce meat consumption",
        "Buy local and seasonal produce",
        "Reduce food waste",
        "Grow your own vegetables",
        "Choose organic and sustainably produced food",
    ),
    "waste": (
        "Recycle properly",
        "Compost food scraps",
        "Reduce single-use plastics",
        "Buy products with less packaging",
        "Repair items instead of replacing them",
    ),
    "water": (
        "Fix leaky faucets",
        "Take shorter showers",
        "Install water-efficient fixtures",
        "Collect rainwater for gardening",
        "Only run full loads in dishwasher and washing machine",
    ),
})


@dataclass(frozen=True)
class CarbonEntry:
    """One logged activity with its kg CO2 estimate."""
    entry_type: str
    description: str
    quantity: float
    unit: str
    carbon_emission: float
    date: Optional[datetime] = None


@dataclass
class FootprintTotals:
    """kg CO2 per tracked category plus the grand total."""
    transportation: float = 0.0
    energy: float = 0.0
    food: float = 0.0
    waste: float = 0.0
    water: float = 0.0
    other: float = 0.0
    entry_count: int = 0
    monthly_goal: float = DEFAULT_MONTHLY_GOAL_KG

    @property
    def total(self) -> float:
        return (
            self.transportation + self.energy + self.food
            + self.waste + self.water + self.other
        )

    def to_dict(self) -> dict:
        return {
            "totalEmission": self.total,
            "transportationEmission": self.transportation,
            "energyEmission": self.energy,
            "foodEmission": self.food,
            "wasteEmission": self.waste,
            "waterEmission": self.water,
            "otherEmission": self.other,
            "monthlyGoal": self.monthly_goal,
        }


def entry_emission(entry_type: str, quantity: float, unit: str) -> float:
    """Estimate kg CO2 for one activity.

    Known types only count in their own unit (a transportation entry in kg
    is 0). Unknown types, and "other", use a flat 0.1 kg per unit.
    """
    if entry_type in ENTRY_FACTORS:
        factor_unit, factor = ENTRY_FACTORS[entry_type]
        if unit != factor_unit:
            return 0.0
        return quantity * factor
    return quantity * DEFAULT_ENTRY_FACTOR


def make_entry(
    entry_type: str,
    description: str,
    quantity: float,
    unit: str,
    date: Optional[datetime] = None,
) -> CarbonEntry:
    """Validate an activity and attach its emission estimate.

    Raises:
        ValueError: If a field is missing or outside its allowed values.
    """
    if entry_type not in ENTRY_TYPES:
        raise ValueError(
            f"Invalid entry type '{entry_type}'. Valid types: {list(ENTRY_TYPES)}"
        )
    if unit not in ENTRY_UNITS:
        raise ValueError(f"Invalid unit '{unit}'. Valid units: {list(ENTRY_UNITS)}")
    description = (description or "").strip()
    if not description:
        raise ValueError("Description is required")
    try:
        quantity = float(quantity)
    except (TypeError, ValueError):
        raise ValueError("Quantity must be a positive number")
    if not math.isfinite(quantity) or quantity < 0:
        raise ValueError("Quantity must be a positive number")

    return CarbonEntry(
        entry_type=entry_type,
        description=description,
        quantity=quantity,
        unit=unit,
        carbon_emission=entry_emission(entry_type, quantity, unit),
        date=date or datetime.now(),
    )


def summarize_entries(
    entries: Iterable[CarbonEntry],
    monthly_goal: float = DEFAULT_MONTHLY_GOAL_KG,
) -> FootprintTotals:
    """Re-aggregate category totals from scratch."""
    totals = FootprintTotals(monthly_goal=validate_monthly_goal(monthly_goal))
    for entry in entries:
        if entry.entry_type in ENTRY_TYPES:
            current = getattr(totals, entry.entry_type)
            setattr(totals, entry.entry_type, current + entry.carbon_emission)
        totals.entry_count += 1
    return totals


def validate_monthly_goal(value) -> float:
    """Return the goal as a positive float.

    Raises:
        ValueError: If the goal is missing, non-numeric or not positive.
    """
    try:
        goal = float(value)
    except (TypeError, ValueError):
        raise ValueError("Please provide a valid monthly goal")
    if not goal > 0:
        raise ValueError("Please provide a valid monthly goal")
    return goal


def carbon_tips(totals: FootprintTotals) -> tuple[str, list[str]]:
    """Tips for the two highest-emitting categories.

    Returns:
        (highest category name, tips) where tips list the five tips of each
        top-two category in transportation/energy/food/waste/water order.
    """
    ranked = sorted(
        TIP_CATEGORIES, key=lambda name: getattr(totals, name), reverse=True,
    )
    top_two = set(ranked[:2])

    tips: list[str] = []
    for name in TIP_CATEGORIES:
        if name in top_two:
            tips.extend(CATEGORY_TIPS[name])
    return ranked[0], tips
