"""
Shared data structures for the carbon footprint calculator.

Inputs and results are plain, frozen value records. Every result record can
render itself as the JSON-friendly camelCase dict handed to HTTP callers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional

from common.formatters import parse_leading_float


class Region(str, Enum):
    """Geographic region used for grid-mix adjustment and comparison."""
    NORTHEAST = "northeast"
    MIDWEST = "midwest"
    SOUTH = "south"
    WEST = "west"
    PACIFIC = "pacific"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "Region | str | None") -> "Region":
        """Lenient lookup: case/whitespace-insensitive, unknown -> OTHER."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.OTHER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class Comparison(str, Enum):
    """Outcome of comparing a footprint to its regional average."""
    BETTER = "Better"
    AVERAGE = "Average"
    WORSE = "Worse"


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"


CATEGORY_ORDER = ("energy", "transportation", "waste", "water")
CHART_LABELS = ("Energy", "Transportation", "Waste", "Water")


@dataclass(frozen=True)
class UsageInput:
    """Household usage for one month/week, as entered or extracted.

    electricity: kWh per month
    natural_gas: therms per month
    water: gallons per month
    waste: lb per week
    transportation: miles per week
    """
    electricity: float = 0.0
    natural_gas: float = 0.0
    water: float = 0.0
    waste: float = 0.0
    transportation: float = 0.0
    household_size: int = 1
    region: Region = Region.OTHER

    def with_electricity(self, kwh: float) -> "UsageInput":
        return UsageInput(
            electricity=kwh,
            natural_gas=self.natural_gas,
            water=self.water,
            waste=self.waste,
            transportation=self.transportation,
            household_size=self.household_size,
            region=self.region,
        )


@dataclass(frozen=True)
class ChartData:
    """Parallel label/value arrays, always in Energy/Transportation/Waste/Water order."""
    labels: tuple[str, ...]
    data: tuple[float, ...]

    def to_dict(self) -> dict:
        return {"labels": list(self.labels), "data": list(self.data)}


@dataclass(frozen=True)
class EmissionResult:
    """Annual footprint in metric tons CO2e, regionally adjusted and rounded."""
    energy_emission: float
    transportation_emission: float
    waste_emission: float
    water_emission: float
    total_emission: float
    per_person_emission: float
    comparison: Comparison
    comparison_percentage: float
    regional_average: int
    chart_data: ChartData

    @property
    def category_emissions(self) -> dict[str, float]:
        return {
            "energy": self.energy_emission,
            "transportation": self.transportation_emission,
            "waste": self.waste_emission,
            "water": self.water_emission,
        }

    def to_dict(self) -> dict:
        return {
            "totalEmission": self.total_emission,
            "perPersonEmission": self.per_person_emission,
            "energyEmission": self.energy_emission,
            "transportationEmission": self.transportation_emission,
            "wasteEmission": self.waste_emission,
            "waterEmission": self.water_emission,
            "comparison": self.comparison.value,
            "comparisonPercentage": self.comparison_percentage,
            "regionalAverage": self.regional_average,
            "chartData": self.chart_data.to_dict(),
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of reading an electricity figure off a bill."""
    success: bool
    electricity: Optional[float] = None
    confidence: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "success": self.success,
            "electricity": self.electricity,
            "confidence": self.confidence,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class HistoricalEntry:
    """A prior electricity reading (kWh per month)."""
    electricity: Optional[float] = None
    date: Optional[date] = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "HistoricalEntry":
        """Build from a stored record; unreadable electricity becomes None."""
        when = raw.get("date")
        if isinstance(when, str):
            try:
                when = date.fromisoformat(when[:10])
            except ValueError:
                when = None
        elif not isinstance(when, date):
            when = None
        return cls(electricity=parse_leading_float(raw.get("electricity")), date=when)


@dataclass(frozen=True)
class Forecast:
    next_month: float
    trend: Trend
    percent_change: float

    def to_dict(self) -> dict:
        return {
            "nextMonth": self.next_month,
            "trend": self.trend.value,
            "percentChange": self.percent_change,
        }


@dataclass(frozen=True)
class HistoryAnalysis:
    has_anomaly: bool
    forecast: Optional[Forecast]
    insights: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "hasAnomaly": self.has_anomaly,
            "forecast": self.forecast.to_dict() if self.forecast else None,
            "insights": list(self.insights),
        }
