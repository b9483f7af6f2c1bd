"""
Footprint Orchestrator
=======================

Wires the calculator pieces into a single entry point for HTTP controllers:

  1. Coerce the raw form into a UsageInput
  2. (optional) Read electricity usage off an uploaded bill
  3. Calculate emissions
  4. Generate recommendations
  5. (optional) Analyse prior readings for anomalies and a forecast
  6. (optional) Suggest nearby EV charging stations when energy dominates

Usage:
    from orchestrator import calculate_carbon_footprint
    report = calculate_carbon_footprint(request_form, bill_path="uploads/bill.pdf")
    payload = report.to_dict()
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from bill_extractor import check_supported, extract_bill_data, extract_bill_data_async
from calculator import calculate_emissions
from calculator_form import parse_usage_form
from carbon_models import (
    EmissionResult,
    ExtractionResult,
    HistoricalEntry,
    HistoryAnalysis,
    UsageInput,
)
from ev_stations import ChargingStationClient
from history import analyze_history
from recommendations import generate_recommendations

log = logging.getLogger(__name__)

# Energy emissions (t CO2e/yr) above which EV stations are suggested.
EV_SUGGESTION_THRESHOLD = 3.0
EV_SUGGESTION_HEADER = "Consider switching to an electric vehicle. Nearby charging stations:"

# Form fields checked, in order, for the station search location.
LOCATION_FIELDS = ("location", "zip", "zipCode", "zip_code")


@dataclass
class FootprintReport:
    """Everything the calculator endpoint returns for one submission."""
    usage: UsageInput
    emissions: EmissionResult
    recommendations: list[str]
    extraction: Optional[ExtractionResult] = None
    history: Optional[HistoryAnalysis] = None
    electricity_source: str = "manual"
    warnings: list[str] = field(default_factory=list)

    @property
    def ml_insights(self) -> list[str]:
        if self.history is None:
            return []
        return list(self.history.insights)

    def to_dict(self) -> dict:
        emissions = self.emissions
        categories = emissions.category_emissions
        return {
            "success": True,
            "totalEmission": emissions.total_emission,
            "perPersonEmission": emissions.per_person_emission,
            "categoryEmissions": dict(categories),
            "chartData": emissions.chart_data.to_dict(),
            "comparison": emissions.comparison.value,
            "comparisonPercentage": emissions.comparison_percentage,
            "regionalAverage": emissions.regional_average,
            "recommendations": list(self.recommendations),
            "mlInsights": self.ml_insights,
            "hasAnomaly": self.history.has_anomaly if self.history else False,
            "forecast": (
                self.history.forecast.to_dict()
                if self.history and self.history.forecast else None
            ),
            "electricitySource": self.electricity_source,
            "extractionConfidence": (
                self.extraction.confidence
                if self.extraction and self.extraction.success else None
            ),
            "warnings": list(self.warnings),
            "entries": dict(categories),
        }


def _coerce_history(
    history: Sequence[HistoricalEntry | Mapping[str, Any]] | None,
) -> list[HistoricalEntry]:
    entries: list[HistoricalEntry] = []
    for item in history or []:
        if isinstance(item, HistoricalEntry):
            entries.append(item)
        else:
            entries.append(HistoricalEntry.from_mapping(item))
    return entries


def _apply_extraction(
    usage: UsageInput,
    extraction: ExtractionResult,
    warnings: list[str],
) -> tuple[UsageInput, str]:
    if extraction.success and extraction.electricity is not None:
        log.info(
            "Using bill electricity usage: %s kWh (confidence %.2f)",
            extraction.electricity, extraction.confidence,
        )
        return usage.with_electricity(extraction.electricity), "bill"

    log.info("Bill extraction failed, using manual inputs")
    if extraction.error:
        warnings.append(f"Bill could not be read: {extraction.error}")
    else:
        warnings.append("No electricity usage found on the bill; using the entered value")
    return usage, "manual"


def _ev_station_suggestions(
    emissions: EmissionResult,
    station_client: Optional[ChargingStationClient],
    location: Optional[str],
) -> list[str]:
    if emissions.energy_emission <= EV_SUGGESTION_THRESHOLD:
        return []
    client = station_client or ChargingStationClient()
    if not client.available():
        log.debug("EV station suggestions skipped: NREL_API_KEY not set")
        return []
    stations = client.nearest_stations(location=location)
    if not stations:
        return []
    return [EV_SUGGESTION_HEADER, *(station.describe() for station in stations)]


def _build_report(
    usage: UsageInput,
    history: Sequence[HistoricalEntry | Mapping[str, Any]] | None,
    extraction: Optional[ExtractionResult],
    station_client: Optional[ChargingStationClient],
    location: Optional[str] = None,
) -> FootprintReport:
    warnings: list[str] = []
    electricity_source = "manual"
    if extraction is not None:
        usage, electricity_source = _apply_extraction(usage, extraction, warnings)

    emissions = calculate_emissions(usage)
    recommendations = generate_recommendations(emissions)

    history_entries = _coerce_history(history)
    analysis = analyze_history(history_entries, usage) if history_entries else None

    recommendations.extend(_ev_station_suggestions(emissions, station_client, location))

    return FootprintReport(
        usage=usage,
        emissions=emissions,
        recommendations=recommendations,
        extraction=extraction,
        history=analysis,
        electricity_source=electricity_source,
        warnings=warnings,
    )


def _form_location(
    form: Mapping[str, Any] | None,
    location: Optional[str],
) -> Optional[str]:
    if location:
        return location
    for key in LOCATION_FIELDS:
        value = (form or {}).get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def calculate_carbon_footprint(
    form: Mapping[str, Any] | None,
    bill_path: Optional[str] = None,
    history: Sequence[HistoricalEntry | Mapping[str, Any]] | None = None,
    station_client: Optional[ChargingStationClient] = None,
    location: Optional[str] = None,
) -> FootprintReport:
    """Calculate a footprint from a form submission and optional bill upload.

    Args:
        form: Raw request fields (strings or numbers, snake or camel case).
        bill_path: Saved upload to read electricity usage from.
        history: Prior readings (HistoricalEntry or stored dicts), oldest first.
        station_client: NREL client override; defaults to one built from env.
        location: Address or ZIP for the EV station search. Falls back to a
            location/zip field in ``form``.

    Returns:
        FootprintReport. A bill that cannot be read never fails the
        calculation; the manual electricity value is used instead.

    Raises:
        UnsupportedFormatError: If bill_path has an unsupported extension.
    """
    usage = parse_usage_form(form)
    extraction = extract_bill_data(bill_path) if bill_path else None
    return _build_report(
        usage, history, extraction, station_client, _form_location(form, location),
    )


async def calculate_carbon_footprint_async(
    form: Mapping[str, Any] | None,
    bill_path: Optional[str] = None,
    history: Sequence[HistoricalEntry | Mapping[str, Any]] | None = None,
    station_client: Optional[ChargingStationClient] = None,
    location: Optional[str] = None,
) -> FootprintReport:
    """Same as calculate_carbon_footprint, off the event loop.

    Bill extraction and the report build (which may call the station API)
    both run in worker threads.
    """
    usage = parse_usage_form(form)
    extraction = None
    if bill_path:
        check_supported(bill_path)
        extraction = await extract_bill_data_async(bill_path)
    return await asyncio.to_thread(
        _build_report,
        usage, history, extraction, station_client, _form_location(form, location),
    )
