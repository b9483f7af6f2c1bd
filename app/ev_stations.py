"""
Nearby EV charging stations from the NREL Alternative Fuel Stations API.

Used to enrich footprint advice when home energy dominates. Optional: with
no NREL_API_KEY the client reports itself unavailable and returns nothing.

Docs: https://developer.nrel.gov/docs/transportation/alt-fuel-stations-v1/nearest/
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

import requests

log = logging.getLogger(__name__)

DEFAULT_STATION_LIMIT = 3


@dataclass(frozen=True)
class ChargingStation:
    name: str
    street_address: str

    def describe(self) -> str:
        return f"EV Station: {self.name} at {self.street_address}"


def _station_limit_from_env() -> int:
    raw = os.environ.get("NREL_STATION_LIMIT", "").strip()
    try:
        return max(1, int(raw))
    except ValueError:
        return DEFAULT_STATION_LIMIT


class ChargingStationClient:
    """Minimal helper for the NREL nearest-station endpoint."""

    BASE_URL = "https://developer.nrel.gov/api/alt-fuel-stations/v1/nearest.json"

    def __init__(self, api_key: str | None = None, timeout: float = 10.0):
        if api_key is None:
            api_key = os.environ.get("NREL_API_KEY")
        self.api_key = api_key
        self.timeout = timeout
        self.last_error: str | None = None

    def available(self) -> bool:
        return bool(self.api_key)

    def nearest_stations(
        self,
        location: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[ChargingStation]:
        """Return nearby electric charging stations, or [] on any failure.

        Args:
            location: Free-form address or ZIP the API geocodes, if known.
            limit: Number of stations; defaults to NREL_STATION_LIMIT or 3.
        """
        self.last_error = None

        if not self.available():
            self.last_error = "No NREL_API_KEY found in environment."
            return []

        params = {
            "api_key": self.api_key,
            "fuel_type": "ELEC",
            "limit": limit or _station_limit_from_env(),
        }
        if location:
            params["location"] = location

        try:
            resp = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            self.last_error = f"Exception calling NREL stations API: {e}"
            log.warning("NREL station lookup failed: %s", e, exc_info=True)
            return []

        errors = data.get("errors") or data.get("error")
        if errors:
            self.last_error = "; ".join(errors) if isinstance(errors, list) else str(errors)
            log.warning("NREL station lookup returned errors: %s", self.last_error)
            return []

        return [
            ChargingStation(
                name=str(station.get("station_name", "")).strip(),
                street_address=str(station.get("street_address", "")).strip(),
            )
            for station in data.get("fuel_stations") or []
        ]
