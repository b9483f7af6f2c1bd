"""Unit tests for the NREL charging station client (HTTP stubbed)."""

import pytest
import requests

import ev_stations
from ev_stations import ChargingStation, ChargingStationClient


class _FakeResponse:

    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(payload, status_code=200):
        def _get(url, params=None, timeout=None):
            calls.append({"url": url, "params": params, "timeout": timeout})
            return _FakeResponse(payload, status_code)
        monkeypatch.setattr(ev_stations.requests, "get", _get)
        return calls

    return install


class TestAvailability:

    def test_key_from_env(self, monkeypatch):
        monkeypatch.setenv("NREL_API_KEY", "abc123")
        assert ChargingStationClient().available() is True

    def test_no_key(self, monkeypatch):
        monkeypatch.delenv("NREL_API_KEY", raising=False)
        client = ChargingStationClient()
        assert client.available() is False
        assert client.nearest_stations() == []
        assert "NREL_API_KEY" in client.last_error


class TestNearestStations:

    def test_parses_stations(self, fake_get, monkeypatch):
        monkeypatch.delenv("NREL_STATION_LIMIT", raising=False)
        calls = fake_get({"fuel_stations": [
            {"station_name": "City Hall Garage", "street_address": "1 Main St"},
            {"station_name": " Library ", "street_address": "22 Oak Ave "},
        ]})
        stations = ChargingStationClient(api_key="k").nearest_stations(location="80401")

        assert stations == [
            ChargingStation("City Hall Garage", "1 Main St"),
            ChargingStation("Library", "22 Oak Ave"),
        ]
        params = calls[0]["params"]
        assert params["api_key"] == "k"
        assert params["fuel_type"] == "ELEC"
        assert params["limit"] == 3
        assert params["location"] == "80401"

    def test_limit_from_env(self, fake_get, monkeypatch):
        monkeypatch.setenv("NREL_STATION_LIMIT", "5")
        calls = fake_get({"fuel_stations": []})
        ChargingStationClient(api_key="k").nearest_stations()
        assert calls[0]["params"]["limit"] == 5
        assert "location" not in calls[0]["params"]

    def test_bad_limit_env_uses_default(self, fake_get, monkeypatch):
        monkeypatch.setenv("NREL_STATION_LIMIT", "lots")
        calls = fake_get({"fuel_stations": []})
        ChargingStationClient(api_key="k").nearest_stations()
        assert calls[0]["params"]["limit"] == 3

    def test_http_error(self, fake_get):
        fake_get({}, status_code=403)
        client = ChargingStationClient(api_key="k")
        assert client.nearest_stations() == []
        assert "403" in client.last_error

    def test_invalid_json(self, fake_get):
        fake_get(ValueError("no json"))
        client = ChargingStationClient(api_key="k")
        assert client.nearest_stations() == []
        assert client.last_error

    def test_api_errors_field(self, fake_get):
        fake_get({"errors": ["API key invalid"]})
        client = ChargingStationClient(api_key="k")
        assert client.nearest_stations() == []
        assert client.last_error == "API key invalid"

    def test_connection_error(self, monkeypatch):
        def _boom(*args, **kwargs):
            raise requests.ConnectionError("unreachable")
        monkeypatch.setattr(ev_stations.requests, "get", _boom)
        client = ChargingStationClient(api_key="k")
        assert client.nearest_stations() == []
        assert "unreachable" in client.last_error


class TestChargingStation:

    def test_describe(self):
        station = ChargingStation("City Hall Garage", "1 Main St")
        assert station.describe() == "EV Station: City Hall Garage at 1 Main St"
