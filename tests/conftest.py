"""Pytest configuration and fixtures for eon_navigator tests."""

import pytest
from yarl import URL

from eon_navigator.const import BASE_URL, ENV_CLIENT_ID, ENV_CLIENT_SECRET


@pytest.fixture(autouse=True)
def clear_credentials_env(monkeypatch):
    """Keep real credentials in the environment out of the tests."""
    monkeypatch.delenv(ENV_CLIENT_ID, raising=False)
    monkeypatch.delenv(ENV_CLIENT_SECRET, raising=False)


@pytest.fixture
def mock_credentials():
    """Return mock client credentials."""
    return {
        "client_id": "test-client-id",
        "client_secret": "test-client-secret",
    }


@pytest.fixture
def mock_token_response():
    """Return mock OAuth token response."""
    return {
        "access_token": "test_access_token_12345",
        "token_type": "Bearer",
        "expires_in": 3600,
        "scope": "navigator",
    }


@pytest.fixture
def mock_installations_response():
    """Return mock installations response."""
    return {
        "installations": [
            {
                "id": "inst-1",
                "active": True,
                "address": "Storgatan 1",
                "business": "Retail",
                "category": "Business",
                "city": "Malmö",
                "energyClass": "electricity",
                "gridArea": "MMO",
                "name": "Head office",
                "orgNumber": "556000-0000",
                "priceArea": "SE4",
                "resolution": "hour",
                "safetyLevel": 2.5,
                "hasMeasurementsSubscription": True,
                "hasCostsSubscription": False,
            },
            {
                "id": "inst-2",
                "active": False,
                "energyClass": "heat",
                "safetyLevel": None,
            },
        ],
    }


@pytest.fixture
def mock_series_response():
    """Return mock measurement series response."""
    return {
        "installations": [
            {
                "id": "inst-1",
                "measurementSeries": [
                    {
                        "id": 101,
                        "seriesType": "consumption",
                        "unit": "kWh",
                        "lastUpdate": "2024-03-01T06:00:00Z",
                    },
                    {
                        "id": 102,
                        "seriesType": "production",
                        "unit": "kWh",
                        "lastUpdate": "",
                    },
                ],
            },
        ],
    }


@pytest.fixture
def mock_measurements_response():
    """Return mock measurements response."""
    return {
        "id": 101,
        "resolution": "hour",
        "measurements": [
            {"timeStamp": "2024-01-01T00:00:00", "value": 1.25},
            {"timeStamp": "2024-01-01T01:00:00.000Z", "value": None},
            {"timeStamp": "2024-01-01T02:00:00+01:00", "value": 0},
        ],
    }


@pytest.fixture
def mock_electricity_costs_response():
    """Return mock electricity cost response."""
    return {
        "energyClass": "electricity",
        "installation": "inst-1",
        "costs": [
            {
                "month": "2024-01-01T00:00:00Z",
                "retailCost": 75.5,
                "retailCostVAT": 19.5,
            },
        ],
    }


@pytest.fixture
def mock_gas_costs_response():
    """Return mock gas cost response."""
    return {
        "energyClass": "gas",
        "installation": "inst-3",
        "costs": [
            {
                "month": "2024-02-01T00:00:00",
                "retailCost": 410.0,
                "retailCostVAT": 102.5,
                "energyTax": 88.0,
                "energyTaxVAT": None,
                "costBioGasDetails": {
                    "bioGasCarbonDioxideTax": 12.0,
                    "biogasEnergyTax": 0.0,
                },
            },
        ],
    }


def _find_requests(mocked, method, path):
    expected = URL(f"{BASE_URL}{path}").path
    return [
        (url, call)
        for (req_method, url), calls in mocked.requests.items()
        if req_method == method and url.path == expected
        for call in calls
    ]


@pytest.fixture
def find_requests():
    """Return a helper listing (url, call) pairs aioresponses recorded for a path."""
    return _find_requests
