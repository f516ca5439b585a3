"""Contract and catalog documents shared by the engine tests."""

from __future__ import annotations

from typing import Any

CATALOG = "http://catalog.test/v1"
PROVIDER_PARTICIPANT = f"{CATALOG}/participants/provider"
CONSUMER_PARTICIPANT = f"{CATALOG}/participants/consumer"
ENDPOINTLESS_PARTICIPANT = f"{CATALOG}/participants/legacy"
PROVIDER_ENDPOINT = "http://provider.test/"

DATA_OFFERING = f"{CATALOG}/serviceofferings/weather-data"
PURPOSE_OFFERING = f"{CATALOG}/serviceofferings/forecast-app"
API_PURPOSE_OFFERING = f"{CATALOG}/serviceofferings/scoring-api"
BARE_PURPOSE_OFFERING = f"{CATALOG}/serviceofferings/unconfigured"
ORPHAN_PURPOSE_OFFERING = f"{CATALOG}/serviceofferings/orphan"

BILATERAL_CONTRACT = "http://contracts.test/bilaterals/bil-1"
BILATERAL_NO_ENDPOINT = "http://contracts.test/bilaterals/bil-legacy"
ECOSYSTEM_CONTRACT = "http://contracts.test/contracts/eco-1"

CONSUMER_APP_URL = "http://consumer-app.test/ingest"
SCORING_API_URL = "http://consumer-app.test/score"


def _bilateral(provider: str, purposes: list[str]) -> dict[str, Any]:
    return {
        "_id": "bil",
        "dataProvider": provider,
        "dataConsumer": CONSUMER_PARTICIPANT,
        "serviceOffering": DATA_OFFERING,
        "purpose": [{"purpose": p} for p in purposes],
        "status": "signed",
    }


def contract_documents() -> dict[str, dict[str, Any]]:
    return {
        BILATERAL_CONTRACT: _bilateral(PROVIDER_PARTICIPANT, [PURPOSE_OFFERING, API_PURPOSE_OFFERING]),
        BILATERAL_NO_ENDPOINT: _bilateral(ENDPOINTLESS_PARTICIPANT, [PURPOSE_OFFERING]),
        ECOSYSTEM_CONTRACT: {
            "_id": "eco-1",
            "ecosystem": f"{CATALOG}/ecosystems/weather",
            "serviceOfferings": [
                {"participant": PROVIDER_PARTICIPANT, "serviceOffering": DATA_OFFERING, "policies": []},
                {"participant": CONSUMER_PARTICIPANT, "serviceOffering": PURPOSE_OFFERING, "policies": []},
                {"participant": CONSUMER_PARTICIPANT, "serviceOffering": API_PURPOSE_OFFERING, "policies": []},
                {"participant": CONSUMER_PARTICIPANT, "serviceOffering": BARE_PURPOSE_OFFERING, "policies": []},
                {"participant": CONSUMER_PARTICIPANT, "serviceOffering": ORPHAN_PURPOSE_OFFERING, "policies": []},
            ],
            "members": [],
            "status": "active",
        },
    }


def catalog_entries() -> dict[str, dict[str, Any]]:
    return {
        PROVIDER_PARTICIPANT: {"_id": "provider", "dataspaceEndpoint": PROVIDER_ENDPOINT},
        CONSUMER_PARTICIPANT: {"_id": "consumer", "dataspaceEndpoint": "http://consumer.test/"},
        ENDPOINTLESS_PARTICIPANT: {"_id": "legacy"},
        PURPOSE_OFFERING: {"_id": "forecast-app", "softwareResources": [f"{CATALOG}/softwareresources/forecast"]},
        API_PURPOSE_OFFERING: {"_id": "scoring-api", "softwareResources": [f"{CATALOG}/softwareresources/scoring"]},
        BARE_PURPOSE_OFFERING: {"_id": "unconfigured", "softwareResources": [f"{CATALOG}/softwareresources/bare"]},
        ORPHAN_PURPOSE_OFFERING: {"_id": "orphan", "softwareResources": []},
        f"{CATALOG}/softwareresources/forecast": {
            "_id": "forecast",
            "representation": {"type": "REST", "method": "none", "url": CONSUMER_APP_URL},
            "isAPI": False,
        },
        f"{CATALOG}/softwareresources/scoring": {
            "_id": "scoring",
            "representation": {"type": "REST", "method": "apiKey", "url": SCORING_API_URL, "credential": "cred-1"},
            "isAPI": True,
        },
        f"{CATALOG}/softwareresources/bare": {"_id": "bare", "representation": {"type": "REST"}},
    }
