"""Shared fixtures: a complete request body, a pinned date and a seeded random source."""
import copy
import random
import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

API_KEY = "test-secret"

VALID_PAYLOAD = {
    "contact": {
        "salutation": "Frau",
        "firstName": "Erika",
        "lastName": "Mustermann",
        "company": "Mustermann Immobilien GmbH",
        "email": "erika@mustermann-immobilien.de",
        "phone": "+49 821 123456",
        "street": "Hauptstraße 5",
        "zipCode": "86150",
        "city": "Augsburg",
    },
    "project": {
        "shootingType": "immobilien-shooting",
        "address": "Musterstr. 1, 12345 Berlin, Deutschland",
        "packageName": "Home M",
        "packagePrice": 249,
        "packageDuration": "1,5h",
    },
    "upgrades": [
        {"name": "Grundriss", "price": 49.0, "note": "2D, bemaßt"},
    ],
    "pricing": {
        "netPrice": "298.00",
        "vatAmount": "56.62",
        "grossPrice": "354.62",
    },
}


@pytest.fixture
def payload() -> dict:
    """A fresh, complete and valid request body."""

    return copy.deepcopy(VALID_PAYLOAD)


@pytest.fixture
def today() -> date:
    return date(2026, 1, 30)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch):
    """TestClient with the startup hook run against a known API key."""

    from fastapi.testclient import TestClient

    from app.main import app

    monkeypatch.setenv("PDF_API_KEY", API_KEY)
    monkeypatch.delenv("PORT", raising=False)
    with TestClient(app) as test_client:
        yield test_client
