"""HTTP surface: health check, API key, validation errors and PDF generation."""
import base64
import json
import re

import pytest
from fastapi.testclient import TestClient

import app.service as service
from app.errors import RenderError
from app.main import app

HEADERS = {"x-api-key": "test-secret"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "T" in body["timestamp"]


def test_generate_returns_base64_pdf(client, payload):
    response = client.post("/generate", json=payload, headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    pdf_bytes = base64.b64decode(body["pdfBase64"])
    assert pdf_bytes.startswith(b"%PDF")
    assert body["size"] == len(pdf_bytes)
    assert re.fullmatch(r"Angebot-ImmoOnPoint-\d+\.pdf", body["filename"])


@pytest.mark.parametrize("shooting_type", ["Drohne", "Kombi Drohne", "Virtual Staging"])
def test_generate_other_layouts(client, payload, shooting_type):
    payload["project"]["shootingType"] = shooting_type

    response = client.post("/generate", json=payload, headers=HEADERS)

    assert response.status_code == 200


def test_missing_email_is_400_with_details(client, payload):
    del payload["contact"]["email"]

    response = client.post("/generate", json=payload, headers=HEADERS)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert any(detail["field"] == "contact.email" for detail in body["details"])


def test_invalid_json_is_400(client):
    response = client.post(
        "/generate",
        content=b"{not json",
        headers={**HEADERS, "content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "body"


def test_nan_price_is_400(client, payload):
    payload["upgrades"][0]["price"] = float("nan")
    # json.dumps writes NaN as a bare, non-standard token
    body = json.dumps(payload)

    response = client.post(
        "/generate",
        content=body.encode("utf-8"),
        headers={**HEADERS, "content-type": "application/json"},
    )

    assert response.status_code == 400
    assert [d["field"] for d in response.json()["details"]] == ["upgrades.0.price"]


def test_wrong_api_key_is_401(client, payload):
    response = client.post("/generate", json=payload, headers={"x-api-key": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_missing_api_key_is_401_and_body_ignored(client):
    response = client.post(
        "/generate",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_unconfigured_api_key_rejects_everything(monkeypatch, payload):
    monkeypatch.setenv("PDF_API_KEY", "")
    with TestClient(app) as client:
        response = client.post("/generate", json=payload, headers={"x-api-key": ""})

    assert response.status_code == 401


def test_render_failure_is_500(client, payload, monkeypatch):
    def failing_render(view, output_path=None):
        raise RenderError("renderer exploded")

    monkeypatch.setattr(service, "render_offer_pdf", failing_render)

    response = client.post("/generate", json=payload, headers=HEADERS)

    assert response.status_code == 500
    assert response.json() == {
        "error": "PDF generation failed",
        "message": "renderer exploded",
    }


def test_failed_request_does_not_affect_the_next_one(client, payload, monkeypatch):
    calls = {"count": 0}
    original = service.render_offer_pdf

    def flaky_render(view, output_path=None):
        calls["count"] += 1
        if calls["count"] == 1:
            raise ValueError("first call fails")
        return original(view, output_path)

    monkeypatch.setattr(service, "render_offer_pdf", flaky_render)

    assert client.post("/generate", json=payload, headers=HEADERS).status_code == 500
    assert client.post("/generate", json=payload, headers=HEADERS).status_code == 200
