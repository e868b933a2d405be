#app/main.py
from __future__ import annotations

import base64
import hmac
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.config import Settings, load_settings
from app.errors import AuthorizationError, FieldError, ValidationError
from app.logging_config import configure_logging
from app.service import GeneratedOffer, generate_offer

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    if not settings.api_key:
        log.warning("PDF_API_KEY is not set; every /generate request will be rejected")
    yield


app = FastAPI(title="ImmoOnPoint Offer PDF Service", lifespan=lifespan)


def _ensure_settings() -> Settings:
    settings = getattr(app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings are not loaded")
    return settings


def _check_api_key(provided: Optional[str], expected: str) -> None:
    """
    Exact match of the x-api-key header against the configured secret.

    An empty secret never matches, so an unconfigured service is closed.
    """
    if not expected or provided is None:
        raise AuthorizationError("API key missing")
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthorizationError("API key mismatch")


def _validation_failed(details) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "details": [asdict(detail) for detail in details],
        },
    )


def _offer_payload(offer: GeneratedOffer) -> dict:
    return {
        "pdfBase64": base64.b64encode(offer.pdf_bytes).decode("ascii"),
        "size": offer.size,
        "filename": offer.filename,
    }


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/generate")
async def generate(request: Request, x_api_key: Optional[str] = Header(None)):
    """
    Render an offer PDF.

    The API key is checked before the body is read. The response carries
    the PDF base64-encoded together with its byte size and a filename.
    """
    settings = _ensure_settings()
    try:
        _check_api_key(x_api_key, settings.api_key)
    except AuthorizationError as exc:
        log.warning("Unauthorized request - %s", exc)
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    try:
        payload = await request.json()
    except ValueError:
        log.warning("Validation failed: body is not valid JSON")
        return _validation_failed([FieldError(field="body", message="Body must be valid JSON")])

    try:
        offer = await run_in_threadpool(generate_offer, payload)
    except ValidationError as exc:
        log.warning("%s", exc)
        return _validation_failed(exc.details)
    except Exception as exc:
        log.exception("PDF generation failed")
        return JSONResponse(
            status_code=500,
            content={
                "error": "PDF generation failed",
                "message": str(exc) or type(exc).__name__,
            },
        )

    return _offer_payload(offer)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=load_settings().port)
