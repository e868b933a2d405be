# app/service.py
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from app.pdf_offer import render_offer_pdf
from app.schemas import validate_pdf_data
from app.templates import Template, select_template
from app.view_models import build_view_model

log = logging.getLogger(__name__)

FILENAME_PREFIX = "Angebot-ImmoOnPoint"


@dataclass
class GeneratedOffer:
    pdf_bytes: bytes
    template: Template
    offer_number: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.pdf_bytes)


def offer_filename(epoch_ms: Optional[int] = None) -> str:
    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    return f"{FILENAME_PREFIX}-{epoch_ms}.pdf"


def generate_offer(
    payload: Any,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedOffer:
    """
    Validate -> select layout -> build view model -> render.

    Raises ValidationError for a bad payload and RenderError when the
    document cannot be produced.
    """
    data = validate_pdf_data(payload)
    template = select_template(data.project.shooting_type)
    log.info(
        "Generating %s offer for %s", template.value, data.contact.email
    )

    started = time.perf_counter()
    view = build_view_model(data, template, today=today, rng=rng)
    pdf_bytes = render_offer_pdf(view)
    duration_ms = int((time.perf_counter() - started) * 1000)

    log.info(
        "Offer %s generated in %dms, size: %d bytes",
        view.offer_number,
        duration_ms,
        len(pdf_bytes),
    )
    return GeneratedOffer(
        pdf_bytes=pdf_bytes,
        template=template,
        offer_number=view.offer_number,
        filename=offer_filename(),
    )
