"""The validate -> select -> build -> render pipeline without HTTP."""
import logging
import re

import pytest

from app.errors import ValidationError
from app.service import generate_offer, offer_filename
from app.templates import Template


def test_generate_offer_picks_layout_and_names_file(payload, today, rng):
    payload["project"]["shootingType"] = "Kombi (Innen + Drohne)"

    offer = generate_offer(payload, today=today, rng=rng)

    assert offer.template is Template.KOMBI
    assert offer.offer_number.startswith("IOP-260130-")
    assert offer.pdf_bytes.startswith(b"%PDF")
    assert offer.size == len(offer.pdf_bytes)
    assert re.fullmatch(r"Angebot-ImmoOnPoint-\d+\.pdf", offer.filename)


def test_generate_offer_rejects_invalid_payload(payload):
    del payload["pricing"]

    with pytest.raises(ValidationError) as exc_info:
        generate_offer(payload)

    assert [d.field for d in exc_info.value.details] == ["pricing"]


def test_generate_offer_logs_summary(payload, caplog):
    caplog.set_level(logging.INFO)

    generate_offer(payload)

    assert "erika@mustermann-immobilien.de" in caplog.text
    assert "bytes" in caplog.text


def test_offer_filename():
    assert offer_filename(1760000000000) == "Angebot-ImmoOnPoint-1760000000000.pdf"
