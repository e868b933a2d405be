"""Rendering view models to PDF bytes."""
import dataclasses
from io import BytesIO

import pytest
from reportlab.lib.pagesizes import A4

from app.errors import RenderError
from app.pdf_offer import LAYOUTS, render_offer_pdf
from app.pdf_styles import NumberedCanvas
from app.schemas import validate_pdf_data
from app.templates import Template
from app.view_models import build_view_model


@pytest.mark.parametrize("template", list(Template))
def test_every_template_renders_a_pdf(payload, today, rng, template):
    view = build_view_model(validate_pdf_data(payload), template, today=today, rng=rng)

    pdf_bytes = render_offer_pdf(view)

    assert isinstance(pdf_bytes, bytes)
    assert pdf_bytes.startswith(b"%PDF")


def test_every_template_has_a_layout():
    assert set(LAYOUTS) == set(Template)


def test_markup_in_user_text_is_escaped(payload, today, rng):
    payload["contact"]["company"] = "Müller & Söhne <GmbH>"
    payload["upgrades"][0]["note"] = "a < b & c"
    view = build_view_model(validate_pdf_data(payload), Template.KOMBI, today=today, rng=rng)

    assert render_offer_pdf(view).startswith(b"%PDF")


def test_output_path_receives_the_same_bytes(payload, today, rng, tmp_path):
    view = build_view_model(validate_pdf_data(payload), Template.STAGING, today=today, rng=rng)
    target = tmp_path / "offer.pdf"

    pdf_bytes = render_offer_pdf(view, output_path=str(target))

    assert target.read_bytes() == pdf_bytes


def test_render_failure_is_wrapped(payload, today, rng):
    view = build_view_model(validate_pdf_data(payload), Template.IMMOBILIEN, today=today, rng=rng)
    broken = dataclasses.replace(view, features=None)

    with pytest.raises(RenderError):
        render_offer_pdf(broken)


@pytest.mark.parametrize("template", list(Template))
def test_very_long_feature_wraps_onto_next_pages(payload, today, rng, template):
    payload["project"]["packageFeatures"] = ["Sehr lange Leistung " * 400, "HDR"]
    view = build_view_model(validate_pdf_data(payload), template, today=today, rng=rng)

    assert render_offer_pdf(view).startswith(b"%PDF")


@pytest.mark.parametrize("template", list(Template))
def test_very_long_address_wraps_onto_next_pages(payload, today, rng, template):
    payload["project"]["address"] = "Musterstr. 1 " * 600 + ", 12345 Berlin, Deutschland"
    view = build_view_model(validate_pdf_data(payload), template, today=today, rng=rng)

    assert render_offer_pdf(view).startswith(b"%PDF")


def test_footer_shows_page_of_total():
    buffer = BytesIO()
    canvas = NumberedCanvas(
        buffer, pagesize=A4, pageCompression=0, page_label="Seite {page} / {total}"
    )
    for _ in range(3):
        canvas.drawString(100, 700, "Inhalt")
        canvas.showPage()
    canvas.save()

    pdf = buffer.getvalue()
    assert b"(Seite 1 / 3)" in pdf
    assert b"(Seite 3 / 3)" in pdf
    assert b"(Seite 4 / 3)" not in pdf


def test_staging_numbers_pages_with_prefix():
    assert LAYOUTS[Template.STAGING].page_label == "Seite {page} / {total}"
    assert LAYOUTS[Template.IMMOBILIEN].page_label == "{page} / {total}"
