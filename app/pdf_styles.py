# app/pdf_styles.py
"""
PDF Styling

Paragraph styles, table styles and the page-numbering canvas shared by all
offer layouts.
"""
from __future__ import annotations

from typing import List

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas as pdfcanvas
from reportlab.platypus import TableStyle

PRIMARY = colors.HexColor("#233C63")
TEXT = colors.HexColor("#1a1a1a")
MUTED = colors.HexColor("#64748b")
LIGHT_BG = colors.HexColor("#f8fafc")
BORDER = colors.HexColor("#e2e8f0")
ACCENT = colors.HexColor("#e0f2fe")
SECONDARY = colors.HexColor("#22c55e")

COMPANY_NAME = "ImmoOnPoint"
COMPANY_LINE = (
    "ImmoOnPoint · NPS Media GmbH · Klinkerberg 9, 86152 Augsburg · "
    "HRB 38388 · USt-IdNr.: DE359733225"
)
CONTACT_LINE = "info@immoonpoint.de • +49 1579 2388530"


def get_offer_styles():
    """
    Get the paragraph styles used by the offer layouts.

    Returns:
        Dictionary of ParagraphStyle objects
    """
    styles = getSampleStyleSheet()

    return {
        "Wordmark": ParagraphStyle(
            "Wordmark",
            parent=styles["Heading1"],
            fontSize=20,
            textColor=PRIMARY,
            fontName="Helvetica-Bold",
            spaceAfter=0,
        ),
        "Meta": ParagraphStyle(
            "Meta",
            parent=styles["Normal"],
            fontSize=9,
            textColor=TEXT,
            alignment=TA_RIGHT,
            fontName="Helvetica",
        ),
        "MetaMuted": ParagraphStyle(
            "MetaMuted",
            parent=styles["Normal"],
            fontSize=8,
            textColor=MUTED,
            alignment=TA_RIGHT,
            fontName="Helvetica",
        ),
        "Badge": ParagraphStyle(
            "Badge",
            parent=styles["Normal"],
            fontSize=8,
            textColor=PRIMARY,
            backColor=ACCENT,
            borderPadding=3,
            alignment=TA_RIGHT,
            fontName="Helvetica-Bold",
        ),
        "Recipient": ParagraphStyle(
            "Recipient",
            parent=styles["Normal"],
            fontSize=9,
            leading=13,
            fontName="Helvetica",
        ),
        "Title": ParagraphStyle(
            "OfferTitle",
            parent=styles["Heading1"],
            fontSize=18,
            textColor=PRIMARY,
            spaceAfter=10,
            alignment=TA_LEFT,
            fontName="Helvetica-Bold",
        ),
        "Body": ParagraphStyle(
            "OfferBody",
            parent=styles["BodyText"],
            fontSize=10,
            leading=15,
            textColor=TEXT,
            spaceAfter=4,
            fontName="Helvetica",
        ),
        "SectionTitle": ParagraphStyle(
            "SectionTitle",
            parent=styles["Heading2"],
            fontSize=11,
            textColor=PRIMARY,
            spaceBefore=8,
            spaceAfter=6,
            fontName="Helvetica-Bold",
        ),
        "CardLabel": ParagraphStyle(
            "CardLabel",
            parent=styles["Normal"],
            fontSize=8,
            textColor=MUTED,
            fontName="Helvetica",
        ),
        "CardValue": ParagraphStyle(
            "CardValue",
            parent=styles["Normal"],
            fontSize=9,
            textColor=TEXT,
            fontName="Helvetica-Bold",
        ),
        "Feature": ParagraphStyle(
            "Feature",
            parent=styles["Normal"],
            fontSize=8.5,
            fontName="Helvetica",
        ),
        "FeatureNote": ParagraphStyle(
            "FeatureNote",
            parent=styles["Normal"],
            fontSize=7.5,
            textColor=MUTED,
            leftIndent=10,
            fontName="Helvetica",
        ),
        "Note": ParagraphStyle(
            "Note",
            parent=styles["Normal"],
            fontSize=8,
            textColor=PRIMARY,
            backColor=ACCENT,
            borderPadding=6,
            spaceBefore=8,
            fontName="Helvetica-Oblique",
        ),
        "Highlight": ParagraphStyle(
            "Highlight",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.white,
            backColor=SECONDARY,
            borderPadding=5,
            spaceAfter=12,
            fontName="Helvetica-Bold",
        ),
        "PriceLabel": ParagraphStyle(
            "PriceLabel",
            parent=styles["Normal"],
            fontSize=9,
            textColor=colors.white,
            fontName="Helvetica",
        ),
        "PriceValue": ParagraphStyle(
            "PriceValue",
            parent=styles["Normal"],
            fontSize=9,
            textColor=colors.white,
            alignment=TA_RIGHT,
            fontName="Helvetica-Bold",
        ),
        "PriceTitle": ParagraphStyle(
            "PriceTitle",
            parent=styles["Normal"],
            fontSize=12,
            textColor=colors.white,
            fontName="Helvetica-Bold",
        ),
        "TotalLabel": ParagraphStyle(
            "TotalLabel",
            parent=styles["Normal"],
            fontSize=11,
            textColor=colors.white,
            fontName="Helvetica-Bold",
        ),
        "TotalValue": ParagraphStyle(
            "TotalValue",
            parent=styles["Normal"],
            fontSize=12,
            textColor=colors.white,
            alignment=TA_RIGHT,
            fontName="Helvetica-Bold",
        ),
        "Step": ParagraphStyle(
            "Step",
            parent=styles["Normal"],
            fontSize=9,
            textColor=TEXT,
            fontName="Helvetica",
        ),
        "Cta": ParagraphStyle(
            "Cta",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.white,
            alignment=TA_CENTER,
            fontName="Helvetica-Bold",
        ),
    }


def get_card_style():
    """Light background box for the project details."""
    return TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), LIGHT_BG),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 10),
        ("RIGHTPADDING", (0, 0), (-1, -1), 10),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ])


def get_pricing_style(row_count):
    """
    Dark pricing box: one row per price, then net, VAT and the total.

    Args:
        row_count: Total number of table rows including the title row
    """
    last = row_count - 1
    return TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), PRIMARY),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("SPAN", (0, 0), (-1, 0)),
        ("LEFTPADDING", (0, 0), (-1, -1), 12),
        ("RIGHTPADDING", (0, 0), (-1, -1), 12),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
        ("LINEABOVE", (0, last), (-1, last), 0.5, colors.HexColor("#5b6f8f")),
        ("TOPPADDING", (0, last), (-1, last), 8),
    ])


def draw_footer(canvas, footer_text: str, page_text: str) -> None:
    """
    Draw the company line and page number at the bottom of a page.

    Args:
        canvas: ReportLab canvas positioned on the page to decorate
        footer_text: Company line drawn on the left side
        page_text: Page number text drawn on the right side
    """
    width = canvas._pagesize[0]
    canvas.saveState()

    canvas.setStrokeColor(BORDER)
    canvas.setLineWidth(0.5)
    canvas.line(2 * cm, 1.8 * cm, width - 2 * cm, 1.8 * cm)

    canvas.setFont("Helvetica", 7)
    canvas.setFillColor(MUTED)
    canvas.drawString(2 * cm, 1.3 * cm, footer_text)
    canvas.drawRightString(width - 2 * cm, 1.3 * cm, page_text)

    canvas.restoreState()


class NumberedCanvas(pdfcanvas.Canvas):
    """
    Canvas that holds back every page until save() so the footer can show
    "page / total".

    page_label is a format string with {page} and {total} placeholders.
    """

    def __init__(self, *args, footer_text: str = COMPANY_LINE,
                 page_label: str = "{page} / {total}", **kwargs):
        super().__init__(*args, **kwargs)
        self.footer_text = footer_text
        self.page_label = page_label
        self._saved_page_states: List[dict] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            page_text = self.page_label.format(page=self._pageNumber, total=total)
            draw_footer(self, self.footer_text, page_text)
            super().showPage()
        super().save()
