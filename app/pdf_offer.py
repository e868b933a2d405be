# app/pdf_offer.py
from __future__ import annotations

from functools import partial
from io import BytesIO
from typing import Dict, List, Optional, Type
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.platypus import (
    Flowable,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from app.errors import RenderError
from app.pdf_styles import (
    COMPANY_LINE,
    COMPANY_NAME,
    CONTACT_LINE,
    BORDER,
    LIGHT_BG,
    PRIMARY,
    SECONDARY,
    NumberedCanvas,
    get_card_style,
    get_offer_styles,
    get_pricing_style,
)
from app.templates import Template
from app.view_models import KombiView, ImmobilienView, OfferView, StagingView


CONTENT_WIDTH = A4[0] - 4 * cm


def _p(text: str, style) -> Paragraph:
    return Paragraph(escape(text), style)


def _cell(text: str, style) -> List[Flowable]:
    # a table row can only split across pages when its cells hold lists
    return [_p(text, style)]


class OfferLayout:
    """
    Page layout shared by all offers.

    Subclasses override single sections; build_story() keeps the order:
    header, recipient, title, project card, features, additional services,
    pricing, closing.
    """

    page_label = "{page} / {total}"

    def __init__(self):
        self.styles = get_offer_styles()

    def build_story(self, view: OfferView) -> List[Flowable]:
        story: List[Flowable] = []
        story.extend(self.header(view))
        story.extend(self.recipient(view))
        story.extend(self.title(view))
        story.extend(self.project_card(view))
        story.extend(self.features(view))
        story.extend(self.upgrades(view))
        story.extend(self.pricing(view))
        story.extend(self.closing(view))
        return story

    # --- sections --------------------------------------------------------

    def header(self, view: OfferView) -> List[Flowable]:
        right = [
            _p(view.date, self.styles["Meta"]),
            _p(f"Angebot {view.offer_number}", self.styles["MetaMuted"]),
            Spacer(1, 4),
            _p(f"Gültig bis {view.valid_until}", self.styles["Badge"]),
        ]
        table = Table(
            [[_p(COMPANY_NAME, self.styles["Wordmark"]), right]],
            colWidths=[CONTENT_WIDTH * 0.55, CONTENT_WIDTH * 0.45],
        )
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ]))
        return [table, Spacer(1, 0.6 * cm)]

    def recipient(self, view: OfferView) -> List[Flowable]:
        lines = [view.company, view.recipient_name, view.street, view.zip_city]
        flowables: List[Flowable] = [
            _p(line, self.styles["Recipient"]) for line in lines if line
        ]
        flowables.append(Spacer(1, 0.6 * cm))
        return flowables

    def title(self, view: OfferView) -> List[Flowable]:
        return [
            _p(view.title, self.styles["Title"]),
            _p(view.greeting, self.styles["Body"]),
            _p(view.intro, self.styles["Body"]),
            Spacer(1, 0.3 * cm),
        ]

    def project_items(self, view: OfferView) -> List[tuple]:
        items = [
            ("Objekt", view.address),
            ("Leistung", view.service_label),
            ("Paket", view.package_name),
        ]
        if view.image_label:
            items.append(("Umfang", view.image_label))
        if view.duration:
            items.append(("Dauer", view.duration))
        return items

    def project_card(self, view: OfferView) -> List[Flowable]:
        cells = [
            [_p(label, self.styles["CardLabel"]), _p(value, self.styles["CardValue"])]
            for label, value in self.project_items(view)
        ]
        # two items per row
        rows = []
        for i in range(0, len(cells), 2):
            pair = cells[i:i + 2]
            if len(pair) == 1:
                pair.append("")
            rows.append(pair)

        card = Table(
            [[_cell("Projektdetails", self.styles["SectionTitle"]), ""]] + rows,
            colWidths=[CONTENT_WIDTH / 2] * 2,
            splitInRow=1,
        )
        card.setStyle(get_card_style())
        return [card, Spacer(1, 0.4 * cm)]

    def features(self, view: OfferView) -> List[Flowable]:
        flowables: List[Flowable] = [_p(view.feature_title, self.styles["SectionTitle"])]
        flowables.append(self._grid([f"• {feature}" for feature in view.features]))
        if view.note:
            flowables.append(_p(view.note, self.styles["Note"]))
        return flowables

    def upgrade_text(self, upgrade) -> str:
        return f"+ {upgrade.name}"

    def upgrades(self, view: OfferView) -> List[Flowable]:
        if not view.upgrades:
            return []
        flowables: List[Flowable] = [_p("Zusatzleistungen", self.styles["SectionTitle"])]
        for upgrade in view.upgrades:
            flowables.append(_p(self.upgrade_text(upgrade), self.styles["Feature"]))
            if upgrade.note:
                flowables.append(_p(upgrade.note, self.styles["FeatureNote"]))
        return flowables

    def pricing(self, view: OfferView) -> List[Flowable]:
        label, value = self.styles["PriceLabel"], self.styles["PriceValue"]
        data = [[_cell(view.pricing_title, self.styles["PriceTitle"]), ""]]
        for row in view.price_rows:
            data.append([_cell(row.label, label), _cell(row.amount, value)])
        data.append([_cell(view.net_label, label), _cell(view.net_price, value)])
        data.append([_cell(view.vat_label, label), _cell(view.vat_amount, value)])
        data.append([
            _cell(view.total_label, self.styles["TotalLabel"]),
            _cell(view.gross_price, self.styles["TotalValue"]),
        ])

        table = Table(
            data,
            colWidths=[CONTENT_WIDTH * 0.65, CONTENT_WIDTH * 0.35],
            splitInRow=1,
        )
        table.setStyle(get_pricing_style(len(data)))
        return [Spacer(1, 0.4 * cm), KeepTogether([table]), Spacer(1, 0.4 * cm)]

    def closing(self, view: OfferView) -> List[Flowable]:
        return []

    def _grid(self, texts: List[str]) -> Table:
        cells = [_cell(text, self.styles["Feature"]) for text in texts]
        rows = [cells[i:i + 2] for i in range(0, len(cells), 2)]
        if rows and len(rows[-1]) == 1:
            rows[-1].append("")
        if not rows:
            rows = [["", ""]]
        grid = Table(rows, colWidths=[CONTENT_WIDTH / 2] * 2, splitInRow=1)
        grid.setStyle(TableStyle([
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("TOPPADDING", (0, 0), (-1, -1), 2),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
        ]))
        return grid


class ImmobilienLayout(OfferLayout):

    def closing(self, view: ImmobilienView) -> List[Flowable]:
        styles = self.styles
        rows = [
            [_cell(str(number), styles["Cta"]), _cell(step, styles["Step"])]
            for number, step in enumerate(view.next_steps, start=1)
        ]
        steps = Table(
            [[_cell("So geht es weiter", styles["SectionTitle"]), ""]] + rows,
            colWidths=[1 * cm, CONTENT_WIDTH - 1 * cm],
            splitInRow=1,
        )
        steps.setStyle(TableStyle([
            ("SPAN", (0, 0), (-1, 0)),
            ("BACKGROUND", (0, 0), (-1, -1), LIGHT_BG),
            ("BOX", (0, 0), (-1, -1), 0.5, BORDER),
            ("BACKGROUND", (0, 1), (0, -1), PRIMARY),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))

        cta = Table(
            [[_p("Jetzt unverbindlich Termin anfragen", styles["Cta"])],
             [_p(CONTACT_LINE, styles["Cta"])]],
            colWidths=[CONTENT_WIDTH],
        )
        cta.setStyle(TableStyle([("BACKGROUND", (0, 0), (-1, -1), SECONDARY)]))
        return [KeepTogether([steps, Spacer(1, 0.2 * cm), cta])]


class DrohneLayout(OfferLayout):
    pass


class KombiLayout(OfferLayout):

    def title(self, view: KombiView) -> List[Flowable]:
        story = [_p(view.title, self.styles["Title"])]
        if view.savings_note:
            story.append(_p(view.savings_note, self.styles["Highlight"]))
        story.extend([
            _p(view.greeting, self.styles["Body"]),
            _p(view.intro, self.styles["Body"]),
            Spacer(1, 0.3 * cm),
        ])
        return story

    def upgrade_text(self, upgrade) -> str:
        return f"+ {upgrade.name} ({upgrade.price})"


class StagingLayout(OfferLayout):
    page_label = "Seite {page} / {total}"

    def project_items(self, view: StagingView) -> List[tuple]:
        items = [
            ("Objektadresse", view.address),
            ("Leistung", view.service_label),
            ("Gewähltes Paket", view.package_name),
        ]
        if view.room_label:
            items.append(("Umfang", view.room_label))
        return items


LAYOUTS: Dict[Template, Type[OfferLayout]] = {
    Template.IMMOBILIEN: ImmobilienLayout,
    Template.DROHNE: DrohneLayout,
    Template.KOMBI: KombiLayout,
    Template.STAGING: StagingLayout,
}


def render_offer_pdf(view: OfferView, output_path: Optional[str] = None) -> bytes:
    """
    Render an offer view model to PDF bytes.

    The layout is picked from view.template. Any failure while building or
    rendering the document is raised as RenderError.
    """
    try:
        layout = LAYOUTS[view.template]()
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=2 * cm,
            rightMargin=2 * cm,
            topMargin=1.5 * cm,
            bottomMargin=2.5 * cm,
            title=f"Angebot {view.offer_number}",
            author=COMPANY_NAME,
        )

        canvasmaker = partial(
            NumberedCanvas, footer_text=COMPANY_LINE, page_label=layout.page_label
        )
        doc.build(layout.build_story(view), canvasmaker=canvasmaker)
        pdf_bytes = buffer.getvalue()
        buffer.close()
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(str(exc) or type(exc).__name__, cause=exc) from exc

    if output_path:
        with open(output_path, "wb") as f:
            f.write(pdf_bytes)

    return pdf_bytes
