# app/view_models.py
"""
Turn validated PdfData into the display values one layout needs.

Everything the renderer prints is resolved here: fallback chains for the
overlapping price/count fields, feature lists, greeting lines and the
formatted price rows. Date and randomness come in as arguments so a test
can pin the offer number and validity date.
"""
from __future__ import annotations

import random
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from app.formatters import (
    clean_address,
    extract_city,
    format_currency,
    format_date,
    format_price_string,
    format_shooting_type,
    generate_offer_number,
    get_expiry_date,
    get_formal_greeting,
    get_salutation_display,
)
from app.schemas import PdfData, Project, Upgrade
from app.templates import Template

EXPRESS_DELIVERY = "24 Stunden Lieferung"
IMAGE_LABEL_SUFFIX = "High-End Aufnahmen"
TRAVEL_QUALIFIER = "(inkl. Anfahrt)"
DEFAULT_DURATION = "1-2h"

IMMOBILIEN_FEATURES: Tuple[str, ...] = (
    "Professionelle Bildbearbeitung",
    "48 Stunden Lieferung",
    "ImmoScout24 Optimierung",
    "Blaue-Himmel-Garantie",
    "Kommerzielle Nutzungsrechte",
    "High-Res Dateien",
)
DROHNE_FEATURES: Tuple[str, ...] = (
    "Professionelle Luftaufnahmen",
    "Kommerzielle Nutzungsrechte",
    "Blaue-Himmel-Garantie",
    "Optimiert für Immobilienportale",
    "48 Stunden Lieferung",
)
KOMBI_FEATURES: Tuple[str, ...] = (
    "Innenaufnahmen + Drohnenaufnahmen",
    "Kommerzielle Nutzungsrechte",
    "Verkaufspsychologische Bildoptimierung",
    "Blaue-Himmel-Garantie",
    "Hochstativ-Aufnahmen",
    "4K Drohnenqualität",
)
STAGING_FEATURES: Tuple[str, ...] = (
    "Virtuelles Staging",
    "Fotorealistische Möblierung",
    "Vorher/Nachher-Ansichten",
    "Perspektivische Korrektur",
    "Modernes Interior Design",
    "Lieferung in 24-48h",
)

PACKAGE_IMAGE_COUNTS: Tuple[Tuple[str, int], ...] = (
    ("home s", 6),
    ("home m", 10),
    ("home xl", 20),
    ("home l", 15),
    ("exklusiv", 25),
)

_FIRST_INT = re.compile(r"\d+")
_DELIVERY_48 = ("48 stunden", "48h")


@dataclass(frozen=True)
class UpgradeLine:
    name: str
    price: str
    note: str = ""


@dataclass(frozen=True)
class PriceRow:
    label: str
    amount: str


@dataclass(frozen=True)
class OfferView:
    template: Template
    title: str
    offer_number: str
    date: str
    valid_until: str
    # recipient
    company: str
    salutation: str
    recipient_name: str
    street: str
    zip_city: str
    greeting: str
    formal_greeting: str
    intro: str
    # project card
    address: str
    city: str
    service_label: str
    package_name: str
    image_label: str
    duration: str
    # features
    feature_title: str
    features: Tuple[str, ...]
    note: str
    upgrades: Tuple[UpgradeLine, ...]
    # pricing
    pricing_title: str
    price_rows: Tuple[PriceRow, ...]
    net_label: str
    net_price: str
    vat_label: str
    vat_amount: str
    total_label: str
    gross_price: str


@dataclass(frozen=True)
class ImmobilienView(OfferView):
    next_steps: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DrohneView(OfferView):
    pass


@dataclass(frozen=True)
class KombiView(OfferView):
    savings_note: str = ""


@dataclass(frozen=True)
class StagingView(OfferView):
    room_label: str = ""


# --- fallback chains -------------------------------------------------------

def effective_package_price(data: PdfData) -> float:
    if data.pricing.package_price is not None:
        return data.pricing.package_price
    return data.project.package_price


def effective_travel_cost(data: PdfData) -> float:
    if data.pricing.travel_cost is not None:
        return data.pricing.travel_cost
    return 0.0


def effective_image_count(project: Project) -> int:
    if project.image_count is not None:
        return project.image_count
    if project.package_images is not None:
        return project.package_images
    return 0


def effective_upgrades_total(data: PdfData) -> float:
    if data.pricing.upgrades_total is not None:
        return data.pricing.upgrades_total
    return sum(upgrade.price for upgrade in data.upgrades)


# --- individual resolutions ------------------------------------------------

def has_express_delivery(upgrades: Sequence[Upgrade]) -> bool:
    for upgrade in upgrades:
        name = upgrade.name.lower()
        if "24h" in name or "express" in name:
            return True
    return False


def resolve_features(
    package_features: Sequence[str],
    fallback: Sequence[str],
    express: bool,
) -> Tuple[str, ...]:
    """
    Package features verbatim if there are any, else the layout's fallback.

    With express delivery booked, any 48 hour delivery entry becomes the
    24 hour one.
    """
    features = list(package_features) if package_features else list(fallback)
    if not express:
        return tuple(features)

    resolved: List[str] = []
    for feature in features:
        lower = feature.lower()
        if any(marker in lower for marker in _DELIVERY_48):
            resolved.append(EXPRESS_DELIVERY)
        else:
            resolved.append(feature)
    return tuple(resolved)


def resolve_image_count(project: Project) -> Optional[int]:
    count = effective_image_count(project)
    if count > 0:
        return count

    match = _FIRST_INT.search(project.package_name)
    if match:
        return int(match.group(0))

    name = project.package_name.lower()
    for package, images in PACKAGE_IMAGE_COUNTS:
        if re.search(rf"\b{re.escape(package)}\b", name):
            return images
    return None


def resolve_image_label(project: Project) -> str:
    """
    "N High-End Aufnahmen" from the first source that knows N:
    explicit count, a number in the package name, the package table.
    Falls back to the package name itself.
    """
    count = resolve_image_count(project)
    if count is None:
        return project.package_name
    return f"{count} {IMAGE_LABEL_SUFFIX}"


def resolve_package_row(data: PdfData) -> PriceRow:
    travel_cost = effective_travel_cost(data)
    label = data.project.package_name
    if travel_cost > 0:
        label = f"{label} {TRAVEL_QUALIFIER}"
    amount = effective_package_price(data) + travel_cost
    return PriceRow(label=label, amount=format_currency(amount))


def resolve_room_label(room_count: Optional[int]) -> str:
    if not room_count:
        return ""
    return f"{room_count} {'Raum' if room_count == 1 else 'Räume'}"


def _upgrade_lines(upgrades: Sequence[Upgrade]) -> Tuple[UpgradeLine, ...]:
    return tuple(
        UpgradeLine(
            name=upgrade.name,
            price=format_currency(upgrade.price),
            note=upgrade.display_note,
        )
        for upgrade in upgrades
    )


def _upgrade_rows(upgrades: Sequence[Upgrade]) -> Tuple[PriceRow, ...]:
    return tuple(
        PriceRow(label=upgrade.name, amount=format_currency(upgrade.price))
        for upgrade in upgrades
    )


# --- per-template builders -------------------------------------------------

def _common(data: PdfData, today: date, rng: random.Random) -> dict:
    contact = data.contact
    salutation = get_salutation_display(contact.salutation)
    zip_city = " ".join(part for part in (contact.zip_code, contact.city) if part)
    pricing = data.pricing

    return dict(
        offer_number=generate_offer_number(today, rng),
        date=format_date(today),
        valid_until=get_expiry_date(today),
        company=contact.company,
        salutation=salutation,
        recipient_name=f"{salutation} {contact.first_name} {contact.last_name}",
        street=contact.street or "",
        zip_city=zip_city,
        greeting=f"Guten Tag {salutation} {contact.last_name},",
        formal_greeting=get_formal_greeting(contact.salutation, contact.last_name),
        address=clean_address(data.project.address),
        city=extract_city(data.project.address),
        service_label=format_shooting_type(data.project.shooting_type),
        package_name=data.project.package_name,
        image_label=resolve_image_label(data.project),
        duration=data.project.package_duration or "",
        feature_title="Inklusivleistungen",
        upgrades=_upgrade_lines(data.upgrades),
        pricing_title="Kostenaufstellung für Ihr Shooting",
        net_label="Netto",
        net_price=format_price_string(pricing.net_price),
        vat_label="zzgl. 19% MwSt.",
        vat_amount=format_price_string(pricing.vat_amount),
        total_label="Gesamtbetrag (brutto)",
        gross_price=format_price_string(pricing.gross_price),
    )


def build_immobilien_view(data: PdfData, today: date, rng: random.Random) -> ImmobilienView:
    fields = _common(data, today, rng)
    express = has_express_delivery(data.upgrades)
    duration = fields["duration"] or DEFAULT_DURATION
    return ImmobilienView(
        template=Template.IMMOBILIEN,
        title="Ihr individuelles Angebot",
        intro=(
            "vielen Dank für Ihr Interesse an unseren Leistungen. Für Ihr Objekt in "
            f"{fields['city']} haben wir folgendes Angebot für Sie zusammengestellt:"
        ),
        features=resolve_features(data.project.package_features, IMMOBILIEN_FEATURES, express),
        note="Finale Bildanzahl nach Bedarf – abgerechnet wird nur, was Sie tatsächlich nutzen.",
        price_rows=(resolve_package_row(data),) + _upgrade_rows(data.upgrades),
        next_steps=(
            "Termin vereinbaren – flexibel nach Ihrem Zeitplan",
            f"Professionelles Shooting vor Ort (ca. {duration})",
            f"Ihre Bilder erhalten Sie innerhalb von {'24' if express else '48'} Stunden",
        ),
        **fields,
    )


def build_drohne_view(data: PdfData, today: date, rng: random.Random) -> DrohneView:
    fields = _common(data, today, rng)
    express = has_express_delivery(data.upgrades)
    return DrohneView(
        template=Template.DROHNE,
        title="Ihr Drohnen-Angebot",
        intro=(
            "vielen Dank für Ihr Interesse an unseren Drohnenaufnahmen. Für Ihr Objekt in "
            f"{fields['city']} haben wir folgendes Angebot erstellt:"
        ),
        features=resolve_features(data.project.package_features, DROHNE_FEATURES, express),
        note="",
        price_rows=(resolve_package_row(data),) + _upgrade_rows(data.upgrades),
        **{**fields, "vat_label": "MwSt. (19%)"},
    )


def build_kombi_view(data: PdfData, today: date, rng: random.Random) -> KombiView:
    fields = _common(data, today, rng)
    express = has_express_delivery(data.upgrades)

    rows = [
        PriceRow(
            label=data.project.package_name,
            amount=format_currency(effective_package_price(data)),
        )
    ]
    travel_cost = effective_travel_cost(data)
    if travel_cost > 0:
        rows.append(PriceRow(label="Anfahrtskosten", amount=format_currency(travel_cost)))
    upgrades_total = effective_upgrades_total(data)
    if upgrades_total > 0:
        rows.append(PriceRow(label="Zusatzleistungen", amount=format_currency(upgrades_total)))

    return KombiView(
        template=Template.KOMBI,
        title="Ihr Kombi-Paket Angebot",
        intro=(
            "vielen Dank für Ihr Interesse an unserem Kombi-Paket aus Innen- und "
            "Drohnenaufnahmen."
        ),
        features=resolve_features(data.project.package_features, KOMBI_FEATURES, express),
        note="",
        price_rows=tuple(rows),
        savings_note="Kombi-Vorteil: Sie sparen beim Paketpreis!",
        **{**fields, "pricing_title": "Ihre Investition", "vat_label": "MwSt. (19%)"},
    )


def build_staging_view(data: PdfData, today: date, rng: random.Random) -> StagingView:
    fields = _common(data, today, rng)
    express = has_express_delivery(data.upgrades)
    overrides = {
        "greeting": f"{fields['formal_greeting']},",
        "service_label": "Virtuelles Staging",
        "image_label": "",
        "feature_title": "Inklusivleistungen & Standards",
        "pricing_title": "Kostenübersicht",
        "net_label": "Netto Gesamt",
        "vat_label": "MwSt. 19%",
        "total_label": "Gesamtbetrag",
    }
    return StagingView(
        template=Template.STAGING,
        title="Ihr Virtuelles Staging Angebot",
        intro=(
            "vielen Dank für Ihr Interesse an unserem virtuellen Staging-Service für Ihre "
            "Vermarktung. Basierend auf Ihren Angaben haben wir folgendes Angebot für Sie "
            "erstellt:"
        ),
        features=resolve_features(data.project.package_features, STAGING_FEATURES, express),
        note=(
            "Hinweis: Virtuelles Staging hilft Interessenten, das volle Potenzial "
            "leerstehender Räume zu erkennen und steigert die Klickraten signifikant."
        ),
        price_rows=(resolve_package_row(data),) + _upgrade_rows(data.upgrades),
        room_label=resolve_room_label(data.project.room_count),
        **{**fields, **overrides},
    )


ViewBuilder = Callable[[PdfData, date, random.Random], OfferView]

VIEW_BUILDERS: Dict[Template, ViewBuilder] = {
    Template.IMMOBILIEN: build_immobilien_view,
    Template.DROHNE: build_drohne_view,
    Template.KOMBI: build_kombi_view,
    Template.STAGING: build_staging_view,
}


def build_view_model(
    data: PdfData,
    template: Template,
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> OfferView:
    """
    Build the view model for one layout.

    `today` defaults to the current date and `rng` to a fresh random source;
    pass both to get a deterministic offer number and validity date.
    """
    builder = VIEW_BUILDERS[template]
    return builder(data, today or date.today(), rng or random.Random())
