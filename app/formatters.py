# app/formatters.py
from __future__ import annotations

import random
import re
from datetime import date, datetime, timedelta
from typing import Union

DEFAULT_REGION = "Ihrer Region"
OFFER_PREFIX = "IOP"
OFFER_VALIDITY_DAYS = 30

_WEEKDAYS = (
    "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag",
)
_MONTHS = (
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
)

_COUNTRY_SUFFIX = re.compile(r",\s*(germany|deutschland)\s*$", re.IGNORECASE)
_POSTAL_CITY = re.compile(r"^\d{5}\s+(.+)$")

DateLike = Union[date, datetime, str]


def format_currency(amount: float) -> str:
    """
    Format a number as German currency, e.g. 1234.5 -> "1.234,50 €".

    Always two decimals, "." as thousands separator, "," as decimal separator.
    """
    # -0.001 rounds to -0.0, which would print as "-0,00"
    amount = round(amount, 2) + 0.0
    text = f"{amount:,.2f}"
    # 1,234.50 -> 1.234,50
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} €"


def format_german_price(amount: float) -> str:
    """Two decimals with a decimal comma and no currency symbol (249 -> "249,00")."""
    return f"{round(amount, 2) + 0.0:.2f}".replace(".", ",")


def format_price_string(value: str) -> str:
    """
    Reformat an already computed total such as "1234.56" to "1234,56 €".

    The value is never parsed as a float. Only a single decimal dot is
    turned into a comma; strings that already use a comma (or contain
    several dots) keep their separators.
    """
    text = (value or "").strip()
    if not text:
        return "0,00 €"
    if "," not in text and text.count(".") == 1:
        text = text.replace(".", ",")
    if "€" not in text:
        text = f"{text} €"
    return text


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value).date()


def format_date(value: DateLike) -> str:
    """DD.MM.YYYY"""
    d = _as_date(value)
    return f"{d.day:02d}.{d.month:02d}.{d.year:04d}"


def format_long_date(value: DateLike) -> str:
    d = _as_date(value)
    return f"{_WEEKDAYS[d.weekday()]}, {d.day:02d}. {_MONTHS[d.month - 1]} {d.year}"


def clean_address(address: str) -> str:
    """
    Remove a trailing country from an address.

    "Musterstraße 1, 12345 Berlin, Germany" -> "Musterstraße 1, 12345 Berlin"
    """
    if not address:
        return ""
    return _COUNTRY_SUFFIX.sub("", address.strip()).strip()


def extract_city(address: str) -> str:
    """
    Pick the city out of "Street, Postal City, Country".

    The second-to-last segment is used, without its postal code. Addresses
    with fewer than two segments fall back to "Ihrer Region".
    """
    if not address or not address.strip():
        return DEFAULT_REGION

    parts = [part.strip() for part in address.split(",")]
    if len(parts) < 2:
        return DEFAULT_REGION

    city_part = parts[-2]
    match = _POSTAL_CITY.match(city_part)
    if match:
        return match.group(1).strip()
    return city_part or DEFAULT_REGION


def get_salutation_display(salutation: str) -> str:
    """Normalize free text to "Herr" or "Frau"; anything unclear is "Herr"."""
    lower = (salutation or "").strip().lower()
    if "frau" in lower:
        return "Frau"
    return "Herr"


def get_formal_greeting(salutation: str, last_name: str) -> str:
    if get_salutation_display(salutation) == "Frau":
        return f"Sehr geehrte Frau {last_name}"
    return f"Sehr geehrter Herr {last_name}"


def format_shooting_type(shooting_type: str) -> str:
    """"immobilien-shooting" -> "Immobilien-Shooting"."""
    if not shooting_type:
        return ""
    cleaned = re.sub(r"-?shooting$", "", shooting_type.strip(), flags=re.IGNORECASE)
    cleaned = cleaned.replace("-", " ").strip()
    if not cleaned:
        return "Shooting"
    return f"{cleaned[0].upper()}{cleaned[1:].lower()}-Shooting"


def generate_offer_number(today: date, rng: random.Random) -> str:
    """
    Cosmetic offer number IOP-YYMMDD-RRR with RRR in [100, 999].

    Not unique; a new one is drawn for every rendered document.
    """
    suffix = rng.randint(100, 999)
    return f"{OFFER_PREFIX}-{today:%y%m%d}-{suffix}"


def get_expiry_date(today: date, days: int = OFFER_VALIDITY_DAYS) -> str:
    return format_date(today + timedelta(days=days))
