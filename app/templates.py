# app/templates.py
from __future__ import annotations

from enum import Enum
from typing import Sequence, Tuple


class Template(str, Enum):
    IMMOBILIEN = "Immobilien"
    DROHNE = "Drohne"
    KOMBI = "Kombi"
    STAGING = "Staging"


# Order matters: combined shoots usually mention the drone as well.
_KEYWORDS: Sequence[Tuple[Template, Tuple[str, ...]]] = (
    (Template.KOMBI, ("kombi",)),
    (Template.DROHNE, ("drohne", "drone")),
    (Template.STAGING, ("staging",)),
)


def select_template(shooting_type: str) -> Template:
    """
    Map the free-text shooting type to a layout.

    Case-insensitive substring match, first hit wins:
      - "kombi"            -> Kombi
      - "drohne" / "drone" -> Drohne
      - "staging"          -> Staging
      - anything else      -> Immobilien
    """
    text = (shooting_type or "").lower()
    for template, keywords in _KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return template
    return Template.IMMOBILIEN
