# app/schemas.py
"""
Request schema for POST /generate.

The JSON body uses camelCase keys; the models expose snake_case attributes.
Numbers are strict, so "249" (a string) is rejected instead of coerced.
"""
from __future__ import annotations

from typing import Any, List, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.errors import FieldError, ValidationError


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class Contact(_Schema):
    salutation: str = ""
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    company: str = ""
    email: EmailStr
    phone: str = ""
    street: Optional[str] = None
    zip_code: Optional[str] = None
    city: Optional[str] = None


class Project(_Schema):
    shooting_type: str = Field(min_length=1)
    address: str = Field(min_length=1)
    package_name: str = Field(min_length=1)
    package_price: float = Field(ge=0, strict=True)
    package_images: Optional[int] = Field(None, ge=0, strict=True)
    image_count: Optional[int] = Field(None, ge=0, strict=True)
    package_duration: Optional[str] = None
    package_features: List[str] = Field(default_factory=list)
    room_count: Optional[int] = Field(None, ge=0, strict=True)


class Upgrade(_Schema):
    name: str
    price: float = Field(strict=True)
    note: Optional[str] = None
    # legacy name for note
    details: Optional[str] = None

    @property
    def display_note(self) -> str:
        return self.note or self.details or ""


class Pricing(_Schema):
    net_price: str = Field(min_length=1)
    vat_amount: str = Field(min_length=1)
    gross_price: str = Field(min_length=1)
    package_price: Optional[float] = Field(None, strict=True)
    travel_cost: Optional[float] = Field(None, strict=True)
    upgrades_total: Optional[float] = Field(None, strict=True)
    total_price: Optional[float] = Field(None, strict=True)


class PdfData(_Schema):
    contact: Contact
    project: Project
    upgrades: List[Upgrade] = Field(default_factory=list)
    pricing: Pricing


def _to_field_error(error: Any) -> FieldError:
    path = ".".join(str(part) for part in error.get("loc", ()))
    return FieldError(field=path or "body", message=error.get("msg", "Invalid value"))


def validate_pdf_data(payload: Any) -> PdfData:
    """
    Validate a decoded JSON body into PdfData.

    Raises app.errors.ValidationError listing every violated field, not just
    the first one.
    """
    try:
        return PdfData.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError([_to_field_error(e) for e in exc.errors()]) from exc
