# boutique/models/settings.py

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from boutique.config import (
    DEFAULT_BOUTIQUE_NAME,
    DEFAULT_MEASUREMENT_UNIT,
    DEFAULT_ORDER_PREFIX,
    DEFAULT_PDF_FOOTER,
    DEFAULT_REMINDER_DAYS,
)


class MeasurementUnit(str, Enum):
    inches = "inches"
    cm = "cm"


class BoutiqueSettings(BaseModel):
    """
    The boutique's own configuration record.

    Loaded once per request and handed to the numbering, slip and message
    builders. ``configured`` is False when no row has been saved yet and the
    values are the defaults.
    """

    boutique_name: str = DEFAULT_BOUTIQUE_NAME
    phone: Optional[str] = None
    address: Optional[str] = None
    measurement_unit: MeasurementUnit = MeasurementUnit(DEFAULT_MEASUREMENT_UNIT)
    reminder_days: int = DEFAULT_REMINDER_DAYS
    pdf_footer_text: Optional[str] = DEFAULT_PDF_FOOTER
    order_prefix: str = DEFAULT_ORDER_PREFIX
    configured: bool = False

    class Config:
        from_attributes = True


class BoutiqueSettingsIn(BaseModel):
    boutique_name: str = Field(DEFAULT_BOUTIQUE_NAME, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    measurement_unit: MeasurementUnit = MeasurementUnit(DEFAULT_MEASUREMENT_UNIT)
    reminder_days: Optional[int] = DEFAULT_REMINDER_DAYS
    pdf_footer_text: Optional[str] = None
    order_prefix: Optional[str] = DEFAULT_ORDER_PREFIX

    class Config:
        str_strip_whitespace = True

    @field_validator("phone", "address", "pdf_footer_text", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("order_prefix")
    @classmethod
    def _default_prefix(cls, value):
        return value or DEFAULT_ORDER_PREFIX

    @field_validator("reminder_days")
    @classmethod
    def _default_reminder_days(cls, value):
        if not value or value <= 0:
            return DEFAULT_REMINDER_DAYS
        return value
