# boutique/models/slips.py

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class SlipHeader(BaseModel):
    boutique_name: str
    phone: Optional[str] = None
    address: Optional[str] = None


class SlipCustomer(BaseModel):
    full_name: str
    phone: str
    address: Optional[str] = None


class SlipMeasurement(BaseModel):
    key: str
    label: str
    value: str


class SlipItem(BaseModel):
    position: int
    garment_label: str
    description: Optional[str] = None
    quantity: int
    price: Decimal
    price_display: str
    subtotal: Decimal
    measurements: List[SlipMeasurement]
    notes: Optional[str] = None
    image_count: int


class SlipPayment(BaseModel):
    total_amount: Decimal
    advance_paid: Decimal
    balance_due: Decimal
    total_display: str
    advance_display: str
    balance_display: str


class OrderSlip(BaseModel):
    """Everything a document renderer needs to draw the printed order slip."""

    header: SlipHeader
    order_number: str
    created_on: date
    delivery_date: date
    delivery_display: str
    status_label: str
    measurement_unit: str
    customer: SlipCustomer
    items: List[SlipItem]
    payment: SlipPayment
    notes: Optional[str] = None
    footer: str


class MessageAudience(str, Enum):
    customer = "customer"
    tailor = "tailor"


class ShareMessageOut(BaseModel):
    audience: MessageAudience
    phone: str
    text: str
    link: str
