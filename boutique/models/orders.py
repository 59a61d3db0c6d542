# boutique/models/orders.py

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Dict, List, Optional, Union

from pydantic import Base64Bytes, BaseModel, BeforeValidator, Field, model_validator

from boutique.models.customers import CustomerOut
from boutique.models.measurements import (
    GarmentType,
    MeasurementValue,
    normalize_measurements,
    unknown_keys,
)


class OrderStatus(str, Enum):
    received = "received"
    in_progress = "in_progress"
    trial = "trial"
    ready = "ready"
    delivered = "delivered"


# Display order only; any status may be set from any other.
ORDER_STATUS_FLOW: List[OrderStatus] = [
    OrderStatus.received,
    OrderStatus.in_progress,
    OrderStatus.trial,
    OrderStatus.ready,
    OrderStatus.delivered,
]

ORDER_STATUS_LABELS: Dict[OrderStatus, str] = {
    OrderStatus.received: "Received",
    OrderStatus.in_progress: "In Progress",
    OrderStatus.trial: "Trial",
    OrderStatus.ready: "Ready",
    OrderStatus.delivered: "Delivered",
}


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class DesignImageUpload(BaseModel):
    filename: str = Field(..., min_length=1)
    content: Base64Bytes
    content_type: Optional[str] = None
    caption: OptionalText = None


class OrderItemIn(BaseModel):
    garment_type: GarmentType = GarmentType.blouse
    description: OptionalText = None
    measurements: Dict[str, Optional[Union[int, float, str]]] = Field(default_factory=dict)
    quantity: int = Field(1, ge=1)
    price: Decimal = Field(..., gt=0)
    notes: OptionalText = None
    images: List[DesignImageUpload] = Field(default_factory=list)

    class Config:
        str_strip_whitespace = True

    @model_validator(mode="after")
    def _check_measurements(self):
        cleaned = normalize_measurements(self.measurements)
        bad = unknown_keys(self.garment_type, cleaned)
        if bad:
            raise ValueError(
                f"unknown measurements for {self.garment_type.value}: {', '.join(bad)}"
            )
        self.measurements = cleaned
        return self

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class OrderCreate(BaseModel):
    customer_id: int
    delivery_date: date
    advance_paid: Decimal = Field(Decimal("0"), ge=0)
    notes: OptionalText = None
    items: List[OrderItemIn] = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True

    @property
    def total_amount(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))


class StatusUpdate(BaseModel):
    status: OrderStatus


class PaymentIn(BaseModel):
    amount: Decimal = Field(..., gt=0)


class DesignImageOut(BaseModel):
    id: int
    order_item_id: int
    storage_path: str
    caption: Optional[str] = None
    uploaded_at: datetime
    url: Optional[str] = None
    thumbnail_url: Optional[str] = None


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    garment_type: GarmentType
    garment_label: str
    description: Optional[str] = None
    measurements: Dict[str, MeasurementValue] = Field(default_factory=dict)
    quantity: int
    price: Decimal
    subtotal: Decimal
    notes: Optional[str] = None
    images: List[DesignImageOut] = Field(default_factory=list)


class OrderOut(BaseModel):
    id: int
    order_number: str
    customer_id: int
    delivery_date: date
    status: OrderStatus
    status_label: str
    total_amount: Decimal
    advance_paid: Decimal
    balance: Decimal
    is_overdue: bool
    is_due_today: bool
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderSummaryOut(OrderOut):
    customer_name: str
    customer_phone: str


class OrderDetailOut(OrderOut):
    customer: CustomerOut
    items: List[OrderItemOut]


class ImageFailure(BaseModel):
    order_item_id: int
    filename: str
    error: str


class OrderCreatedOut(OrderDetailOut):
    image_failures: List[ImageFailure] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    items: List[OrderSummaryOut]
    total: int
    limit: int
    offset: int
