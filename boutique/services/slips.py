# boutique/services/slips.py
"""
The printed order slip and the WhatsApp share text.

Both are built from an order loaded with boutique.services.orders.load_order
and the boutique's Settings, which supply the header, the unit suffix and
the footer.
"""

import re
from datetime import date
from decimal import Decimal
from typing import List
from urllib.parse import quote

from boutique.config import DEFAULT_PDF_FOOTER
from boutique.models.measurements import GARMENT_TYPE_LABELS, GarmentType, fields_for, label_for
from boutique.models.orders import ORDER_STATUS_LABELS, OrderStatus
from boutique.models.settings import BoutiqueSettings, MeasurementUnit
from boutique.models.slips import (
    MessageAudience,
    OrderSlip,
    ShareMessageOut,
    SlipCustomer,
    SlipHeader,
    SlipItem,
    SlipMeasurement,
    SlipPayment,
)
from boutique.services.lifecycle import compute_balance

RUPEE = "₹"


def format_inr(amount) -> str:
    """Indian digit grouping: 150000 -> '1,50,000', 1234.5 -> '1,234.5'."""
    value = Decimal(amount).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    whole, _, frac = f"{abs(value):f}".partition(".")
    frac = frac.rstrip("0")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups: List[str] = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    return f"{sign}{whole}.{frac}" if frac else f"{sign}{whole}"


def rupees(amount) -> str:
    return f"{RUPEE}{format_inr(amount)}"


def format_day(value: date) -> str:
    return value.strftime("%d %b %Y")


def format_measurement(value, unit: MeasurementUnit) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    number = f"{value:g}"
    return f'{number}"' if unit == MeasurementUnit.inches else f"{number} cm"


def _slip_measurements(garment_type: GarmentType, measurements: dict, unit) -> List[SlipMeasurement]:
    ordered = [f.key for f in fields_for(garment_type) if f.key in measurements]
    ordered += [key for key in measurements if key not in ordered]
    return [
        SlipMeasurement(
            key=key,
            label=label_for(garment_type, key),
            value=format_measurement(measurements[key], unit),
        )
        for key in ordered
    ]


def build_slip(order, customer, items, images, settings: BoutiqueSettings) -> OrderSlip:
    unit = settings.measurement_unit

    slip_items = []
    for position, item in enumerate(items, start=1):
        garment_type = GarmentType(item["garment_type"])
        price = item["price"]
        quantity = item["quantity"]
        price_display = rupees(price) + (f" × {quantity}" if quantity > 1 else "")
        slip_items.append(
            SlipItem(
                position=position,
                garment_label=GARMENT_TYPE_LABELS[garment_type],
                description=item["description"],
                quantity=quantity,
                price=price,
                price_display=price_display,
                subtotal=price * quantity,
                measurements=_slip_measurements(garment_type, item["measurements"] or {}, unit),
                notes=item["notes"],
                image_count=sum(1 for img in images if img["order_item_id"] == item["id"]),
            )
        )

    balance = compute_balance(order["total_amount"], order["advance_paid"])

    return OrderSlip(
        header=SlipHeader(
            boutique_name=settings.boutique_name,
            phone=settings.phone,
            address=settings.address,
        ),
        order_number=order["order_number"],
        created_on=order["created_at"].date(),
        delivery_date=order["delivery_date"],
        delivery_display=format_day(order["delivery_date"]),
        status_label=ORDER_STATUS_LABELS[OrderStatus(order["status"])],
        measurement_unit=unit.value,
        customer=SlipCustomer(
            full_name=customer["full_name"],
            phone=customer["phone"],
            address=customer["address"],
        ),
        items=slip_items,
        payment=SlipPayment(
            total_amount=order["total_amount"],
            advance_paid=order["advance_paid"],
            balance_due=balance,
            total_display=rupees(order["total_amount"]),
            advance_display=rupees(order["advance_paid"]),
            balance_display=rupees(balance),
        ),
        notes=order["notes"],
        footer=settings.pdf_footer_text or DEFAULT_PDF_FOOTER,
    )


def build_message(order, customer, items, audience: MessageAudience) -> ShareMessageOut:
    item_lines = "\n".join(
        f"{i}. {GARMENT_TYPE_LABELS[GarmentType(item['garment_type'])]} - "
        f"{item['description'] or 'No description'}"
        for i, item in enumerate(items, start=1)
    )
    delivery = format_day(order["delivery_date"])
    phone = re.sub(r"[^0-9]", "", customer["phone"])

    if audience == MessageAudience.tailor:
        text = (
            f"Order: {order['order_number']}\n"
            f"Customer: {customer['full_name']}\n"
            f"Delivery: {delivery}\n\n"
            f"Items:\n{item_lines}\n\n"
            "Please check the attached PDF for measurements and details."
        )
        link = f"https://wa.me/?text={quote(text)}"
    else:
        balance = compute_balance(order["total_amount"], order["advance_paid"])
        text = (
            f"Hello {customer['full_name']},\n\n"
            f"Your order {order['order_number']} has been confirmed.\n\n"
            f"Items:\n{item_lines}\n\n"
            f"Delivery Date: {delivery}\n"
            f"Total: {rupees(order['total_amount'])}\n"
            f"Advance Paid: {rupees(order['advance_paid'])}\n"
            f"Balance: {rupees(balance)}\n\n"
            "Thank you!"
        )
        link = f"https://wa.me/{phone}?text={quote(text)}"

    return ShareMessageOut(audience=audience, phone=phone, text=text, link=link)
