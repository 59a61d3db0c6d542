# boutique/services/orders.py
"""
Order creation and order read models.

Creation runs in two phases:

1. One transaction: take the next order number, insert the order, insert
   every item. Any failure rolls all of it back (including the counter).
2. After commit, upload each item's design images one by one. A failed
   upload is logged and reported back; it never undoes the order.
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from boutique.db.schema import customers, design_images, order_items, orders
from boutique.errors import NotFoundError, StorageError
from boutique.models.customers import CustomerOut
from boutique.models.measurements import GARMENT_TYPE_LABELS, GarmentType
from boutique.models.orders import (
    DesignImageOut,
    DesignImageUpload,
    ImageFailure,
    OrderCreate,
    OrderDetailOut,
    OrderItemOut,
    OrderStatus,
    OrderSummaryOut,
)
from boutique.models.settings import BoutiqueSettings
from boutique.services.lifecycle import derived_fields
from boutique.services.numbering import next_order_number
from boutique.services.storage import build_image_path, guess_content_type

logger = logging.getLogger(__name__)

ORDER_FIELDS = (
    "id",
    "order_number",
    "customer_id",
    "delivery_date",
    "status",
    "total_amount",
    "advance_paid",
    "notes",
    "created_at",
    "updated_at",
)

THUMBNAIL_SIZE = 200


def summary_select():
    """orders joined to the owning customer's name and phone."""
    return select(
        orders,
        customers.c.full_name.label("customer_name"),
        customers.c.phone.label("customer_phone"),
    ).select_from(orders.join(customers))


def row_to_summary(row, as_of: date) -> OrderSummaryOut:
    return OrderSummaryOut(
        **{name: row[name] for name in ORDER_FIELDS},
        **derived_fields(row, as_of),
        customer_name=row["customer_name"],
        customer_phone=row["customer_phone"],
    )


def image_out(row, storage) -> DesignImageOut:
    path = row["storage_path"]
    return DesignImageOut(
        id=row["id"],
        order_item_id=row["order_item_id"],
        storage_path=path,
        caption=row["caption"],
        uploaded_at=row["uploaded_at"],
        url=storage.get_public_url(path),
        thumbnail_url=storage.get_public_url(path, width=THUMBNAIL_SIZE, height=THUMBNAIL_SIZE),
    )


def create_order(
    engine: Engine,
    payload: OrderCreate,
    settings: BoutiqueSettings,
    storage,
) -> Tuple[int, List[ImageFailure]]:
    """
    Create an order with its items, then attach its images.

    Returns the new order id and the images that could not be stored.
    """
    with engine.connect() as conn:
        found = conn.execute(
            select(customers.c.id).where(customers.c.id == payload.customer_id)
        ).first()
    if found is None:
        raise NotFoundError("Customer", payload.customer_id)

    with engine.begin() as conn:
        order_number = next_order_number(conn, settings)

        order_id = conn.execute(
            orders.insert().values(
                order_number=order_number,
                customer_id=payload.customer_id,
                delivery_date=payload.delivery_date,
                status=OrderStatus.received.value,
                total_amount=payload.total_amount,
                advance_paid=payload.advance_paid,
                notes=payload.notes,
            )
        ).inserted_primary_key[0]

        item_ids: List[int] = []
        for item in payload.items:
            item_id = conn.execute(
                order_items.insert().values(
                    order_id=order_id,
                    garment_type=item.garment_type.value,
                    description=item.description,
                    measurements=item.measurements,
                    quantity=item.quantity,
                    price=item.price,
                    notes=item.notes,
                )
            ).inserted_primary_key[0]
            item_ids.append(item_id)

    logger.info(
        "Created order %s (id=%s) with %s item(s), total %s",
        order_number, order_id, len(item_ids), payload.total_amount,
    )

    failures: List[ImageFailure] = []
    for item_id, item in zip(item_ids, payload.items):
        for upload in item.images:
            try:
                attach_image(engine, storage, order_id, item_id, upload)
            except StorageError as e:
                logger.warning(
                    "Skipping design image %r for order %s item %s: %s",
                    upload.filename, order_number, item_id, e,
                )
                failures.append(
                    ImageFailure(order_item_id=item_id, filename=upload.filename, error=str(e))
                )

    return order_id, failures


def attach_image(
    engine: Engine,
    storage,
    order_id: int,
    item_id: int,
    upload: DesignImageUpload,
):
    """
    Upload one design photo for an item and record it.

    Safe to retry: the same bytes for the same item resolve to the same
    storage path, and an already-recorded path is returned as is.
    """
    path = build_image_path(order_id, item_id, upload.filename, upload.content)
    recorded = select(design_images).where(
        design_images.c.order_item_id == item_id,
        design_images.c.storage_path == path,
    )

    with engine.connect() as conn:
        existing = conn.execute(recorded).mappings().first()
    if existing is not None:
        return existing

    storage.upload(path, upload.content, upload.content_type or guess_content_type(upload.filename))

    try:
        with engine.begin() as conn:
            conn.execute(
                design_images.insert().values(
                    order_item_id=item_id,
                    storage_path=path,
                    caption=upload.caption,
                )
            )
    except IntegrityError:
        # a concurrent retry of the same photo recorded it first
        logger.info("Design image %s already recorded for item %s", path, item_id)
        with engine.connect() as conn:
            existing = conn.execute(recorded).mappings().first()
        if existing is None:
            raise
        return existing

    with engine.connect() as conn:
        return conn.execute(recorded).mappings().one()


def find_item(engine: Engine, order_id: int, item_id: int):
    with engine.connect() as conn:
        row = conn.execute(
            select(order_items).where(
                order_items.c.id == item_id,
                order_items.c.order_id == order_id,
            )
        ).mappings().first()
    if row is None:
        raise NotFoundError("Order item", item_id)
    return row


def load_order(engine: Engine, order_id: int):
    """The order row with its customer, items and images, as raw mappings."""
    with engine.connect() as conn:
        order = conn.execute(
            select(orders).where(orders.c.id == order_id)
        ).mappings().first()
        if order is None:
            raise NotFoundError("Order", order_id)

        customer = conn.execute(
            select(customers).where(customers.c.id == order["customer_id"])
        ).mappings().one()

        items = conn.execute(
            select(order_items)
            .where(order_items.c.order_id == order_id)
            .order_by(order_items.c.id)
        ).mappings().all()

        images = []
        if items:
            images = conn.execute(
                select(design_images)
                .where(design_images.c.order_item_id.in_([i["id"] for i in items]))
                .order_by(design_images.c.id)
            ).mappings().all()

    return order, customer, items, images


def get_order_detail(engine: Engine, order_id: int, storage, as_of: date) -> OrderDetailOut:
    order, customer, items, images = load_order(engine, order_id)

    item_models: List[OrderItemOut] = []
    for item in items:
        garment_type = GarmentType(item["garment_type"])
        item_models.append(
            OrderItemOut(
                id=item["id"],
                order_id=item["order_id"],
                garment_type=garment_type,
                garment_label=GARMENT_TYPE_LABELS[garment_type],
                description=item["description"],
                measurements=item["measurements"] or {},
                quantity=item["quantity"],
                price=item["price"],
                subtotal=item["price"] * item["quantity"],
                notes=item["notes"],
                images=[
                    image_out(img, storage)
                    for img in images
                    if img["order_item_id"] == item["id"]
                ],
            )
        )

    return OrderDetailOut(
        **{name: order[name] for name in ORDER_FIELDS},
        **derived_fields(order, as_of),
        customer=CustomerOut(**customer),
        items=item_models,
    )


def list_orders(
    engine: Engine,
    as_of: date,
    status: Optional[OrderStatus] = None,
    q: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[OrderSummaryOut], int]:
    conditions = []
    if status is not None:
        conditions.append(orders.c.status == OrderStatus(status).value)
    if q:
        needle = q.lower()
        conditions.append(
            or_(
                func.lower(orders.c.order_number).contains(needle, autoescape=True),
                func.lower(customers.c.full_name).contains(needle, autoescape=True),
            )
        )

    with engine.connect() as conn:
        count_stmt = (
            select(func.count())
            .select_from(orders.join(customers))
            .where(*conditions)
        )
        total = conn.execute(count_stmt).scalar_one()

        stmt = (
            summary_select()
            .where(*conditions)
            .order_by(orders.c.delivery_date.asc(), orders.c.id.asc())
            .limit(limit)
            .offset(offset)
        )
        rows = conn.execute(stmt).mappings().all()

    return [row_to_summary(row, as_of) for row in rows], total
