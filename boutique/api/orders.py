# boutique/api/orders.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.engine import Engine

from boutique.api.deps import get_boutique_settings, get_current_user, get_today
from boutique.db.engine import get_engine
from boutique.errors import NotFoundError, StorageError
from boutique.models.orders import (
    DesignImageOut,
    DesignImageUpload,
    OrderCreate,
    OrderCreatedOut,
    OrderDetailOut,
    OrderListResponse,
    OrderStatus,
    PaymentIn,
    StatusUpdate,
)
from boutique.models.settings import BoutiqueSettings
from boutique.models.slips import MessageAudience, OrderSlip, ShareMessageOut
from boutique.services import lifecycle
from boutique.services.orders import (
    attach_image,
    create_order,
    find_item,
    get_order_detail,
    image_out,
    list_orders,
    load_order,
)
from boutique.services.slips import build_message, build_slip
from boutique.services.storage import get_storage

router = APIRouter(
    prefix="/orders",
    tags=["orders"],
    dependencies=[Depends(get_current_user)],
)


def _not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{e.what} not found")


@router.post("/", response_model=OrderCreatedOut, status_code=201)
def create_order_endpoint(
    payload: OrderCreate,
    engine: Engine = Depends(get_engine),
    settings: BoutiqueSettings = Depends(get_boutique_settings),
    storage=Depends(get_storage),
    as_of: date = Depends(get_today),
) -> OrderCreatedOut:
    """
    Create an order, its garment items and their design images.

    The order and items are stored together or not at all. Images are
    uploaded afterwards; any that fail are listed in image_failures.
    """
    try:
        order_id, failures = create_order(engine, payload, settings, storage)
    except NotFoundError as e:
        raise _not_found(e)

    detail = get_order_detail(engine, order_id, storage, as_of)
    return OrderCreatedOut(**detail.model_dump(), image_failures=failures)


@router.get("/", response_model=OrderListResponse)
def list_orders_endpoint(
    status: Optional[OrderStatus] = Query(None),
    q: Optional[str] = Query(None, description="Order number or customer name"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    engine: Engine = Depends(get_engine),
    as_of: date = Depends(get_today),
) -> OrderListResponse:
    """
    Return orders by delivery date, soonest first.
    """
    items, total = list_orders(
        engine, as_of, status=status, q=(q or "").strip() or None, limit=limit, offset=offset
    )
    return OrderListResponse(items=items, total=total, limit=limit, offset=offset)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    engine: Engine = Depends(get_engine),
    storage=Depends(get_storage),
    as_of: date = Depends(get_today),
) -> OrderDetailOut:
    try:
        return get_order_detail(engine, order_id, storage, as_of)
    except NotFoundError as e:
        raise _not_found(e)


@router.patch("/{order_id}/status", response_model=OrderDetailOut)
def change_status(
    order_id: int,
    body: StatusUpdate,
    engine: Engine = Depends(get_engine),
    storage=Depends(get_storage),
    as_of: date = Depends(get_today),
) -> OrderDetailOut:
    """
    Move an order to any status; no step of the flow is required.
    """
    try:
        with engine.begin() as conn:
            lifecycle.change_status(conn, order_id, body.status)
    except NotFoundError as e:
        raise _not_found(e)

    return get_order_detail(engine, order_id, storage, as_of)


@router.post("/{order_id}/payments", response_model=OrderDetailOut)
def record_payment(
    order_id: int,
    body: PaymentIn,
    engine: Engine = Depends(get_engine),
    storage=Depends(get_storage),
    as_of: date = Depends(get_today),
) -> OrderDetailOut:
    try:
        with engine.begin() as conn:
            lifecycle.record_payment(conn, order_id, body.amount)
    except NotFoundError as e:
        raise _not_found(e)

    return get_order_detail(engine, order_id, storage, as_of)


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, engine: Engine = Depends(get_engine)) -> Response:
    try:
        with engine.begin() as conn:
            lifecycle.delete_order(conn, order_id)
    except NotFoundError as e:
        raise _not_found(e)

    return Response(status_code=204)


@router.post(
    "/{order_id}/items/{item_id}/images",
    response_model=DesignImageOut,
    status_code=201,
)
def add_design_image(
    order_id: int,
    item_id: int,
    upload: DesignImageUpload,
    engine: Engine = Depends(get_engine),
    storage=Depends(get_storage),
) -> DesignImageOut:
    """
    Attach one design photo to an existing item. Re-sending the same photo
    returns the image already on record.
    """
    try:
        find_item(engine, order_id, item_id)
        row = attach_image(engine, storage, order_id, item_id, upload)
    except NotFoundError as e:
        raise _not_found(e)
    except StorageError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return image_out(row, storage)


@router.get("/{order_id}/slip", response_model=OrderSlip)
def get_order_slip(
    order_id: int,
    engine: Engine = Depends(get_engine),
    settings: BoutiqueSettings = Depends(get_boutique_settings),
) -> OrderSlip:
    """
    Return the content of the printable order slip.
    """
    try:
        order, customer, items, images = load_order(engine, order_id)
    except NotFoundError as e:
        raise _not_found(e)

    return build_slip(order, customer, items, images, settings)


@router.get("/{order_id}/message", response_model=ShareMessageOut)
def get_share_message(
    order_id: int,
    audience: MessageAudience = Query(MessageAudience.customer),
    engine: Engine = Depends(get_engine),
) -> ShareMessageOut:
    try:
        order, customer, items, _images = load_order(engine, order_id)
    except NotFoundError as e:
        raise _not_found(e)

    return build_message(order, customer, items, audience)
