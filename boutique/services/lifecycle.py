# boutique/services/lifecycle.py
"""
Order status and payment rules.

Statuses are not transition-checked: any status may be set from any other.
Payments only have to be positive; advance_paid may exceed the total, in
which case the derived balance is shown as zero.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import delete, func, select, update
from zoneinfo import ZoneInfo

from boutique.config import TIMEZONE
from boutique.db.schema import orders
from boutique.errors import NotFoundError
from boutique.models.orders import ORDER_STATUS_LABELS, OrderStatus

ZERO = Decimal("0")


def today(tz: str = TIMEZONE) -> date:
    return datetime.now(ZoneInfo(tz)).date()


def compute_balance(total_amount, advance_paid) -> Decimal:
    raw = Decimal(total_amount or 0) - Decimal(advance_paid or 0)
    return raw if raw > ZERO else ZERO


def is_overdue(delivery_date: date, status, as_of: date) -> bool:
    return delivery_date < as_of and OrderStatus(status) != OrderStatus.delivered


def is_due_today(delivery_date: date, status, as_of: date) -> bool:
    return delivery_date == as_of and OrderStatus(status) != OrderStatus.delivered


def derived_fields(row, as_of: date) -> dict:
    """Fields computed from an orders row; never stored."""
    status = OrderStatus(row["status"])
    return {
        "status_label": ORDER_STATUS_LABELS[status],
        "balance": compute_balance(row["total_amount"], row["advance_paid"]),
        "is_overdue": is_overdue(row["delivery_date"], status, as_of),
        "is_due_today": is_due_today(row["delivery_date"], status, as_of),
    }


def change_status(conn, order_id: int, new_status: OrderStatus) -> None:
    result = conn.execute(
        update(orders)
        .where(orders.c.id == order_id)
        .values(status=OrderStatus(new_status).value)
    )
    if result.rowcount == 0:
        raise NotFoundError("Order", order_id)


def record_payment(conn, order_id: int, amount: Decimal) -> Decimal:
    """
    Add ``amount`` to the order's advance and return the new advance.

    The increment happens in SQL so two payments recorded at the same time
    cannot overwrite each other.
    """
    if amount is None or Decimal(amount) <= ZERO:
        raise ValueError("payment amount must be positive")

    result = conn.execute(
        update(orders)
        .where(orders.c.id == order_id)
        .values(advance_paid=orders.c.advance_paid + Decimal(amount))
    )
    if result.rowcount == 0:
        raise NotFoundError("Order", order_id)

    return conn.execute(
        select(orders.c.advance_paid).where(orders.c.id == order_id)
    ).scalar_one()


def delete_order(conn, order_id: int) -> None:
    # order_items and design_images go with it (ON DELETE CASCADE)
    result = conn.execute(delete(orders).where(orders.c.id == order_id))
    if result.rowcount == 0:
        raise NotFoundError("Order", order_id)


def pending_filter():
    return orders.c.status != OrderStatus.delivered.value


def outstanding_total(conn) -> Decimal:
    """Sum of the (clamped) balances of every order not yet delivered."""
    rows = conn.execute(
        select(orders.c.total_amount, orders.c.advance_paid).where(pending_filter())
    ).all()
    return sum(
        (compute_balance(r.total_amount, r.advance_paid) for r in rows), ZERO
    )


def count_pending(conn) -> int:
    return conn.execute(
        select(func.count()).select_from(orders).where(pending_filter())
    ).scalar_one()
