# boutique/services/reminders.py

import logging
from datetime import date, timedelta
from typing import List

from sqlalchemy.engine import Engine

from boutique.db.schema import orders
from boutique.errors import NoSubscriptionsError
from boutique.models.orders import OrderSummaryOut
from boutique.models.push import PushPayload
from boutique.services.lifecycle import pending_filter
from boutique.services.orders import row_to_summary, summary_select
from boutique.services.push import dispatch, subscribed_user_ids
from boutique.services.slips import format_day

logger = logging.getLogger(__name__)


def due_orders(engine: Engine, as_of: date, reminder_days: int) -> List[OrderSummaryOut]:
    """Undelivered orders due between today and today + reminder_days."""
    window_end = as_of + timedelta(days=reminder_days)
    stmt = (
        summary_select()
        .where(
            orders.c.delivery_date >= as_of,
            orders.c.delivery_date <= window_end,
            pending_filter(),
        )
        .order_by(orders.c.delivery_date.asc(), orders.c.id.asc())
    )
    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [row_to_summary(row, as_of) for row in rows]


def reminder_payload(order: OrderSummaryOut, as_of: date) -> PushPayload:
    days_left = (order.delivery_date - as_of).days
    if days_left == 0:
        when = "today"
    elif days_left == 1:
        when = "tomorrow"
    else:
        when = f"in {days_left} days ({format_day(order.delivery_date)})"

    return PushPayload(
        title=f"Delivery due {when}",
        body=f"{order.order_number} for {order.customer_name} is {order.status_label.lower()}",
        url=f"/orders/{order.id}",
        tag=f"reminder-{order.order_number}",
    )


def send_reminders(engine: Engine, sender, as_of: date, reminder_days: int) -> dict:
    """Push one reminder per due order to every subscribed user."""
    due = due_orders(engine, as_of, reminder_days)
    user_ids = subscribed_user_ids(engine)

    stats = {"n_orders": len(due), "n_users": len(user_ids), "n_sent": 0, "n_attempted": 0}

    for order in due:
        payload = reminder_payload(order, as_of)
        for user_id in user_ids:
            try:
                result = dispatch(engine, user_id, payload, sender)
            except NoSubscriptionsError:
                # every endpoint of this user expired during an earlier send
                continue
            stats["n_sent"] += result.sent
            stats["n_attempted"] += result.total

    logger.info(
        "Reminders: %s order(s) due, %s user(s), %s/%s push(es) delivered",
        stats["n_orders"], stats["n_users"], stats["n_sent"], stats["n_attempted"],
    )
    return stats
