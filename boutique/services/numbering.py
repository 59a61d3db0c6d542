# boutique/services/numbering.py
"""
Order numbers: ``{prefix}-{sequence:04d}``, e.g. ``ALR-0001``.

The sequence is a single database row advanced with UPDATE ... RETURNING.
The caller must run this inside the transaction that inserts the order, so
the counter row stays locked until the order is committed and a rolled-back
creation never leaves an order behind. Gaps are allowed; duplicates are not
(orders.order_number is also UNIQUE).
"""

import logging

from sqlalchemy import update

from boutique.db.schema import ORDER_COUNTER_ID, order_counters
from boutique.errors import OrderNumberingError
from boutique.models.settings import BoutiqueSettings

logger = logging.getLogger(__name__)


def format_order_number(prefix: str, sequence: int) -> str:
    return f"{prefix}-{sequence:04d}"


def next_order_number(conn, settings: BoutiqueSettings) -> str:
    stmt = (
        update(order_counters)
        .where(order_counters.c.id == ORDER_COUNTER_ID)
        .values(value=order_counters.c.value + 1)
        .returning(order_counters.c.value)
    )
    sequence = conn.execute(stmt).scalar_one_or_none()

    if sequence is None:
        raise OrderNumberingError("order number counter is missing; run scripts/init_db.py")

    return format_order_number(settings.order_prefix, sequence)
