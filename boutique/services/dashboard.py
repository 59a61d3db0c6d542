# boutique/services/dashboard.py

from datetime import date, timedelta

from sqlalchemy.engine import Engine

from boutique.config import RECENT_ORDERS_LIMIT, UPCOMING_WINDOW_DAYS
from boutique.db.schema import orders
from boutique.models.dashboard import DashboardOut
from boutique.services.lifecycle import count_pending, outstanding_total, pending_filter
from boutique.services.orders import row_to_summary, summary_select


def build_dashboard(engine: Engine, as_of: date) -> DashboardOut:
    window_end = as_of + timedelta(days=UPCOMING_WINDOW_DAYS)

    with engine.connect() as conn:
        def fetch(stmt):
            return [row_to_summary(r, as_of) for r in conn.execute(stmt).mappings().all()]

        overdue = fetch(
            summary_select()
            .where(orders.c.delivery_date < as_of, pending_filter())
            .order_by(orders.c.delivery_date.asc())
        )
        due_today = fetch(
            summary_select()
            .where(orders.c.delivery_date == as_of, pending_filter())
            .order_by(orders.c.created_at.desc(), orders.c.id.desc())
        )
        upcoming = fetch(
            summary_select()
            .where(
                orders.c.delivery_date > as_of,
                orders.c.delivery_date <= window_end,
                pending_filter(),
            )
            .order_by(orders.c.delivery_date.asc())
        )
        recent = fetch(
            summary_select()
            .order_by(orders.c.created_at.desc(), orders.c.id.desc())
            .limit(RECENT_ORDERS_LIMIT)
        )

        pending_count = count_pending(conn)
        total_balance = outstanding_total(conn)

    return DashboardOut(
        as_of=as_of,
        overdue=overdue,
        due_today=due_today,
        upcoming=upcoming,
        recent=recent,
        pending_count=pending_count,
        total_balance=total_balance,
    )
