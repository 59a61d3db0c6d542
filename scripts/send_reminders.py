# scripts/send_reminders.py
"""
Push delivery reminders for orders due within the boutique's reminder window.
Meant to be run once a day by cron.

Usage:
    python -m scripts.send_reminders
"""

import logging

from boutique.db.engine import get_engine
from boutique.services.lifecycle import today
from boutique.services.push import get_push_sender
from boutique.services.reminders import send_reminders
from boutique.services.settings import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    engine = get_engine()
    with engine.connect() as conn:
        settings = load_settings(conn)

    as_of = today()
    logger.info(f"Reminder window: {as_of} + {settings.reminder_days} day(s)")

    stats = send_reminders(engine, get_push_sender(), as_of, settings.reminder_days)

    logger.info(f"Orders due:        {stats['n_orders']}")
    logger.info(f"Subscribed users:  {stats['n_users']}")
    logger.info(f"Pushes delivered:  {stats['n_sent']} / {stats['n_attempted']}")


if __name__ == "__main__":
    main()
