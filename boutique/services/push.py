# boutique/services/push.py
"""
Web push delivery.

A message goes to every endpoint a user registered, concurrently. Each
endpoint's outcome is independent; endpoints the provider reports as gone
(HTTP 404/410) are deleted afterwards.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import List, NamedTuple

from pywebpush import WebPushException, webpush
from sqlalchemy import delete, select
from sqlalchemy.engine import Engine

from boutique.config import VAPID_PRIVATE_KEY, VAPID_SUBJECT
from boutique.db.schema import push_subscriptions
from boutique.db.upsert import upsert
from boutique.errors import NoSubscriptionsError
from boutique.models.push import DispatchResult, PushPayload, SubscriptionIn

logger = logging.getLogger(__name__)

MAX_WORKERS = 8
EXPIRED_STATUS_CODES = (404, 410)


class PushResult(NamedTuple):
    success: bool
    expired: bool = False


class WebPushSender:
    """Signs and sends one message to one endpoint with the VAPID key pair."""

    def __init__(self, private_key: str = VAPID_PRIVATE_KEY, subject: str = VAPID_SUBJECT):
        self.private_key = private_key
        self.subject = subject

    def send(self, subscription_info: dict, data: str) -> PushResult:
        try:
            webpush(
                subscription_info=subscription_info,
                data=data,
                vapid_private_key=self.private_key,
                vapid_claims={"sub": self.subject},
            )
        except WebPushException as e:
            status = e.response.status_code if e.response is not None else None
            if status in EXPIRED_STATUS_CODES:
                return PushResult(success=False, expired=True)
            logger.error("Push notification error (status %s): %s", status, e)
            return PushResult(success=False)

        return PushResult(success=True)


@lru_cache(maxsize=1)
def get_push_sender() -> WebPushSender:
    return WebPushSender()


def subscription_info(row) -> dict:
    return {
        "endpoint": row["endpoint"],
        "keys": {"p256dh": row["keys_p256dh"], "auth": row["keys_auth"]},
    }


def subscribe(conn, user_id: int, subscription: SubscriptionIn) -> None:
    """Register an endpoint; the same endpoint again replaces its keys."""
    upsert(
        conn,
        push_subscriptions,
        {
            "user_id": user_id,
            "endpoint": subscription.endpoint,
            "keys_p256dh": subscription.keys.p256dh,
            "keys_auth": subscription.keys.auth,
        },
        index_elements=["user_id", "endpoint"],
        update_cols=["keys_p256dh", "keys_auth"],
    )


def unsubscribe(conn, user_id: int, endpoint: str) -> int:
    result = conn.execute(
        delete(push_subscriptions).where(
            push_subscriptions.c.user_id == user_id,
            push_subscriptions.c.endpoint == endpoint,
        )
    )
    return result.rowcount


def _send_one(sender, row, data: str) -> PushResult:
    try:
        return sender.send(subscription_info(row), data)
    except Exception:
        # one endpoint failing must not stop the others
        logger.exception("Push delivery to subscription %s raised", row["id"])
        return PushResult(success=False)


def dispatch(engine: Engine, user_id: int, payload: PushPayload, sender) -> DispatchResult:
    with engine.connect() as conn:
        rows = conn.execute(
            select(push_subscriptions)
            .where(push_subscriptions.c.user_id == user_id)
            .order_by(push_subscriptions.c.id)
        ).mappings().all()

    if not rows:
        raise NoSubscriptionsError(f"user {user_id} has no push subscriptions")

    data = payload.model_dump_json(exclude_none=True)

    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(rows))) as pool:
        results: List[PushResult] = list(
            pool.map(lambda row: _send_one(sender, row, data), rows)
        )

    expired_ids = [row["id"] for row, result in zip(rows, results) if result.expired]
    if expired_ids:
        with engine.begin() as conn:
            conn.execute(
                delete(push_subscriptions).where(push_subscriptions.c.id.in_(expired_ids))
            )
        logger.info("Removed %s expired push subscription(s) for user %s", len(expired_ids), user_id)

    sent = sum(1 for result in results if result.success)
    logger.info("Push %r to user %s: %s/%s delivered", payload.title, user_id, sent, len(rows))

    return DispatchResult(sent=sent, total=len(rows))


def subscribed_user_ids(engine: Engine) -> List[int]:
    with engine.connect() as conn:
        return list(
            conn.execute(
                select(push_subscriptions.c.user_id)
                .distinct()
                .order_by(push_subscriptions.c.user_id)
            ).scalars()
        )
