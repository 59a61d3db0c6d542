# boutique/api/push.py

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.engine import Engine

from boutique.api.deps import CurrentUser, get_current_user
from boutique.config import VAPID_PUBLIC_KEY
from boutique.db.engine import get_engine
from boutique.errors import NoSubscriptionsError
from boutique.models.push import (
    DispatchResult,
    PushPayload,
    SubscriptionIn,
    SuccessOut,
    UnsubscribeIn,
    VapidKeyOut,
)
from boutique.services.push import dispatch, get_push_sender, subscribe, unsubscribe

PUSH_PREFIX = "/api/push"

router = APIRouter(prefix=PUSH_PREFIX, tags=["push"])


def _parse(model, body, detail: str):
    # malformed bodies are a 400 on these routes, not FastAPI's 422
    try:
        return model.model_validate(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail=detail)


@router.get("/vapid-public-key", response_model=VapidKeyOut)
def vapid_public_key() -> VapidKeyOut:
    return VapidKeyOut(public_key=VAPID_PUBLIC_KEY)


@router.post("/subscribe", response_model=SuccessOut)
def subscribe_endpoint(
    body: Any = Body(None),
    user: CurrentUser = Depends(get_current_user),
    engine: Engine = Depends(get_engine),
) -> SuccessOut:
    """
    Register this browser's push endpoint for the signed-in user.
    """
    subscription = _parse(SubscriptionIn, body, "Invalid subscription")

    with engine.begin() as conn:
        subscribe(conn, user.id, subscription)

    return SuccessOut()


@router.delete("/subscribe", response_model=SuccessOut)
def unsubscribe_endpoint(
    body: Any = Body(None),
    user: CurrentUser = Depends(get_current_user),
    engine: Engine = Depends(get_engine),
) -> SuccessOut:
    request = _parse(UnsubscribeIn, body, "Missing endpoint")

    with engine.begin() as conn:
        unsubscribe(conn, user.id, request.endpoint)

    return SuccessOut()


@router.post("/send", response_model=DispatchResult)
def send_endpoint(
    body: Any = Body(None),
    user: CurrentUser = Depends(get_current_user),
    engine: Engine = Depends(get_engine),
    sender=Depends(get_push_sender),
) -> DispatchResult:
    """
    Push a message to every endpoint the signed-in user registered.
    """
    payload = _parse(PushPayload, body, "Missing title")

    try:
        return dispatch(engine, user.id, payload, sender)
    except NoSubscriptionsError:
        raise HTTPException(status_code=404, detail="No subscriptions found")
