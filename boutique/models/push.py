# boutique/models/push.py

from typing import List, Optional

from pydantic import BaseModel, Field


class SubscriptionKeys(BaseModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class SubscriptionIn(BaseModel):
    """The browser's PushSubscription.toJSON() shape."""

    endpoint: str = Field(..., min_length=1)
    keys: SubscriptionKeys


class UnsubscribeIn(BaseModel):
    endpoint: str = Field(..., min_length=1)


class PushAction(BaseModel):
    action: str
    title: str


class PushPayload(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = ""
    icon: Optional[str] = None
    url: Optional[str] = None
    tag: Optional[str] = None
    actions: List[PushAction] = Field(default_factory=list)


class DispatchResult(BaseModel):
    success: bool = True
    sent: int
    total: int


class VapidKeyOut(BaseModel):
    public_key: str


class SuccessOut(BaseModel):
    success: bool = True
