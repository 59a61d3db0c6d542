# boutique/api/deps.py
"""Shared FastAPI dependencies: database, caller identity, settings, clock."""

import hashlib
from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.engine import Engine

from boutique.db.engine import get_engine
from boutique.db.schema import users
from boutique.models.settings import BoutiqueSettings
from boutique.services.lifecycle import today
from boutique.services.settings import load_settings

bearer = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: int
    email: str


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    engine: Engine = Depends(get_engine),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")

    with engine.connect() as conn:
        row = conn.execute(
            select(users.c.id, users.c.email)
            .where(users.c.api_token == hash_token(credentials.credentials))
        ).mappings().first()

    if row is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return CurrentUser(id=row["id"], email=row["email"])


def get_boutique_settings(engine: Engine = Depends(get_engine)) -> BoutiqueSettings:
    with engine.connect() as conn:
        return load_settings(conn)


def get_today() -> date:
    return today()
