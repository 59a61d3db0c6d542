# boutique/api/dashboard.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.engine import Engine

from boutique.api.deps import get_current_user, get_today
from boutique.db.engine import get_engine
from boutique.models.dashboard import DashboardOut
from boutique.services.dashboard import build_dashboard

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/", response_model=DashboardOut)
def dashboard(
    as_of: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD); defaults to today in the boutique's timezone",
    ),
    today: date = Depends(get_today),
    engine: Engine = Depends(get_engine),
) -> DashboardOut:
    """
    Overdue, due-today and upcoming work plus outstanding balances.
    """
    return build_dashboard(engine, as_of or today)
