# boutique/models/dashboard.py

from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from boutique.models.orders import OrderSummaryOut


class DashboardOut(BaseModel):
    as_of: date
    overdue: List[OrderSummaryOut]
    due_today: List[OrderSummaryOut]
    upcoming: List[OrderSummaryOut]
    recent: List[OrderSummaryOut]
    pending_count: int
    total_balance: Decimal
