# boutique/api/customers.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.engine import Engine

from boutique.api.deps import get_current_user, get_today
from boutique.config import CUSTOMERS_PAGE_SIZE
from boutique.db.engine import get_engine
from boutique.db.schema import customers, orders
from boutique.models.customers import CustomerIn, CustomerOut, CustomerPage
from boutique.models.orders import OrderSummaryOut
from boutique.services.orders import row_to_summary, summary_select

router = APIRouter(
    prefix="/customers",
    tags=["customers"],
    dependencies=[Depends(get_current_user)],
)


def _fetch_customer(conn, customer_id: int) -> CustomerOut:
    row = conn.execute(
        select(customers).where(customers.c.id == customer_id)
    ).mappings().first()

    if row is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    return CustomerOut(**row)


@router.get("/", response_model=CustomerPage)
def list_customers(
    q: Optional[str] = Query(None, description="Case-insensitive match on name or phone"),
    page: int = Query(1, ge=1),
    page_size: int = Query(CUSTOMERS_PAGE_SIZE, ge=1, le=100),
    engine: Engine = Depends(get_engine),
) -> CustomerPage:
    """
    Return customers, newest first, one page at a time.
    """
    conditions = []
    search = (q or "").strip()
    if search:
        needle = search.lower()
        conditions.append(
            or_(
                func.lower(customers.c.full_name).contains(needle, autoescape=True),
                func.lower(customers.c.phone).contains(needle, autoescape=True),
            )
        )

    with engine.connect() as conn:
        count_stmt = select(func.count()).select_from(customers).where(*conditions)
        total = conn.execute(count_stmt).scalar_one()

        stmt = (
            select(customers)
            .where(*conditions)
            .order_by(customers.c.created_at.desc(), customers.c.id.desc())
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        rows = conn.execute(stmt).mappings().all()

    total_pages = max(1, -(-total // page_size))

    return CustomerPage(
        items=[CustomerOut(**row) for row in rows],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )


@router.post("/", response_model=CustomerOut, status_code=201)
def create_customer(
    payload: CustomerIn,
    engine: Engine = Depends(get_engine),
) -> CustomerOut:
    with engine.begin() as conn:
        customer_id = conn.execute(
            customers.insert().values(**payload.model_dump())
        ).inserted_primary_key[0]
        return _fetch_customer(conn, customer_id)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, engine: Engine = Depends(get_engine)) -> CustomerOut:
    """
    Return a single customer by ID.
    """
    with engine.connect() as conn:
        return _fetch_customer(conn, customer_id)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: int,
    payload: CustomerIn,
    engine: Engine = Depends(get_engine),
) -> CustomerOut:
    """
    Replace every editable field of a customer.
    """
    with engine.begin() as conn:
        result = conn.execute(
            update(customers)
            .where(customers.c.id == customer_id)
            .values(**payload.model_dump())
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Customer not found")
        return _fetch_customer(conn, customer_id)


@router.delete("/{customer_id}", status_code=204)
def delete_customer(customer_id: int, engine: Engine = Depends(get_engine)) -> Response:
    """
    Delete a customer together with all of their orders.
    """
    with engine.begin() as conn:
        result = conn.execute(delete(customers).where(customers.c.id == customer_id))

    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="Customer not found")

    return Response(status_code=204)


@router.get("/{customer_id}/orders", response_model=List[OrderSummaryOut])
def list_customer_orders(
    customer_id: int,
    engine: Engine = Depends(get_engine),
    as_of: date = Depends(get_today),
) -> List[OrderSummaryOut]:
    with engine.connect() as conn:
        _fetch_customer(conn, customer_id)

        rows = conn.execute(
            summary_select()
            .where(orders.c.customer_id == customer_id)
            .order_by(orders.c.created_at.desc(), orders.c.id.desc())
        ).mappings().all()

    return [row_to_summary(row, as_of) for row in rows]
