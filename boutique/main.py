# boutique/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from boutique.api.customers import router as customers_router
from boutique.api.dashboard import router as dashboard_router
from boutique.api.measurements import router as measurements_router
from boutique.api.orders import router as orders_router
from boutique.api.push import PUSH_PREFIX, router as push_router
from boutique.api.settings import router as settings_router
from boutique.config import LOG_LEVEL
from boutique.errors import OrderNumberingError

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Allure Boutique API",
    version="0.1.0",
)


@app.exception_handler(IntegrityError)
def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": f"Conflict: {exc.orig}"})


@app.exception_handler(SQLAlchemyError)
def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Database error; the request was not completed"},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # push routes answer a body that is not even JSON with 400, like any malformed body
    if request.url.path.startswith(PUSH_PREFIX):
        logger.warning("Malformed push request on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"detail": "Malformed request body"})
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(OrderNumberingError)
def numbering_error_handler(request: Request, exc: OrderNumberingError):
    logger.error("Order numbering failed: %s", exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(customers_router)
app.include_router(orders_router)
app.include_router(dashboard_router)
app.include_router(settings_router)
app.include_router(measurements_router)
app.include_router(push_router)
