import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, database, models, schemas
from .auth import get_current_user_id
from .config import settings
from .errors import InternalError, OrderServiceError, ValidationError

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("farm-orders")


@asynccontextmanager
async def lifespan(app: FastAPI):
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("database ready")
    yield
    database.engine.dispose()
    logger.info("database connections closed")


app = FastAPI(title="Farm Orders API", lifespan=lifespan)


def _internal_error_body(detail: str) -> dict:
    body = {"message": "Internal server error"}
    if settings.expose_error_detail:
        body["error"] = detail
    return body


@app.exception_handler(OrderServiceError)
async def handle_service_error(request: Request, exc: OrderServiceError):
    if isinstance(exc, InternalError):
        return JSONResponse(status_code=exc.status_code, content=_internal_error_body(exc.detail))
    body = {"message": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "errors": errors},
    )


@app.exception_handler(SQLAlchemyError)
async def handle_storage_error(request: Request, exc: SQLAlchemyError):
    logger.exception("storage error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_internal_error_body(str(exc)),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_internal_error_body(str(exc)),
    )


@app.post(
    "/orders",
    response_model=schemas.OrderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(order: schemas.OrderCreate, db: Session = Depends(database.get_db)):
    new_order = crud.create_order(db, order)
    return schemas.OrderCreatedResponse(message="Order created successfully", order=new_order)


@app.get("/orders/pending", response_model=List[schemas.OrderRead])
def list_pending_orders(db: Session = Depends(database.get_db)):
    return crud.list_pending_orders(db)


@app.get("/orders", response_model=List[schemas.OrderRead])
def list_orders(
    status_filter: Optional[schemas.OrderStatus] = Query(default=None, alias="status"),
    db: Session = Depends(database.get_db),
):
    return crud.list_orders(db, status_filter)


@app.get("/orders/{order_id}", response_model=schemas.OrderRead)
def get_order(order_id: int, db: Session = Depends(database.get_db)):
    return crud.get_order(db, order_id)


@app.put("/orders/{order_id}", response_model=schemas.OrderRead)
def update_order(
    order_id: int,
    patch: schemas.OrderUpdate,
    user_id: Optional[int] = Depends(get_current_user_id),
    db: Session = Depends(database.get_db),
):
    return crud.update_order(db, order_id, patch, user_id)


@app.delete("/orders/{order_id}", response_model=schemas.MessageResponse)
def delete_order(order_id: int, db: Session = Depends(database.get_db)):
    crud.delete_order(db, order_id)
    return schemas.MessageResponse(message="Order deleted successfully")
