import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from . import models, schemas
from .database import transaction
from .errors import ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger("farm-orders.crud")

ADMIN_ROLE = "admin"
REQUIRED_ORDER_FIELDS = ("order_date", "status", "farmer_id")


def _find_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.user_id == user_id).first()


def _find_product(db: Session, product_id: int) -> Optional[models.Product]:
    return db.query(models.Product).filter(models.Product.product_id == product_id).first()


def _find_order(db: Session, order_id: int) -> models.Order:
    order = db.query(models.Order).filter(models.Order.order_id == order_id).first()
    if order is None:
        raise NotFoundError("order")
    return order


def _validate_new_order(order_data: schemas.OrderCreate) -> None:
    errors = [
        {"field": name, "message": "field required"}
        for name in REQUIRED_ORDER_FIELDS
        if getattr(order_data, name) is None
    ]
    if not order_data.items:
        errors.append({"field": "items", "message": "at least one item required"})
    if errors:
        raise ValidationError(errors=errors)


def create_order(db: Session, order_data: schemas.OrderCreate) -> schemas.OrderRead:
    """
    Create an order and all of its items in a single transaction.

    - the farmer is resolved before the transaction is opened
    - every item's price is snapshotted as product price * quantity
    - a missing product discards the header row and every item written so far
    - when no total is supplied it is the sum of the item prices
    """
    _validate_new_order(order_data)

    farmer = _find_user(db, order_data.farmer_id)
    if farmer is None:
        raise NotFoundError("farmer")

    with transaction(db):
        order = models.Order(
            order_date=order_data.order_date,
            status=order_data.status,
            farmer_id=farmer.user_id,
            admin_id=order_data.admin_id,
            total_price=order_data.total_price if order_data.total_price is not None else Decimal("0.00"),
        )
        db.add(order)
        db.flush()

        items_total = Decimal("0.00")
        for item in order_data.items:
            product = _find_product(db, item.product_id)
            if product is None:
                logger.warning(
                    "product %s not found, discarding order for farmer %s",
                    item.product_id,
                    farmer.user_id,
                )
                raise NotFoundError("product", item.product_id)

            line_price = product.price * item.quantity
            items_total += line_price
            db.add(models.OrderItem(
                order_id=order.order_id,
                product_id=product.product_id,
                quantity=item.quantity,
                order_price=line_price,
            ))

        if order_data.total_price is None:
            order.total_price = items_total

    db.refresh(order)
    logger.info("order %s created with %d items", order.order_id, len(order.items))
    return schemas.OrderRead.model_validate(order)


def list_orders(db: Session, status: Optional[schemas.OrderStatus] = None) -> List[schemas.OrderRead]:
    query = db.query(models.Order)
    if status is not None:
        query = query.filter(models.Order.status == status)
    orders = query.order_by(models.Order.order_id).all()
    return [schemas.OrderRead.model_validate(order) for order in orders]


def list_pending_orders(db: Session) -> List[schemas.OrderRead]:
    return list_orders(db, schemas.OrderStatus.PENDING)


def get_order(db: Session, order_id: int) -> schemas.OrderRead:
    return schemas.OrderRead.model_validate(_find_order(db, order_id))


def merge_order_update(
    existing: schemas.OrderRead,
    patch: schemas.OrderUpdate,
    admin_id: int,
) -> schemas.OrderRead:
    """Return ``existing`` with the non-null fields of ``patch`` applied.

    Omitted and null fields keep their current value. ``admin_id`` is always
    replaced with the acting admin. Items are carried over untouched.
    """
    changes = patch.model_dump(exclude_none=True)
    changes["admin_id"] = admin_id
    return existing.model_copy(update=changes)


def update_order(
    db: Session,
    order_id: int,
    patch: schemas.OrderUpdate,
    acting_user_id: Optional[int],
) -> schemas.OrderRead:
    admin = _find_user(db, acting_user_id) if acting_user_id is not None else None
    if admin is None or admin.role != ADMIN_ROLE:
        raise ForbiddenError()

    existing = get_order(db, order_id)

    if patch.farmer_id is not None and _find_user(db, patch.farmer_id) is None:
        raise NotFoundError("farmer", patch.farmer_id)

    updated = merge_order_update(existing, patch, admin.user_id)
    with transaction(db):
        db.execute(
            update(models.Order)
            .where(models.Order.order_id == order_id)
            .values(
                order_date=updated.order_date,
                status=updated.status,
                farmer_id=updated.farmer_id,
                admin_id=updated.admin_id,
                total_price=updated.total_price,
            )
        )

    logger.info("order %s updated by admin %s", order_id, admin.user_id)
    return get_order(db, order_id)


def delete_order(db: Session, order_id: int) -> None:
    order = _find_order(db, order_id)
    with transaction(db):
        # items go with the order through the relationship cascade
        db.delete(order)
    logger.info("order %s deleted", order_id)
