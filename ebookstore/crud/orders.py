import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from .. import models
from ..database import transaction

logger = logging.getLogger(__name__)


def cart_total(cart_items: List[models.CartItem]) -> Decimal:
    return sum((Decimal(item.price) * item.quantity for item in cart_items), Decimal("0"))


def create_order(db: Session, user_id: int, address_id: int, cart_items: List[models.CartItem]) -> models.Order:
    """
    Turn a cart snapshot into a PENDING order with one item per cart line and
    empty the cart. Either all of it is written or none of it.
    """
    order = models.Order(
        user_id=user_id,
        address_id=address_id,
        total=cart_total(cart_items),
        status_id=models.ORDER_PENDING,
    )
    with transaction(db):
        db.add(order)
        db.flush()
        for item in cart_items:
            db.add(
                models.OrderItem(
                    order_id=order.id,
                    product_id=item.ebook_id,
                    quantity=item.quantity,
                    price=item.price,
                )
            )
        db.query(models.CartItem).filter(
            models.CartItem.id.in_([item.id for item in cart_items])
        ).delete(synchronize_session=False)
    db.refresh(order)
    logger.info("Order created", extra={"order_id": order.id, "user_id": user_id, "total": str(order.total)})
    return order


def _orders(db: Session):
    return db.query(models.Order).options(joinedload(models.Order.items))


def get_order(db: Session, order_id: int) -> Optional[models.Order]:
    return _orders(db).filter(models.Order.id == order_id).first()


def list_user_orders(db: Session, user_id: int) -> List[models.Order]:
    return _orders(db).filter(models.Order.user_id == user_id).order_by(models.Order.id.desc()).all()


def list_all_orders(db: Session) -> List[models.Order]:
    return _orders(db).order_by(models.Order.id.desc()).all()


def list_seller_orders(db: Session, seller_id: int) -> List[models.Order]:
    """Orders holding at least one ebook created by ``seller_id``."""
    seller_order_ids = (
        db.query(models.OrderItem.order_id)
        .join(models.Ebook, models.OrderItem.product_id == models.Ebook.id)
        .filter(models.Ebook.creator_id == seller_id)
        .distinct()
    )
    return _orders(db).filter(models.Order.id.in_(seller_order_ids)).order_by(models.Order.id.desc()).all()


def update_status(db: Session, order: models.Order, status_id: int) -> models.Order:
    order.status_id = status_id
    db.commit()
    db.refresh(order)
    return order
