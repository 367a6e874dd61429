import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from .. import models
from ..database import transaction

logger = logging.getLogger(__name__)


def get_payment(db: Session, payment_id: int) -> Optional[models.Payment]:
    return db.query(models.Payment).filter(models.Payment.id == payment_id).first()


def get_by_order(db: Session, order_id: int) -> Optional[models.Payment]:
    return db.query(models.Payment).filter(models.Payment.order_id == order_id).first()


def create_payment(db: Session, order: models.Order, method: str) -> models.Payment:
    payment = models.Payment(
        order_id=order.id,
        method=method,
        amount=order.total,
        status_id=models.PAYMENT_PENDING,
        paid_at=None,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


def update_status(db: Session, payment: models.Payment, status_id: int) -> models.Payment:
    """
    Move a payment to ``status_id``. Completing it stamps paid_at and marks the
    order PAID in the same transaction.
    """
    with transaction(db):
        payment.status_id = status_id
        if status_id == models.PAYMENT_COMPLETED:
            payment.paid_at = datetime.now(timezone.utc)
            order = db.query(models.Order).filter(models.Order.id == payment.order_id).first()
            if order is not None:
                order.status_id = models.ORDER_PAID
        else:
            payment.paid_at = None
        db.flush()
    db.refresh(payment)
    logger.info(
        "Payment status changed",
        extra={"payment_id": payment.id, "order_id": payment.order_id, "status": payment.status},
    )
    return payment
