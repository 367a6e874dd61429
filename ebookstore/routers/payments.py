import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, has_role
from ..crud import orders as crud_orders
from ..crud import payments as crud_payments
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _visible_order(db: Session, order_id: int, user: models.User) -> models.Order:
    order = crud_orders.get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.user_id != user.id and not has_role(user, "admin"):
        raise HTTPException(status_code=403, detail="Forbidden")
    return order


@router.post("", status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_data: schemas.PaymentCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Open a pending payment for the full amount of an order.
    """
    order = _visible_order(db, payment_data.order_id, user)
    if crud_payments.get_by_order(db, order.id) is not None:
        raise HTTPException(status_code=400, detail="Payment already exists for this order")

    payment = crud_payments.create_payment(db, order, payment_data.method)
    return {"success": True, "payment": schemas.PaymentOut.model_validate(payment)}


@router.put("/{payment_id}")
def update_payment_status(
    payment_id: int,
    status_data: schemas.PaymentStatusUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if status_data.status_id not in models.PAYMENT_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid payment status")

    payment = crud_payments.get_payment(db, payment_id)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")

    try:
        payment = crud_payments.update_status(db, payment, status_data.status_id)
    except SQLAlchemyError:
        logger.exception("Payment update failed", extra={"payment_id": payment_id})
        raise HTTPException(status_code=500, detail="Error updating payment")

    return {"success": True, "payment": schemas.PaymentOut.model_validate(payment)}


@router.get("/order/{order_id}")
def get_order_payment(order_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the payment of an order"""
    order = _visible_order(db, order_id, user)
    payment = crud_payments.get_by_order(db, order.id)
    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return {"success": True, "payment": schemas.PaymentOut.model_validate(payment)}
