import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, has_role, require_roles
from ..crud import addresses as crud_addresses
from ..crud import cart as crud_cart
from ..crud import orders as crud_orders
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _order_out(order: models.Order) -> schemas.OrderOut:
    return schemas.OrderOut.model_validate(order)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: schemas.OrderCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Check out the current cart to the given address.
    """
    if crud_addresses.get_address(db, order_data.address_id, user.id) is None:
        raise HTTPException(status_code=404, detail="Address not found")

    cart_items = crud_cart.list_items(db, user.id)
    if not cart_items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    try:
        order = crud_orders.create_order(db, user.id, order_data.address_id, cart_items)
    except SQLAlchemyError:
        logger.exception("Order creation failed", extra={"user_id": user.id})
        raise HTTPException(status_code=500, detail="Error creating order")

    return {"success": True, "order": _order_out(order)}


@router.get("")
def list_my_orders(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the current user's orders"""
    orders = crud_orders.list_user_orders(db, user.id)
    return {"success": True, "orders": [_order_out(o) for o in orders]}


@router.get("/seller")
def list_seller_orders(
    user: models.User = Depends(require_roles("admin", "seller")),
    db: Session = Depends(get_db),
):
    """List orders containing the seller's ebooks"""
    orders = crud_orders.list_seller_orders(db, user.id)
    return {"success": True, "orders": [_order_out(o) for o in orders]}


@router.get("/admin/all")
def list_all_orders(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List all orders"""
    orders = crud_orders.list_all_orders(db)
    return {"success": True, "orders": [_order_out(o) for o in orders]}


@router.patch("/admin/{order_id}/status")
def update_order_status(
    order_id: int,
    status_data: schemas.OrderStatusUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the status of an order"""
    if status_data.status_id not in models.ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid order status")

    order = crud_orders.get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")

    order = crud_orders.update_status(db, order, status_data.status_id)
    logger.info("Order status changed", extra={"order_id": order.id, "status": order.status})
    return {"success": True, "order": _order_out(order)}


@router.get("/{order_id}")
def get_order(order_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get order details with its items"""
    order = crud_orders.get_order(db, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.user_id != user.id and not has_role(user, "admin"):
        raise HTTPException(status_code=403, detail="Forbidden")

    return {"success": True, "order": _order_out(order)}
