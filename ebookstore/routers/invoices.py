from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, has_role
from ..crud import invoices as crud_invoices
from ..crud import orders as crud_orders
from ..database import get_db

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_invoice(
    invoice_data: schemas.InvoiceCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Issue an invoice for an order"""
    order = crud_orders.get_order(db, invoice_data.order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.user_id != user.id and not has_role(user, "admin"):
        raise HTTPException(status_code=403, detail="Forbidden")

    invoice = crud_invoices.create_invoice(db, order, order.user_id)
    return {"success": True, "invoice": schemas.InvoiceOut.model_validate(invoice)}


@router.get("")
def list_invoices(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the current user's invoices"""
    invoices = crud_invoices.list_user_invoices(db, user.id)
    return {"success": True, "invoices": [schemas.InvoiceOut.model_validate(i) for i in invoices]}


@router.get("/{invoice_id}")
def get_invoice(invoice_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get invoice details"""
    invoice = crud_invoices.get_invoice(db, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    if invoice.user_id != user.id and not has_role(user, "admin"):
        raise HTTPException(status_code=403, detail="Forbidden")
    return {"success": True, "invoice": schemas.InvoiceOut.model_validate(invoice)}
