from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..crud import reports
from ..database import get_db

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/sales-summary")
def sales_summary(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get aggregate sales figures"""
    return {
        "success": True,
        "invoices": reports.sales_summary(db),
        "paymentStatus": reports.payment_status_counts(db),
        "paymentMethods": reports.payment_method_counts(db),
        "monthlySales": reports.monthly_sales(db),
    }


@router.get("/sales/user/{user_id}")
def sales_by_user(user_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the invoices of a user"""
    sales = reports.sales_by_user(db, user_id)
    return {"success": True, "sales": [schemas.InvoiceOut.model_validate(i) for i in sales]}
