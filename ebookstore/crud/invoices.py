from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models


def create_invoice(db: Session, order: models.Order, user_id: int) -> models.Invoice:
    invoice = models.Invoice(order_id=order.id, user_id=user_id, total=order.total)
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    return invoice


def list_user_invoices(db: Session, user_id: int) -> List[models.Invoice]:
    return (
        db.query(models.Invoice)
        .filter(models.Invoice.user_id == user_id)
        .order_by(models.Invoice.issued_at.desc(), models.Invoice.id.desc())
        .all()
    )


def get_invoice(db: Session, invoice_id: int) -> Optional[models.Invoice]:
    return db.query(models.Invoice).filter(models.Invoice.id == invoice_id).first()
