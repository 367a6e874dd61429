from typing import Any, Dict, List

from sqlalchemy import extract, func
from sqlalchemy.orm import Session

from .. import models
from .invoices import list_user_invoices


def _money(value):
    return float(value) if value is not None else 0.0


def sales_summary(db: Session) -> Dict[str, Any]:
    count, total, average = db.query(
        func.count(models.Invoice.id),
        func.sum(models.Invoice.total),
        func.avg(models.Invoice.total),
    ).one()
    return {"total_invoices": count, "total_sales": _money(total), "avg_ticket": _money(average)}


def payment_status_counts(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(models.Payment.status_id, func.count(models.Payment.id))
        .group_by(models.Payment.status_id)
        .order_by(models.Payment.status_id)
        .all()
    )
    return [
        {"status_id": status_id, "status": models.PAYMENT_STATUSES.get(status_id), "count": count}
        for status_id, count in rows
    ]


def payment_method_counts(db: Session) -> List[Dict[str, Any]]:
    rows = (
        db.query(models.Payment.method, func.count(models.Payment.id))
        .group_by(models.Payment.method)
        .order_by(models.Payment.method)
        .all()
    )
    return [{"method": method, "count": count} for method, count in rows]


def monthly_sales(db: Session) -> List[Dict[str, Any]]:
    year = extract("year", models.Invoice.issued_at)
    month = extract("month", models.Invoice.issued_at)
    rows = (
        db.query(year.label("year"), month.label("month"), func.sum(models.Invoice.total))
        .group_by(year, month)
        .order_by(year, month)
        .all()
    )
    return [
        {"month": f"{int(row_year):04d}-{int(row_month):02d}", "total": _money(total)}
        for row_year, row_month, total in rows
    ]


def sales_by_user(db: Session, user_id: int) -> List[models.Invoice]:
    return list_user_invoices(db, user_id)
