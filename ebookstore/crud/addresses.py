from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..database import transaction
from . import apply_updates

ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country", "is_default")


def list_addresses(db: Session, user_id: int) -> List[models.Address]:
    """Default address first."""
    return (
        db.query(models.Address)
        .filter(models.Address.user_id == user_id)
        .order_by(models.Address.is_default.desc(), models.Address.id.asc())
        .all()
    )


def get_address(db: Session, address_id: int, user_id: int) -> Optional[models.Address]:
    return (
        db.query(models.Address)
        .filter(models.Address.id == address_id, models.Address.user_id == user_id)
        .first()
    )


def _clear_default(db: Session, user_id: int):
    db.query(models.Address).filter(
        models.Address.user_id == user_id, models.Address.is_default.is_(True)
    ).update({models.Address.is_default: False}, synchronize_session="fetch")


def create_address(db: Session, user_id: int, data: Dict[str, Any]) -> models.Address:
    address = models.Address(user_id=user_id)
    apply_updates(address, data, ADDRESS_FIELDS)
    with transaction(db):
        if data.get("is_default"):
            _clear_default(db, user_id)
        db.add(address)
    db.refresh(address)
    return address


def update_address(db: Session, address: models.Address, data: Dict[str, Any]) -> models.Address:
    with transaction(db):
        if data.get("is_default"):
            _clear_default(db, address.user_id)
        apply_updates(address, data, ADDRESS_FIELDS)
    db.refresh(address)
    return address


def delete_address(db: Session, address: models.Address):
    db.delete(address)
    db.commit()
