from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from .. import models


def list_items(db: Session, user_id: int) -> List[models.CartItem]:
    return (
        db.query(models.CartItem)
        .options(joinedload(models.CartItem.ebook))
        .filter(models.CartItem.user_id == user_id)
        .order_by(models.CartItem.id.asc())
        .all()
    )


def get_item(db: Session, item_id: int, user_id: int) -> Optional[models.CartItem]:
    return (
        db.query(models.CartItem)
        .filter(models.CartItem.id == item_id, models.CartItem.user_id == user_id)
        .first()
    )


def add_item(db: Session, user_id: int, ebook: models.Ebook, quantity: int) -> models.CartItem:
    """
    Put ``quantity`` copies of ``ebook`` in the cart. An existing line for the
    same ebook is topped up instead of duplicated; its price snapshot is kept.
    """
    existing_item = (
        db.query(models.CartItem)
        .filter(models.CartItem.user_id == user_id, models.CartItem.ebook_id == ebook.id)
        .first()
    )
    if existing_item:
        existing_item.quantity += quantity
        db.commit()
        db.refresh(existing_item)
        return existing_item

    db_item = models.CartItem(user_id=user_id, ebook_id=ebook.id, quantity=quantity, price=ebook.price)
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


def update_quantity(db: Session, item: models.CartItem, quantity: int) -> models.CartItem:
    item.quantity = quantity
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, item: models.CartItem):
    db.delete(item)
    db.commit()


def clear(db: Session, user_id: int):
    db.query(models.CartItem).filter(models.CartItem.user_id == user_id).delete(synchronize_session=False)
    db.commit()
