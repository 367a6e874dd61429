from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from .. import models
from ..pagination import paginate
from . import apply_updates

CATEGORY_FIELDS = ("name", "description")
EBOOK_FIELDS = ("name", "description", "price", "stock", "category_id")


# --- Categories ---
def list_categories(db: Session) -> List[models.Category]:
    return db.query(models.Category).order_by(models.Category.id).all()


def paginate_categories(db: Session, page: int = 1, limit: int = 10, search: str = "") -> Dict[str, Any]:
    query = db.query(models.Category)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(models.Category.name.ilike(pattern), models.Category.description.ilike(pattern)))
    query = query.order_by(models.Category.name.asc(), models.Category.id.asc())
    return paginate(query, page, limit)


def get_category(db: Session, category_id: int) -> Optional[models.Category]:
    return db.query(models.Category).filter(models.Category.id == category_id).first()


def create_category(db: Session, data: Dict[str, Any]) -> models.Category:
    category = models.Category(name=data["name"], description=data.get("description"))
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category: models.Category, data: Dict[str, Any]) -> bool:
    if not apply_updates(category, data, CATEGORY_FIELDS):
        return False
    db.commit()
    db.refresh(category)
    return True


def delete_category(db: Session, category: models.Category):
    for ebook in category.ebooks:
        ebook.category_id = None
    db.delete(category)
    db.commit()


# --- Ebooks ---
def _ebooks(db: Session):
    return db.query(models.Ebook).options(joinedload(models.Ebook.category))


def list_ebooks(db: Session, creator_id: Optional[int] = None) -> List[models.Ebook]:
    query = _ebooks(db)
    if creator_id is not None:
        query = query.filter(models.Ebook.creator_id == creator_id)
    return query.order_by(models.Ebook.id.asc()).all()


def _search_filter(search: str):
    pattern = f"%{search}%"
    return or_(
        models.Ebook.name.ilike(pattern),
        models.Ebook.description.ilike(pattern),
        models.Category.name.ilike(pattern),
    )


def paginate_ebooks(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    category_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Case-insensitive containment search over ebook name, description and
    category name, narrowed by category when given. Newest first.
    """
    query = db.query(models.Ebook).outerjoin(models.Category, models.Ebook.category_id == models.Category.id)
    if search:
        query = query.filter(_search_filter(search))
    if category_id is not None:
        query = query.filter(models.Ebook.category_id == category_id)
    query = query.options(joinedload(models.Ebook.category)).order_by(models.Ebook.id.desc())
    return paginate(query, page, limit)


def search_ebooks(db: Session, search: str) -> List[models.Ebook]:
    query = db.query(models.Ebook).outerjoin(models.Category, models.Ebook.category_id == models.Category.id)
    if search:
        query = query.filter(_search_filter(search))
    return query.options(joinedload(models.Ebook.category)).order_by(models.Ebook.id.desc()).all()


def get_ebook(db: Session, ebook_id: int) -> Optional[models.Ebook]:
    return _ebooks(db).filter(models.Ebook.id == ebook_id).first()


def create_ebook(db: Session, data: Dict[str, Any], creator_id: int) -> models.Ebook:
    ebook = models.Ebook(creator_id=creator_id)
    apply_updates(ebook, data, EBOOK_FIELDS)
    db.add(ebook)
    db.commit()
    db.refresh(ebook)
    return ebook


def update_ebook(db: Session, ebook: models.Ebook, data: Dict[str, Any]) -> bool:
    if not apply_updates(ebook, data, EBOOK_FIELDS):
        return False
    db.commit()
    db.refresh(ebook)
    return True


def delete_ebook(db: Session, ebook: models.Ebook):
    db.delete(ebook)
    db.commit()
