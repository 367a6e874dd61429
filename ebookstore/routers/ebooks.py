from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, has_role, require_roles
from ..crud import catalog
from ..database import get_db
from ..pagination import MAX_LIMIT, serialize_page

router = APIRouter(prefix="/api/ebooks", tags=["ebooks"])

catalog_managers = require_roles("admin", "seller")


def _ebook_or_404(db: Session, ebook_id: int) -> models.Ebook:
    ebook = catalog.get_ebook(db, ebook_id)
    if ebook is None:
        raise HTTPException(status_code=404, detail="Ebook not found")
    return ebook


def _owned_ebook(db: Session, ebook_id: int, user: models.User) -> models.Ebook:
    """Admins may touch any ebook, sellers only the ones they created."""
    ebook = _ebook_or_404(db, ebook_id)
    if not has_role(user, "admin") and ebook.creator_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to modify this ebook")
    return ebook


def _check_category(db: Session, category_id: Optional[int]):
    if category_id is not None and catalog.get_category(db, category_id) is None:
        raise HTTPException(status_code=404, detail="Category not found")


@router.get("")
def list_ebooks(db: Session = Depends(get_db), user: models.User = Depends(get_current_user)):
    """
    Sellers see their own ebooks, everybody else the whole catalog.
    """
    creator_id = user.id if has_role(user, "seller") else None
    ebooks = catalog.list_ebooks(db, creator_id=creator_id)
    return {"success": True, "data": [schemas.EbookOut.model_validate(e) for e in ebooks]}


@router.get("/paginated")
def paginated_ebooks(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    search: str = "",
    category: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """Search ebooks one page at a time"""
    result = catalog.paginate_ebooks(db, page=page, limit=limit, search=search.strip(), category_id=category)
    return {"success": True, **serialize_page(result, schemas.EbookOut)}


@router.get("/search")
def search_ebooks(q: str = "", db: Session = Depends(get_db)):
    """Search ebooks by name, description or category"""
    ebooks = catalog.search_ebooks(db, q.strip())
    return {"success": True, "data": [schemas.EbookOut.model_validate(e) for e in ebooks]}


@router.get("/{ebook_id}")
def get_ebook(ebook_id: int, db: Session = Depends(get_db)):
    """Get ebook details"""
    return {"success": True, "ebook": schemas.EbookOut.model_validate(_ebook_or_404(db, ebook_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_ebook(
    ebook_data: schemas.EbookCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(catalog_managers),
):
    """Create a new ebook"""
    _check_category(db, ebook_data.category_id)
    ebook = catalog.create_ebook(db, ebook_data.model_dump(), creator_id=user.id)
    return {"success": True, "ebook": schemas.EbookOut.model_validate(ebook)}


@router.put("/{ebook_id}")
def update_ebook(
    ebook_id: int,
    ebook_data: schemas.EbookUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(catalog_managers),
):
    """Update an ebook"""
    ebook = _owned_ebook(db, ebook_id, user)
    data = ebook_data.model_dump(exclude_unset=True, exclude_none=True)
    _check_category(db, data.get("category_id"))
    if not catalog.update_ebook(db, ebook, data):
        raise HTTPException(status_code=400, detail="No valid fields to update")
    return {"success": True, "ebook": schemas.EbookOut.model_validate(ebook)}


@router.delete("/{ebook_id}")
def delete_ebook(ebook_id: int, db: Session = Depends(get_db), user: models.User = Depends(catalog_managers)):
    """Delete an ebook"""
    catalog.delete_ebook(db, _owned_ebook(db, ebook_id, user))
    return {"success": True, "message": "Ebook deleted"}
