from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import require_roles
from ..crud import catalog
from ..database import get_db
from ..pagination import MAX_LIMIT, serialize_page

router = APIRouter(prefix="/api/categories", tags=["categories"])

admin_only = require_roles("admin")


def _category_or_404(db: Session, category_id: int) -> models.Category:
    category = catalog.get_category(db, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    """Get all categories"""
    categories = catalog.list_categories(db)
    return {"success": True, "categories": [schemas.CategoryOut.model_validate(c) for c in categories]}


@router.get("/paginated")
def paginated_categories(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    search: str = "",
    db: Session = Depends(get_db),
):
    """Get categories one page at a time"""
    result = catalog.paginate_categories(db, page=page, limit=limit, search=search.strip())
    return {"success": True, **serialize_page(result, schemas.CategoryOut)}


@router.get("/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    """Get category details"""
    return {"success": True, "category": schemas.CategoryOut.model_validate(_category_or_404(db, category_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    category_data: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(admin_only),
):
    """Create a new category"""
    category = catalog.create_category(db, category_data.model_dump())
    return {"success": True, "category": schemas.CategoryOut.model_validate(category)}


@router.put("/{category_id}")
def update_category(
    category_id: int,
    category_data: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(admin_only),
):
    """Update a category"""
    category = _category_or_404(db, category_id)
    if not catalog.update_category(db, category, category_data.model_dump(exclude_unset=True, exclude_none=True)):
        raise HTTPException(status_code=400, detail="No valid fields to update")
    return {"success": True, "category": schemas.CategoryOut.model_validate(category)}


@router.delete("/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db), admin: models.User = Depends(admin_only)):
    """Delete a category"""
    catalog.delete_category(db, _category_or_404(db, category_id))
    return {"success": True, "message": "Category deleted"}
