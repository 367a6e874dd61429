from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import require_roles
from ..crud import users as crud_users
from ..database import get_db

router = APIRouter(prefix="/api/users", tags=["users"])

admin_only = require_roles("admin")


def _user_or_404(db: Session, user_id: int) -> models.User:
    user = crud_users.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _check_role(role_id):
    if role_id is not None and role_id not in models.ROLES:
        raise HTTPException(status_code=400, detail="Role must be admin, seller, or customer")


@router.get("")
def list_users(db: Session = Depends(get_db), admin: models.User = Depends(admin_only)):
    """List all users"""
    users = crud_users.list_users(db)
    return {"success": True, "data": [schemas.UserOut.model_validate(u) for u in users]}


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db), admin: models.User = Depends(admin_only)):
    """Get user details"""
    return {"success": True, "data": schemas.UserOut.model_validate(_user_or_404(db, user_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: schemas.UserAdminCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(admin_only),
):
    """Create a user with any role"""
    _check_role(user_data.role_id)
    if crud_users.get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=400, detail="Email already exists")

    user = crud_users.create_user(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        phone=user_data.phone,
        role_id=user_data.role_id,
    )
    return {"success": True, "data": schemas.UserOut.model_validate(user)}


@router.put("/{user_id}")
def update_user(
    user_id: int,
    user_data: schemas.UserAdminUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(admin_only),
):
    """Update a user"""
    _check_role(user_data.role_id)
    user = _user_or_404(db, user_id)
    data = user_data.model_dump(exclude_unset=True, exclude_none=True)
    if not crud_users.update_user(db, user, data, fields=crud_users.ADMIN_FIELDS):
        raise HTTPException(status_code=400, detail="No valid fields to update")
    return {"success": True, "data": schemas.UserOut.model_validate(user)}


@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db), admin: models.User = Depends(admin_only)):
    """Delete a user"""
    crud_users.delete_user(db, _user_or_404(db, user_id))
    return {"success": True, "message": "User deleted successfully"}
