from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, has_role, require_roles
from ..crud import seller_requests as crud_requests
from ..database import get_db

router = APIRouter(prefix="/api/seller-requests", tags=["seller-requests"])

admin_only = require_roles("admin")


def _request_or_404(db: Session, request_id: int) -> models.SellerRequest:
    request = crud_requests.get_request(db, request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Seller request not found")
    return request


def _out(requests):
    return [schemas.SellerRequestOut.model_validate(r) for r in requests]


@router.get("")
def list_requests(db: Session = Depends(get_db), admin: models.User = Depends(admin_only)):
    """List all seller requests"""
    return {"success": True, "data": _out(crud_requests.list_requests(db))}


@router.get("/me")
def list_my_requests(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the current user's seller requests"""
    return {"success": True, "data": _out(crud_requests.list_user_requests(db, user.id))}


@router.get("/user/{user_id}")
def list_user_requests(user_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the seller requests of a user"""
    if user_id != user.id and not has_role(user, "admin"):
        raise HTTPException(status_code=403, detail="Forbidden")
    return {"success": True, "data": _out(crud_requests.list_user_requests(db, user_id))}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_request(
    request_data: schemas.SellerRequestCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Apply to become a seller"""
    if not has_role(user, "customer"):
        raise HTTPException(status_code=400, detail="Only customers can apply to become sellers")

    pending = [r for r in crud_requests.list_user_requests(db, user.id) if r.status_id == models.REQUEST_PENDING]
    if pending:
        raise HTTPException(status_code=400, detail="A seller request is already pending")

    request = crud_requests.create_request(db, user.id, request_data.model_dump())
    return {"success": True, "data": schemas.SellerRequestOut.model_validate(request)}


@router.put("/{request_id}/status")
def update_request_status(
    request_id: int,
    status_data: schemas.SellerRequestStatusUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(admin_only),
):
    """Approve or reject a seller request"""
    if status_data.status_id not in models.SELLER_REQUEST_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid seller request status")

    request = crud_requests.update_status(db, _request_or_404(db, request_id), status_data.status_id)
    return {"success": True, "data": schemas.SellerRequestOut.model_validate(request)}


@router.delete("/{request_id}")
def delete_request(request_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a seller request"""
    request = _request_or_404(db, request_id)
    if request.user_id != user.id and not has_role(user, "admin"):
        raise HTTPException(status_code=403, detail="Forbidden")

    crud_requests.delete_request(db, request)
    return {"success": True, "message": "Request deleted successfully"}
