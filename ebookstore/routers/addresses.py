from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..crud import addresses as crud_addresses
from ..database import get_db

router = APIRouter(prefix="/api/addresses", tags=["addresses"])


def _address_or_404(db: Session, address_id: int, user: models.User) -> models.Address:
    address = crud_addresses.get_address(db, address_id, user.id)
    if address is None:
        raise HTTPException(status_code=404, detail="Address not found")
    return address


@router.get("")
def list_addresses(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the current user's addresses"""
    addresses = crud_addresses.list_addresses(db, user.id)
    return {"success": True, "addresses": [schemas.AddressOut.model_validate(a) for a in addresses]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_address(
    address_data: schemas.AddressCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an address for the current user"""
    address = crud_addresses.create_address(db, user.id, address_data.model_dump())
    return {"success": True, "address": schemas.AddressOut.model_validate(address)}


@router.put("/{address_id}")
def update_address(
    address_id: int,
    address_data: schemas.AddressUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update one of the current user's addresses"""
    address = _address_or_404(db, address_id, user)
    data = address_data.model_dump(exclude_unset=True, exclude_none=True)
    if not data:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    address = crud_addresses.update_address(db, address, data)
    return {"success": True, "address": schemas.AddressOut.model_validate(address)}


@router.delete("/{address_id}")
def delete_address(address_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete an address"""
    crud_addresses.delete_address(db, _address_or_404(db, address_id, user))
    return {"success": True, "message": "Address deleted"}
