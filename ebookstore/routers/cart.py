from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..crud import cart as crud_cart
from ..crud import catalog
from ..crud.orders import cart_total
from ..database import get_db

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("")
def get_cart(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the current user's cart with its total"""
    items = crud_cart.list_items(db, user.id)
    return {
        "success": True,
        "items": [schemas.CartItemOut.model_validate(item) for item in items],
        "total": float(cart_total(items)),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def add_to_cart(
    item: schemas.CartItemCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an ebook to the cart"""
    ebook = catalog.get_ebook(db, item.ebook_id)
    if ebook is None:
        raise HTTPException(status_code=404, detail="Ebook not found")

    cart_item = crud_cart.add_item(db, user.id, ebook, item.quantity)
    return {"success": True, "item": schemas.CartItemOut.model_validate(cart_item)}


@router.put("/{item_id}")
def update_cart_item(
    item_id: int,
    item: schemas.CartItemUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the quantity of a cart item"""
    cart_item = crud_cart.get_item(db, item_id, user.id)
    if cart_item is None:
        raise HTTPException(status_code=404, detail="Item not found")

    cart_item = crud_cart.update_quantity(db, cart_item, item.quantity)
    return {"success": True, "item": schemas.CartItemOut.model_validate(cart_item)}


@router.delete("/{item_id}")
def remove_cart_item(item_id: int, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Remove an item from the cart"""
    cart_item = crud_cart.get_item(db, item_id, user.id)
    if cart_item is None:
        raise HTTPException(status_code=404, detail="Item not found")

    crud_cart.remove_item(db, cart_item)
    return {"success": True, "message": "Item deleted"}


@router.delete("")
def clear_cart(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Empty the cart"""
    crud_cart.clear(db, user.id)
    return {"success": True, "message": "Cart cleared"}
