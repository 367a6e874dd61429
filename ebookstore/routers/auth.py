import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import create_token, get_current_user, get_settings, verify_password
from ..config import Settings
from ..crud import users as crud_users
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user_data: schemas.UserRegister,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new customer account and log it in.
    """
    if crud_users.get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=400, detail="Email already exists")

    user = crud_users.create_user(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        phone=user_data.phone,
        role_id=models.ROLE_CUSTOMER,
    )
    logger.info("User registered", extra={"user_id": user.id})
    return {
        "success": True,
        "message": "User registered successfully",
        "data": {"user": schemas.UserOut.model_validate(user), "token": create_token(user, settings)},
    }


@router.post("/login")
def login(
    credentials: schemas.UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Log in and get a token"""
    user = crud_users.get_user_by_email(db, credentials.email)
    if user is None or not verify_password(credentials.password, user.password_hash):
        logger.warning("Failed login", extra={"email": credentials.email})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "success": True,
        "message": "Login successful",
        "data": {"user": schemas.UserOut.model_validate(user), "token": create_token(user, settings)},
    }


@router.get("/profile")
def read_profile(user: models.User = Depends(get_current_user)):
    """Get the current user's profile"""
    return {"success": True, "data": {"user": schemas.UserOut.model_validate(user)}}


@router.put("/profile")
def update_profile(
    profile: schemas.ProfileUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update name and phone of the current user"""
    if not crud_users.update_user(db, user, profile.model_dump(exclude_unset=True, exclude_none=True)):
        raise HTTPException(status_code=400, detail="No valid fields to update")
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {"user": schemas.UserOut.model_validate(user)},
    }


@router.put("/change-password")
def change_password(
    passwords: schemas.PasswordChange,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the current user's password"""
    if not verify_password(passwords.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    crud_users.change_password(db, user, passwords.new_password)
    return {"success": True, "message": "Password changed successfully"}
