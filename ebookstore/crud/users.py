import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..auth import hash_password
from . import apply_updates

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone")
ADMIN_FIELDS = ("name", "phone", "role_id")


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.lower()).first()


def list_users(db: Session) -> List[models.User]:
    return db.query(models.User).order_by(models.User.id).all()


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    phone: Optional[str] = None,
    role_id: int = models.ROLE_CUSTOMER,
) -> models.User:
    db_user = models.User(
        name=name,
        email=email.lower(),
        password_hash=hash_password(password),
        phone=phone,
        role_id=role_id,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, user: models.User, data: Dict[str, Any], fields=PROFILE_FIELDS) -> bool:
    if not apply_updates(user, data, fields):
        return False
    db.commit()
    db.refresh(user)
    return True


def change_password(db: Session, user: models.User, new_password: str):
    user.password_hash = hash_password(new_password)
    db.commit()


def delete_user(db: Session, user: models.User):
    db.delete(user)
    db.commit()


def ensure_admin(db: Session, email: Optional[str], password: Optional[str], name: str):
    """Create the bootstrap admin account when configured and missing."""
    if not email or not password:
        return None
    user = get_user_by_email(db, email)
    if user is not None:
        return user
    logger.info("Creating bootstrap admin", extra={"email": email})
    return create_user(db, name=name, email=email, password=password, role_id=models.ROLE_ADMIN)
