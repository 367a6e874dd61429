import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..database import transaction

logger = logging.getLogger(__name__)


def list_requests(db: Session) -> List[models.SellerRequest]:
    return db.query(models.SellerRequest).order_by(models.SellerRequest.id.desc()).all()


def list_user_requests(db: Session, user_id: int) -> List[models.SellerRequest]:
    return (
        db.query(models.SellerRequest)
        .filter(models.SellerRequest.user_id == user_id)
        .order_by(models.SellerRequest.id.desc())
        .all()
    )


def get_request(db: Session, request_id: int) -> Optional[models.SellerRequest]:
    return db.query(models.SellerRequest).filter(models.SellerRequest.id == request_id).first()


def create_request(db: Session, user_id: int, data: Dict[str, Any]) -> models.SellerRequest:
    request = models.SellerRequest(
        user_id=user_id,
        business_name=data["business_name"],
        document_id=data["document_id"],
        description=data.get("description"),
        status_id=models.REQUEST_PENDING,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


def update_status(db: Session, request: models.SellerRequest, status_id: int) -> models.SellerRequest:
    """Approving a request promotes its customer to seller in the same transaction."""
    with transaction(db):
        request.status_id = status_id
        if status_id == models.REQUEST_APPROVED:
            user = db.query(models.User).filter(models.User.id == request.user_id).first()
            if user is not None and user.role_id == models.ROLE_CUSTOMER:
                user.role_id = models.ROLE_SELLER
    db.refresh(request)
    logger.info(
        "Seller request reviewed",
        extra={"request_id": request.id, "user_id": request.user_id, "status": request.status},
    )
    return request


def delete_request(db: Session, request: models.SellerRequest):
    db.delete(request)
    db.commit()
