import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import get_current_admin, get_current_user
from ..database import get_db
from ..models import User
from ..schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
async def get_users(
    _admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """List all users (admin only)"""
    return db.query(User).order_by(User.name.asc()).all()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get a user; clients may only read their own record"""
    if not current_user.is_admin and current_user.id != user_id:
        logger.warning(f"🚫 Access denied: User {current_user.id} tried to access user {user_id}")
        raise HTTPException(status_code=403, detail="Forbidden")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
