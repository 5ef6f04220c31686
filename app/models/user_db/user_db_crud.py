from uuid import UUID
from sqlalchemy.orm import Session
from app.models.user_db.user_db import User
from app.schemas.users.user_base import UserCreate, UserUpdate
from typing import List, Optional


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(db: Session, user: UserCreate):
    db_user = User(
        email=normalize_email(user.email),
        display_name=user.display_name.strip(),
        looking_for_text=user.looking_for_text,
        is_active=True,
        is_email_verified=False,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_all_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    return db.query(User).order_by(User.created_at).offset(skip).limit(limit).all()


def update_user(db: Session, user_id: UUID, updates: UserUpdate):
    user = get_user_by_id(db, user_id)
    if not user:
        return None

    user.email = normalize_email(updates.email) if updates.email else user.email
    user.display_name = updates.display_name or user.display_name

    db.commit()
    db.refresh(user)
    return user


def mark_email_verified(db: Session, user_id: UUID):
    user = get_user_by_id(db, user_id)
    if not user:
        return None
    user.is_email_verified = True
    db.commit()
    db.refresh(user)
    return user


def deactivate_user(db: Session, user_id: UUID):
    # users are never removed, only switched off
    user = get_user_by_id(db, user_id)
    if not user:
        return None
    user.is_active = False
    db.commit()
    db.refresh(user)
    return user


def set_looking_for_text(db: Session, user_id: UUID, text: str):
    user = get_user_by_id(db, user_id)
    if not user:
        return None
    user.looking_for_text = text.strip()
    db.commit()
    db.refresh(user)
    return user
