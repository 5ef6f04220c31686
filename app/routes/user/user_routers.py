from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Body, Query
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.models.journey_db.journey_crud import count_user_answers
from app.models.match_db.vector_store import VectorStore
from app.models.user_db.user_db import User
from app.models.user_db.user_db_crud import create_user, get_user_by_id, get_all_users, \
    update_user, get_user_by_email, mark_email_verified, deactivate_user, set_looking_for_text
from app.schemas.common.page_response import PageResponse
from app.schemas.users.user_base import UserCreate, UserOut, UserUpdate, LookingForUpdate, UserStatusOut


user_router = APIRouter(prefix="/users", tags=["Users"])

MIN_LOOKING_FOR_LENGTH = 3


@user_router.post("/register", response_model=UserOut)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    if get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    return create_user(db, user)


@user_router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@user_router.get("/", response_model=PageResponse[UserOut])
def list_users(
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1),
    db: Session = Depends(get_db)
):
    skip = (page - 1) * size
    total = db.query(User).count()
    users = get_all_users(db, skip=skip, limit=size)

    has_next = (page * size) < total
    has_prev = page > 1

    return PageResponse[UserOut](
        page=page,
        size=size,
        total=total,
        has_next=has_next,
        has_prev=has_prev,
        items=users
    )


@user_router.put("/{user_id}", response_model=UserOut)
def edit_user(
    user_id: UUID,
    updates: UserUpdate = Body(...),
    db: Session = Depends(get_db)
):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if updates.email:
        existing_user = get_user_by_email(db, updates.email)
        if existing_user and existing_user.id != user.id:
            raise HTTPException(status_code=400, detail="Email already registered")

    return update_user(db, user_id, updates)


@user_router.put("/{user_id}/verify-email", response_model=UserOut)
def verify_email(user_id: UUID, db: Session = Depends(get_db)):
    user = mark_email_verified(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@user_router.put("/{user_id}/deactivate", response_model=UserOut)
def deactivate(user_id: UUID, db: Session = Depends(get_db)):
    user = deactivate_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@user_router.put("/{user_id}/looking-for", response_model=UserOut)
def update_looking_for(user_id: UUID, payload: LookingForUpdate, db: Session = Depends(get_db)):
    text = payload.looking_for_text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="looking_for_text cannot be empty")
    if len(text) < MIN_LOOKING_FOR_LENGTH:
        raise HTTPException(status_code=400, detail="Please provide a bit more detail.")

    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is inactive")
    if not user.is_email_verified:
        raise HTTPException(status_code=403, detail="Email not verified")

    return set_looking_for_text(db, user_id, text)


@user_router.get("/{user_id}/status", response_model=UserStatusOut)
def get_user_status(user_id: UUID, db: Session = Depends(get_db)):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return UserStatusOut(
        user_id=user.id,
        eligible=user.eligible,
        has_looking_for=bool((user.looking_for_text or "").strip()),
        answer_count=count_user_answers(db, user.id),
        profile_ready=VectorStore(db).has_vector(user.id),
    )
