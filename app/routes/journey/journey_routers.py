import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db, get_session_factory
from app.core.exceptions import UserNotEligible, UserNotFound
from app.models.journey_db.journey_crud import get_user_answers
from app.models.user_db.user_db_crud import get_user_by_id
from app.schemas.journey.journey_base import JourneyAnswerAccepted, JourneyAnswerIn, JourneyAnswerOut
from app.services.embedding_client import EmbeddingClient, get_embedding_client
from app.services.journey import refresh_profile_embedding, submit_answer
from app.services.profile_embedder import ProfileEmbedder

logger = logging.getLogger(__name__)

journey_router = APIRouter(prefix="/journey", tags=["Journey"])


@journey_router.post(
    "/{user_id}/answers",
    response_model=JourneyAnswerAccepted,
    status_code=status.HTTP_201_CREATED,
)
def post_answer(
    user_id: UUID,
    payload: JourneyAnswerIn,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session_factory=Depends(get_session_factory),
    embedding_client: EmbeddingClient = Depends(get_embedding_client),
):
    try:
        result = submit_answer(
            db,
            ProfileEmbedder(embedding_client),
            user_id,
            payload.question_id,
            payload.question_text,
            payload.answer_summary,
        )
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except UserNotEligible as e:
        raise HTTPException(status_code=403, detail=e.reason)

    if result.refresh_needed:
        background_tasks.add_task(refresh_profile_embedding, session_factory, embedding_client, user_id)
        logger.info(f"Scheduled embedding refresh for user {user_id} ({result.answer_count} answers)")

    return JourneyAnswerAccepted(answer_count=result.answer_count, embedding_scheduled=result.refresh_needed)


@journey_router.get("/{user_id}/answers", response_model=List[JourneyAnswerOut])
def list_answers(user_id: UUID, db: Session = Depends(get_db)):
    if not get_user_by_id(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return get_user_answers(db, user_id)
