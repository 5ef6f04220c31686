import logging
from typing import Callable, NamedTuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import UserNotEligible, UserNotFound
from app.models.journey_db.journey_answer_db import JourneyAnswer
from app.models.journey_db.journey_crud import append_answer, count_user_answers
from app.models.match_db.vector_store import VectorStore
from app.models.user_db.user_db_crud import get_user_by_id
from app.services.embedding_client import EmbeddingClient
from app.services.profile_embedder import ProfileEmbedder

logger = logging.getLogger(__name__)


class SubmittedAnswer(NamedTuple):
    answer: JourneyAnswer
    answer_count: int
    refresh_needed: bool


def submit_answer(
    db: Session,
    embedder: ProfileEmbedder,
    user_id: UUID,
    question_id: str,
    question_text: str,
    answer_summary: str,
) -> SubmittedAnswer:
    """Append the answer to the ledger and tell whether the embedding should be recomputed.

    The recomputation itself is left to the caller, which runs it after the
    response with refresh_profile_embedding.
    """
    user = get_user_by_id(db, user_id)
    if user is None:
        raise UserNotFound(user_id)
    if not user.is_active:
        raise UserNotEligible(user_id, reason="Account is inactive")
    if not user.is_email_verified:
        raise UserNotEligible(user_id, reason="Email not verified")

    answer = append_answer(db, user_id, question_id, question_text, answer_summary)
    answer_count = count_user_answers(db, user_id)
    refresh_needed = embedder.needs_refresh(answer_count, VectorStore(db).has_vector(user_id))

    return SubmittedAnswer(answer=answer, answer_count=answer_count, refresh_needed=refresh_needed)


def refresh_profile_embedding(
    session_factory: Callable[[], Session],
    embedding_client: EmbeddingClient,
    user_id: UUID,
) -> bool:
    """Background job: rebuild the user's embedding on its own session."""
    db = session_factory()
    try:
        return ProfileEmbedder(embedding_client).refresh(db, user_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Could not store embedding for user {user_id}")
        return False
    finally:
        db.close()
