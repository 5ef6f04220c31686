import logging
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import EmbeddingUnavailable, VectorDimensionMismatch
from app.models.journey_db.journey_crud import get_user_answers
from app.models.match_db.vector_store import VectorStore
from app.models.user_db.user_db_crud import get_user_by_id
from app.services.embedding_client import EmbeddingClient

logger = logging.getLogger(__name__)

EVERY_ANSWER = "every_answer"
THRESHOLD_ONLY = "threshold_only"


def build_profile_text(looking_for_text: Optional[str], history: Iterable[Tuple[str, str]]) -> str:
    """Concatenate the looking-for statement and the ordered Q/A pairs.

    Pure and order preserving: the same inputs always give the same text.
    """
    lines = [f"Looking for: {(looking_for_text or '').strip()}", "", "Journey Q&A:"]
    for idx, (question, answer) in enumerate(history, start=1):
        lines.append(f"Q{idx}: {question}\nA{idx}: {answer}")
    return "\n".join(lines)


class ProfileEmbedder:
    def __init__(
        self,
        client: EmbeddingClient,
        threshold: Optional[int] = None,
        policy: Optional[str] = None,
        dimension: Optional[int] = None,
    ):
        self.client = client
        self.threshold = threshold if threshold is not None else settings.EMBEDDING_ANSWER_THRESHOLD
        self.policy = policy or settings.EMBEDDING_REFRESH_POLICY
        self.dimension = dimension or settings.EMBEDDING_DIM

        if self.policy not in (EVERY_ANSWER, THRESHOLD_ONLY):
            raise ValueError(f"Unknown embedding refresh policy: {self.policy}")

    def should_embed(self, answer_count: int) -> bool:
        return answer_count >= self.threshold

    def needs_refresh(self, answer_count: int, has_embedding: bool) -> bool:
        if not self.should_embed(answer_count):
            return False
        if self.policy == THRESHOLD_ONLY:
            return not has_embedding
        return True

    def embed(self, profile_text: str) -> List[float]:
        vector = self.client.embed(profile_text)
        if len(vector) != self.dimension:
            raise VectorDimensionMismatch(self.dimension, len(vector))
        return vector

    def refresh(self, db: Session, user_id: UUID) -> bool:
        """Recompute and store the user's embedding from their full history.

        Returns False when the embedding was skipped, either because the user
        has too few answers or because the embedding service is unavailable.
        """
        user = get_user_by_id(db, user_id)
        if user is None:
            logger.warning(f"Skipping embedding refresh, user {user_id} not found")
            return False

        answers = get_user_answers(db, user_id)
        if not self.should_embed(len(answers)):
            return False

        profile_text = build_profile_text(
            user.looking_for_text,
            [(a.question_text, a.answer_summary) for a in answers],
        )

        try:
            vector = self.embed(profile_text)
        except EmbeddingUnavailable as e:
            logger.warning(f"Embedding skipped for user {user_id}, will retry on next answer: {e}")
            return False

        VectorStore(db, dimension=self.dimension).upsert(user_id, vector)
        return True
