"""
Match retrieval: eligibility and readiness checks, nearest-neighbour ranking,
confidence mapping and the never-empty fallback.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    MatchQueryFailed,
    NoEligibleUsers,
    NoVectorForReference,
    ProfileNotReady,
    UserNotEligible,
    UserNotFound,
)
from app.models.match_db.vector_store import VectorStore
from app.models.user_db.user_db import User
from app.models.user_db.user_db_crud import get_user_by_id
from app.services.confidence import MIN_PERCENT, to_percent

logger = logging.getLogger(__name__)


@dataclass
class MatchCandidate:
    user_id: UUID
    display_name: str
    raw_score: float
    confidence_percent: int


class FallbackGuarantor:
    def __init__(self, db: Session):
        self.db = db

    def pick_fallback(self, exclude_user_id: UUID) -> MatchCandidate:
        """Pick a uniformly random eligible user other than ``exclude_user_id``.

        The result carries no similarity signal: score 0, confidence at the floor.
        """
        user = (
            self.db.query(User)
            .filter(User.id != exclude_user_id, User.eligible)
            .order_by(func.random())
            .first()
        )
        if user is None:
            raise NoEligibleUsers(exclude_user_id)

        logger.info(f"No neighbours for user {exclude_user_id}, falling back to {user.id}")
        return MatchCandidate(
            user_id=user.id,
            display_name=user.display_name,
            raw_score=0.0,
            confidence_percent=MIN_PERCENT,
        )


class CandidateRanker:
    def __init__(self, db: Session, vector_store: Optional[VectorStore] = None,
                 fallback: Optional[FallbackGuarantor] = None):
        self.db = db
        self.vector_store = vector_store or VectorStore(db)
        self.fallback = fallback or FallbackGuarantor(db)

    def check_eligibility(self, user_id: UUID) -> User:
        user = get_user_by_id(self.db, user_id)
        if user is None:
            raise UserNotFound(user_id)
        if not user.is_active:
            raise UserNotEligible(user_id, reason="Account is inactive")
        if not user.is_email_verified:
            raise UserNotEligible(user_id, reason="Email not verified")
        return user

    def rank_matches(self, user_id: UUID, limit: int = 20) -> List[MatchCandidate]:
        if limit < 1:
            raise ValueError("limit must be at least 1")

        try:
            self.check_eligibility(user_id)

            if not self.vector_store.has_vector(user_id):
                raise ProfileNotReady(user_id)

            try:
                neighbors = self.vector_store.nearest(
                    user_id, exclude_user_id=user_id, eligible_only=True, limit=limit
                )
            except NoVectorForReference:
                raise ProfileNotReady(user_id)

            if not neighbors:
                return [self.fallback.pick_fallback(user_id)]
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Match query failed for user {user_id}")
            raise MatchQueryFailed(f"Match query failed for user {user_id}, try again") from e

        candidates = []
        for neighbor in neighbors:
            similarity = 1 - neighbor.distance
            candidates.append(
                MatchCandidate(
                    user_id=neighbor.user_id,
                    display_name=neighbor.display_name,
                    raw_score=similarity,
                    confidence_percent=to_percent(similarity),
                )
            )
        return candidates


def request_matches(db: Session, user_id: UUID, limit: Optional[int] = None) -> List[MatchCandidate]:
    if limit is None:
        limit = settings.MATCH_DEFAULT_LIMIT
    return CandidateRanker(db).rank_matches(user_id, limit)
