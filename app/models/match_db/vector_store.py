import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

import numpy as np
from sqlalchemy import text
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NoVectorForReference, VectorDimensionMismatch
from app.models.match_db.match_db import UserEmbedding
from app.models.user_db.user_db import User

logger = logging.getLogger(__name__)


@dataclass
class Neighbor:
    user_id: UUID
    display_name: str
    distance: float


class VectorStore:
    """Per-user embedding storage with k-nearest-neighbour lookup under L2 distance.

    On PostgreSQL the neighbour search runs in the database through pgvector's
    ``<->`` operator. Other engines get an exact scan computed with numpy. Both
    paths order by ``(distance, user_id)`` so repeated queries are stable.
    """

    def __init__(self, db: Session, dimension: Optional[int] = None,
                 query_timeout_ms: Optional[int] = None):
        self.db = db
        self.dimension = dimension or settings.EMBEDDING_DIM
        self.query_timeout_ms = query_timeout_ms or settings.MATCH_QUERY_TIMEOUT_MS

    @property
    def _uses_pgvector(self) -> bool:
        return self.db.get_bind().dialect.name == "postgresql"

    def upsert(self, user_id: UUID, vector: Sequence[float]) -> None:
        vector = [float(v) for v in vector]
        if len(vector) != self.dimension:
            raise VectorDimensionMismatch(self.dimension, len(vector))

        try:
            self._write(user_id, vector)
        except IntegrityError:
            # another request inserted the first row for this user meanwhile
            self.db.rollback()
            self._write(user_id, vector)

        logger.info(f"Stored embedding for user {user_id}")

    def _write(self, user_id: UUID, vector: List[float]) -> None:
        now = datetime.utcnow()
        updated = (
            self.db.query(UserEmbedding)
            .filter(UserEmbedding.user_id == user_id)
            .update({"vector": vector, "updated_at": now}, synchronize_session=False)
        )
        if not updated:
            self.db.add(UserEmbedding(user_id=user_id, vector=vector, updated_at=now))

        self.db.commit()

    def get_vector(self, user_id: UUID) -> Optional[List[float]]:
        row = self.db.query(UserEmbedding.vector).filter(UserEmbedding.user_id == user_id).first()
        if row is None:
            return None
        return [float(v) for v in row.vector]

    def has_vector(self, user_id: UUID) -> bool:
        return (
            self.db.query(UserEmbedding.user_id)
            .filter(UserEmbedding.user_id == user_id)
            .first()
            is not None
        )

    def nearest(
        self,
        reference_user_id: UUID,
        exclude_user_id: Optional[UUID] = None,
        eligible_only: bool = True,
        limit: int = 20,
    ) -> List[Neighbor]:
        if limit < 1:
            raise ValueError("limit must be at least 1")

        if self._uses_pgvector:
            return self._nearest_pgvector(reference_user_id, exclude_user_id, eligible_only, limit)
        return self._nearest_scan(reference_user_id, exclude_user_id, eligible_only, limit)

    def _candidates_query(self, *columns, exclude_user_id=None, eligible_only=True):
        query = (
            self.db.query(*columns)
            .select_from(UserEmbedding)
            .join(User, User.id == UserEmbedding.user_id)
        )
        if exclude_user_id is not None:
            query = query.filter(UserEmbedding.user_id != exclude_user_id)
        if eligible_only:
            query = query.filter(User.eligible)
        return query

    def _nearest_pgvector(self, reference_user_id, exclude_user_id, eligible_only, limit):
        if not self.has_vector(reference_user_id):
            raise NoVectorForReference(reference_user_id)

        # keep the reference vector inside the database
        reference = (
            self.db.query(UserEmbedding.vector)
            .filter(UserEmbedding.user_id == reference_user_id)
            .scalar_subquery()
        )
        distance = UserEmbedding.vector.l2_distance(reference)

        self.db.execute(text(f"SET LOCAL statement_timeout = {int(self.query_timeout_ms)}"))
        try:
            rows = (
                self._candidates_query(
                    UserEmbedding.user_id,
                    User.display_name,
                    distance.label("distance"),
                    exclude_user_id=exclude_user_id,
                    eligible_only=eligible_only,
                )
                .order_by(distance, UserEmbedding.user_id)
                .limit(limit)
                .all()
            )
        except DataError as exc:
            if "different vector dimensions" in str(exc.orig):
                raise VectorDimensionMismatch(self.dimension) from exc
            raise

        return [Neighbor(user_id=r.user_id, display_name=r.display_name, distance=float(r.distance)) for r in rows]

    def _nearest_scan(self, reference_user_id, exclude_user_id, eligible_only, limit):
        reference = self.get_vector(reference_user_id)
        if reference is None:
            raise NoVectorForReference(reference_user_id)
        reference = np.asarray(reference, dtype=np.float64)

        rows = self._candidates_query(
            UserEmbedding.user_id,
            User.display_name,
            UserEmbedding.vector,
            exclude_user_id=exclude_user_id,
            eligible_only=eligible_only,
        ).all()

        neighbors = []
        for user_id, display_name, vector in rows:
            candidate = np.asarray(vector, dtype=np.float64)
            if candidate.shape != reference.shape:
                raise VectorDimensionMismatch(reference.shape[0], candidate.shape[0])
            distance = float(np.linalg.norm(candidate - reference))
            neighbors.append(Neighbor(user_id=user_id, display_name=display_name, distance=distance))

        neighbors.sort(key=lambda n: (n.distance, n.user_id))
        return neighbors[:limit]
