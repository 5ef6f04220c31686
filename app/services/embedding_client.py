"""
Text-embedding collaborators.

Two providers sit behind the same ``embed(text) -> list[float]`` call:
a local sentence-transformers model (default) and the OpenAI embeddings API.
Any failure to reach or configure a provider surfaces as EmbeddingUnavailable
so the journey flow can skip the refresh and retry on the next answer.
"""

import logging
from functools import lru_cache
from typing import List, Optional, Protocol

from openai import OpenAI, OpenAIError

from app.core.config import settings
from app.core.exceptions import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class EmbeddingClient(Protocol):
    def embed(self, text: str) -> List[float]: ...


class SentenceTransformerEmbeddingClient:
    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None

    def _load_model(self):
        if self._model is None:
            # torch is only imported once the first embedding is requested
            from sentence_transformers import SentenceTransformer

            try:
                self._model = SentenceTransformer(self.model_name)
            except OSError as e:
                raise EmbeddingUnavailable(f"Could not load model {self.model_name}: {e}") from e
            logger.info(f"Loaded sentence-transformers model {self.model_name}")
        return self._model

    def embed(self, text: str) -> List[float]:
        model = self._load_model()
        try:
            embedding = model.encode(text, convert_to_numpy=True)
        except RuntimeError as e:
            raise EmbeddingUnavailable(f"Embedding model failed: {e}") from e
        return embedding.tolist()


class OpenAIEmbeddingClient:
    def __init__(self, api_key: Optional[str], model_name: str = "text-embedding-3-small",
                 timeout: float = 20.0):
        self.model_name = model_name
        self.client = None
        if api_key:
            self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=1)

    def embed(self, text: str) -> List[float]:
        if self.client is None:
            raise EmbeddingUnavailable("Missing OPENAI_API_KEY")

        try:
            response = self.client.embeddings.create(model=self.model_name, input=text)
        except OpenAIError as e:
            raise EmbeddingUnavailable(f"OpenAI embedding request failed: {e}") from e

        return list(response.data[0].embedding)


@lru_cache
def get_embedding_client() -> EmbeddingClient:
    if settings.EMBEDDING_PROVIDER == "openai":
        return OpenAIEmbeddingClient(
            api_key=settings.OPENAI_API_KEY,
            model_name=settings.EMBEDDING_MODEL,
            timeout=settings.EMBEDDING_TIMEOUT_SECONDS,
        )
    return SentenceTransformerEmbeddingClient(model_name=settings.EMBEDDING_MODEL)
