from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Banco de dados
    DATABASE_URL: str
    DB_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    # embeddings
    EMBEDDING_PROVIDER: str = "sentence-transformers"  # or "openai"
    EMBEDDING_MODEL: str = "all-MiniLM-L6-v2"
    EMBEDDING_DIM: int = 384
    EMBEDDING_TIMEOUT_SECONDS: float = 20.0
    OPENAI_API_KEY: Optional[str] = None

    # journey
    EMBEDDING_ANSWER_THRESHOLD: int = 3
    EMBEDDING_REFRESH_POLICY: str = "every_answer"  # or "threshold_only"

    # matching
    MATCH_DEFAULT_LIMIT: int = 20
    MATCH_MAX_LIMIT: int = 100
    MATCH_QUERY_TIMEOUT_MS: int = 5000

    class Config:
        env_file = ".env"


settings = Settings()
