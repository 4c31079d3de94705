from pydantic import BaseModel, Field, PositiveFloat
import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


def _env_optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


class RecommendationWeights(BaseModel):
    """Points added to a track's profile weight per interaction category."""
    like: float = Field(default_factory=lambda: float(os.getenv("RECOMMEND_WEIGHT_LIKE", "3")), gt=0)
    library: float = Field(default_factory=lambda: float(os.getenv("RECOMMEND_WEIGHT_LIBRARY", "2")), gt=0)
    play: float = Field(default_factory=lambda: float(os.getenv("RECOMMEND_WEIGHT_PLAY", "1")), gt=0)

    model_config = {"frozen": True, "validate_default": True}


class RecommendationSettings(BaseModel):
    weights: RecommendationWeights = Field(default_factory=RecommendationWeights)
    # how many of the most played tracks are scored per request
    candidate_limit: int = Field(default_factory=lambda: int(os.getenv("RECOMMEND_CANDIDATE_LIMIT", "200")), gt=0)
    top_n: int = Field(default_factory=lambda: int(os.getenv("RECOMMEND_TOP_N", "3")), gt=0)
    # personal plays below this count do not make a track "known"
    min_play_threshold: int = Field(default_factory=lambda: int(os.getenv("RECOMMEND_MIN_PLAY_THRESHOLD", "5")), gt=0)
    # optional popularity damping: contribution / log2(penalty_base + |likers|). None disables it.
    penalty_base: PositiveFloat | None = Field(default_factory=lambda: _env_optional_float("RECOMMEND_PENALTY_BASE"))
    score_workers: int = Field(default_factory=lambda: int(os.getenv("RECOMMEND_SCORE_WORKERS", "1")), gt=0)
    public_artists_only: bool = Field(default_factory=lambda: _env_flag("RECOMMEND_PUBLIC_ARTISTS_ONLY", "1"))
    store_timeout_seconds: float = Field(default_factory=lambda: float(os.getenv("RECOMMEND_STORE_TIMEOUT", "5.0")), gt=0)

    model_config = {"frozen": True, "validate_default": True}


class Settings(BaseModel):
    app_name: str = "SoundDream Recommendation API"
    debug: bool = Field(default_factory=lambda: _env_flag("APP_DEBUG", "1"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # sqlite file by default; point DATABASE_URL at mysql/postgres in deployment
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    recommendation: RecommendationSettings = Field(default_factory=RecommendationSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()
