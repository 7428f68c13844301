"""Session configuration via environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from hkmahjong.logic.enums import Difficulty
from hkmahjong.logic.rng import validate_seed_hex


class SessionSettings(BaseSettings):
    model_config = {"env_prefix": "HKMJ_"}

    log_dir: str | None = Field(default=None, min_length=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    pacing_scale: float = Field(default=1.0, ge=0)  # 0 plays AI steps without delay
    seed: str | None = None  # fixed hex seed for reproducible sessions

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, v: str | None) -> str | None:
        if v is not None:
            validate_seed_hex(v)
        return v
