from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Event Reservation Core'
    VERSION: str = '0.1.0'
    DEBUG: bool = False  # Enables arg/return logging and the rotating file sink

    # Concurrency control
    MAX_CONCURRENCY_RETRIES: int = 3  # Total attempts for a conflicting aggregate write
    CONCURRENCY_RETRY_BACKOFF_SECONDS: float = 0.01  # Linear backoff step between attempts
    AGGREGATE_LOCK_TIMEOUT_SECONDS: float = 5.0  # Max wait for a per-aggregate lock

    # Authentication
    PASSWORD_MIN_LENGTH: int = 8
    BCRYPT_ROUNDS: int = 12  # Tests lower this to 4

    @field_validator('MAX_CONCURRENCY_RETRIES')
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 1:
            raise ValueError('MAX_CONCURRENCY_RETRIES must be at least 1')
        return v

    @field_validator('BCRYPT_ROUNDS')
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError('BCRYPT_ROUNDS must be between 4 and 31')
        return v


settings = Settings()  # type: ignore
