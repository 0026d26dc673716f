from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".studyassist" / "data"
    sqlite_filename: str = "studyassist.db"
    spaced_intervals_days: list[int] = [1, 3, 7, 14, 30]  # indexed by interval_level
    host: str = "127.0.0.1"
    port: int = 0                      # 0 picks a free port and prints it
    cors_allow_origins: list[str] = ["*"]
    log_level: str = "warning"

    model_config = {"env_prefix": "STUDYASSIST_"}

    @field_validator("spaced_intervals_days")
    @classmethod
    def _positive_intervals(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("spaced_intervals_days must not be empty")
        if any(days <= 0 for days in value):
            raise ValueError("spaced_intervals_days must contain positive day counts")
        return value


settings = Settings()
