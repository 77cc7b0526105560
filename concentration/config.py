"""Server configuration."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = True
    log_level: str = "INFO"

    # Game defaults
    game_duration_seconds: int = 45
    max_symbols: int = 4
    rotation_interval: int = 10

    # Delays (seconds)
    peek_seconds: float = 1.0
    match_settle_seconds: float = 1.0
    flip_back_seconds: float = 0.3

    # Records
    max_records: int = 50

    # JSON file with extra themes, merged over the built-in ones
    themes_file: Optional[str] = None

    class Config:
        env_prefix = "CONCENTRATION_"


settings = Settings()
