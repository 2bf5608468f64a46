from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NOTEX_", env_file=".env", extra="ignore")

    # Output settings
    output_dir: Path = Path("./compressed")
    output_format: Literal["markdown", "plain"] = "markdown"

    # LLM settings
    model: str = "gpt-3.5-turbo"
    base_url: str = "http://localhost:8080/v1"
    api_key: str = "sk-no-key-required"  # local servers accept any key
    request_timeout: float = 120.0

    # Concurrency and retry settings
    parallel: int = 8  # match the server's -np value
    retries: int = 3
    backoff_base: float = 1.0

    # Cross-reference settings
    summary_chars: int = 500

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
