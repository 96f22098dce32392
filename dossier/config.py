"""Dossier configuration — loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "DOSSIER_", "env_file": ".env"}

    # Report generation
    google_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.3
    generation_timeout: float = 300.0

    # Reachability probe (transport-level timeout only)
    probe_timeout: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]
    log_level: str = "INFO"


settings = Settings()
