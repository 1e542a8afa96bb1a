"""
Configuration settings for the Tarefas backend.

Uses pydantic-settings for environment variable management.
All sensitive values are loaded from environment variables.
"""

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- HTTP ---
    cors_origin: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = 3000

    # --- Database ---
    db_url: str = "sqlite:///./tarefas.db"

    # --- Sessions ---
    session_secret: str = "troque-este-segredo-em-producao"
    session_cookie_name: str = "tarefas_session"
    session_max_age: int = 86400
    session_cookie_secure: bool = False
    session_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"

    # --- GitHub OAuth ---
    github_client_id: str = ""
    github_client_secret: str = ""
    github_callback_url: str = ""
    github_timeout: float = 10.0
    auth_redirect: str = "/usuario"

    # --- Application ---
    debug: bool = False
    log_level: str = "INFO"

    @property
    def cors_origins(self) -> List[str]:
        """Allowed CORS origins parsed from the comma-separated setting."""
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    @property
    def oauth_configured(self) -> bool:
        # Without a client secret the gate lets every request through
        return bool(self.github_client_secret)


# Global settings instance
settings = Settings()
