"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Remote data store (Realtime Database REST endpoint)
    store_project_id: str = "e-perpus-13f02"
    store_url: str = ""  # Derived from the project id when empty
    store_auth_token: str | None = None

    # Service
    service_name: str = "perpus-portal"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Members
    uid_upper_bound: int = 9999
    password_hash_rounds: int = 12  # bcrypt cost factor

    # Loan reminders
    reminder_window_days: int = 7
    reminder_preview_limit: int = 3
    returned_statuses: List[str] = ["returned", "dikembalikan"]

    @property
    def store_base_url(self) -> str:
        """Store root URL without trailing slash"""
        if self.store_url:
            return self.store_url.rstrip("/")
        return f"https://{self.store_project_id}-default-rtdb.firebaseio.com"


settings = Settings()
