"""
Application configuration loaded from environment variables.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Persistence
    data_file: str = "/data/reminders.json"
    backup_dir: str = "/data/backups"
    backup_retention_days: int = 180

    # Remote backup (rclone remote path, e.g. "dropbox:Apps/reminders-app")
    backup_remote: Optional[str] = None
    rclone_binary: str = "rclone"
    backup_timeout_seconds: float = 120.0

    # Background timers
    auto_save_interval_seconds: float = 30.0
    recurrence_interval_seconds: float = 60.0 * 60  # hourly
    tag_rebuild_interval_seconds: float = 5.0 * 60
    backup_interval_seconds: float = 24.0 * 60 * 60  # daily

    # Delegated authentication (disabled when no verify URL is set)
    auth_verify_url: Optional[str] = None
    auth_login_url: str = "/login"
    auth_cookie_name: str = "session"
    auth_timeout_seconds: float = 5.0

    # Assistant integration
    external_secret: Optional[str] = None

    # Front end
    static_dir: str = "static"
    cors_origins: List[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth_verify_url)

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
