"""
Configuration management for the friendages service
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Store
    collection_name: str = "FriendsAges"
    store_backend: str = "memory"  # 'memory', 'local'
    store_path: str = ".friendages/store"
    store_timeout: float | None = 10.0  # seconds per store call, None disables

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    api_reload: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]
    graphiql: bool = True

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = True
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "FRIENDAGES_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
