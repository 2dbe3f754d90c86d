from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="DICEBOX_", extra="ignore"
    )

    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"

    # Bind address used by `dicebox.main.serve`.
    host: str = "127.0.0.1"
    port: int = 3000

    # Per-group resource limits. Exceeding either raises ResourceLimitError
    # rather than producing an ordinary validation error.
    max_dice: int = 1000
    max_sides: int = 10000


settings = Settings()
