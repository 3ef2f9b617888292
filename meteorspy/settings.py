from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="METEORSPY_", env_file=".env", case_sensitive=False
    )

    cad_api_url: str = "https://ssd-api.jpl.nasa.gov/cad.api"
    upstream_timeout_seconds: float = 20.0
    user_agent: str = "meteorspy/1.0 (+local)"

    cors_allow_origins: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]
    cors_allow_methods: list[str] = ["*"]

    log_level: str = "INFO"
    log_format: str = "json"

    host: str = "0.0.0.0"
    port: int = 3000


settings = Settings()
