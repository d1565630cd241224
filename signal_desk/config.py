from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Upstream signal service
    api_base: str = ""  # e.g. https://signals.example.com or http://localhost:8888/api for the relay
    api_key: str = ""  # sent as X-Api-Key; omitted when blank

    # Timeouts (seconds)
    health_timeout_seconds: float = 10.0
    request_timeout_seconds: float = 15.0

    # Relay
    web_host: str = "0.0.0.0"
    web_port: int = 8888

    log_level: str = "INFO"

    @property
    def upstream_base(self) -> str:
        return self.api_base.rstrip("/")


settings = Settings()
