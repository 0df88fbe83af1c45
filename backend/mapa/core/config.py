from functools import lru_cache

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    app_name: str = "MAPA AI"
    environment: str = "local"
    log_level: str = "INFO"
    database_url: str = "sqlite:///./mapa.db"
    session_secret: str = "mapaai-secret-key"
    session_max_age: int = 24 * 60 * 60
    allowed_origins: str = "http://localhost:5000"

    llm_provider: str = "gemini"
    gemini_api_key: str | None = Field(
        None, validation_alias=AliasChoices("GOOGLE_GEMINI_API_KEY", "GEMINI_API_KEY")
    )
    gemini_model: str = "gemini-1.5-pro"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    llm_timeout_seconds: float = 60.0
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3"

    base_url: str = "http://localhost:5000"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    email_user: str | None = None
    email_app_password: str | None = None
    email_from: str = "hello@myadventurousplanningally.com"
    from_name: str = "MAPA AI"

    bcrypt_rounds: int = 10

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(".env")
    return Settings()


settings = get_settings()
