from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API key (required at request time, 500 if missing)
    OPENAI_API_KEY: str | None = None

    # LLM settings
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    # Allow OpenAI-compatible backends (Groq, OpenRouter, Ollama, etc.)
    OPENAI_BASE_URL: str | None = None


def get_settings() -> Settings:
    """Read settings fresh for each invocation so env changes are picked up."""
    return Settings()
