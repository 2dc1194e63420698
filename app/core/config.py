from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="study-aid", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=5000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        alias="CORS_ORIGINS",
    )

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class LLMSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    # Model provider selection: "groq", "google" or "openrouter"
    provider: str = Field(default="groq", alias="MODEL_PROVIDER")

    summarize_model: str = Field(
        default="llama-3.1-8b-instant", alias="SUMMARIZE_MODEL"
    )
    flashcards_model: str = Field(
        default="llama-3.3-70b-versatile", alias="FLASHCARDS_MODEL"
    )
    formulas_model: str = Field(default="llama-3.1-8b-instant", alias="FORMULAS_MODEL")
    fact_model: str = Field(default="llama-3.1-8b-instant", alias="FACT_MODEL")
    correction_model: str = Field(
        default="llama-3.1-8b-instant", alias="CORRECTION_MODEL"
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    llm: LLMSettings = Field(default_factory=lambda: LLMSettings())

    groq_api_key: Optional[str] = Field(default=None, alias="GROQ_API_KEY")
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # When set, overrides every per-operation model name for OpenRouter
    openrouter_model: Optional[str] = Field(default=None, alias="OPENROUTER_MODEL")


settings = Settings()
