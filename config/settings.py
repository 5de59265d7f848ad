"""
Settings configuration for BriefDeck.
"""
import os
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # App settings
    APP_ENV: str = Field("development", env="APP_ENV")
    DEBUG: bool = Field(False, env="DEBUG")
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")

    # Logging
    LOGFIRE_TOKEN: Optional[str] = Field(None, env="LOGFIRE_TOKEN")

    # Generation provider: "openai" or "gemini"
    # Note: Model names should NOT include the provider prefix (added automatically by code)
    GENERATION_PROVIDER: str = Field("openai", env="GENERATION_PROVIDER")
    OPENAI_API_KEY: Optional[str] = Field(None, env="OPENAI_API_KEY")
    OPENAI_TEXT_MODEL: str = Field("gpt-4o", env="OPENAI_TEXT_MODEL")
    GEMINI_API_KEY: Optional[str] = Field(None, env="GEMINI_API_KEY")
    GEMINI_TEXT_MODEL: str = Field("gemini-2.5-flash", env="GEMINI_TEXT_MODEL")

    # Structured output retries inside the generation backend.
    # The planning pipeline does not retry; a failed stage fails the request.
    GENERATION_OUTPUT_RETRIES: int = Field(
        0,
        ge=0,
        le=3,
        env="GENERATION_OUTPUT_RETRIES",
        description="Output validation retries passed to the pydantic-ai Agent"
    )

    # Per-stage sampling temperatures
    EXTRACT_TEMPERATURE: float = Field(0.4, ge=0.0, le=2.0, env="EXTRACT_TEMPERATURE")
    NARRATIVE_TEMPERATURE: float = Field(0.35, ge=0.0, le=2.0, env="NARRATIVE_TEMPERATURE")
    MESSAGING_TEMPERATURE: float = Field(0.35, ge=0.0, le=2.0, env="MESSAGING_TEMPERATURE")
    ASSEMBLE_TEMPERATURE: float = Field(0.7, ge=0.0, le=2.0, env="ASSEMBLE_TEMPERATURE")
    EDIT_TEMPERATURE: float = Field(0.35, ge=0.0, le=2.0, env="EDIT_TEMPERATURE")
    CONCEPT_TEMPERATURE: float = Field(0.6, ge=0.0, le=2.0, env="CONCEPT_TEMPERATURE")

    # Deck planning
    EDITOR_PASS_ENABLED: bool = Field(
        True,
        env="EDITOR_PASS_ENABLED",
        description="Run the editorial refinement stage after assembly"
    )
    DEFAULT_SLIDE_COUNT: int = Field(10, ge=5, le=30, env="DEFAULT_SLIDE_COUNT")
    MIN_SLIDES: int = Field(5, ge=1, env="MIN_SLIDES")
    MAX_SLIDES: int = Field(30, ge=1, env="MAX_SLIDES")
    DEFAULT_VOICE_PROFILE: str = Field(
        "witty_agency",
        env="DEFAULT_VOICE_PROFILE",
        description="Voice profile used when the request does not name one"
    )
    LOCK_ON_SUGGESTED_DECK_TYPE: bool = Field(
        True,
        env="LOCK_ON_SUGGESTED_DECK_TYPE",
        description="Apply the structural lock when extraction suggests the locked deck type, "
                    "even if the request named a different type"
    )
    PLANNING_CATALOG_DIR: Optional[str] = Field(
        None,  # Default: use config/planning
        env="PLANNING_CATALOG_DIR",
        description="Directory holding recipe_catalog.json, voice_profiles.json and structural_locks.json"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env

    @property
    def has_ai_service(self) -> bool:
        """Check if the selected generation provider has credentials."""
        if self.GENERATION_PROVIDER == "gemini":
            return bool(self.GEMINI_API_KEY or os.environ.get("GOOGLE_API_KEY"))
        return bool(self.OPENAI_API_KEY)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    def validate_settings(self) -> None:
        """
        Validate that essential settings are configured.
        """
        if self.GENERATION_PROVIDER not in ("openai", "gemini"):
            raise ValueError(
                f"Unknown GENERATION_PROVIDER '{self.GENERATION_PROVIDER}'. "
                "Use 'openai' or 'gemini'."
            )

        if self.MIN_SLIDES > self.MAX_SLIDES:
            raise ValueError("MIN_SLIDES must not exceed MAX_SLIDES")

        if not self.has_ai_service:
            raise ValueError(
                "No generation credentials configured. Please either:\n"
                "  1. Set OPENAI_API_KEY with GENERATION_PROVIDER=openai\n"
                "  2. Set GEMINI_API_KEY with GENERATION_PROVIDER=gemini"
            )


def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
