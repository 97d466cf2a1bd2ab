"""
Application configuration settings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


DEFAULT_GEMINI_INSTRUCTIONS = (
    "You are Dezzy, an expert in Desmos Activity Builder Computation Layer (CL). "
    "Output valid CL code when asked; you can add brief comments. You can use code "
    "the user has saved in slides to give context-aware help."
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"], case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field("CL Prompt Studio", alias="APP_NAME")

    # Environment
    environment: str = Field("development", alias="ENVIRONMENT")
    debug: bool = Field(False, alias="DEBUG")

    # Server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, alias="PORT")

    # OpenAI (code generation + summaries)
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(None, alias="OPENAI_BASE_URL")
    code_max_tokens: int = Field(1024, alias="CODE_MAX_TOKENS")
    summary_max_tokens: int = Field(60, alias="SUMMARY_MAX_TOKENS")

    # Gemini (Dezzy assistant)
    gemini_api_key: Optional[str] = Field(None, alias="GEMINI_API_KEY")
    gemini_model: str = Field("gemini-2.5-flash", alias="GEMINI_MODEL")
    gemini_fallback_model: str = Field(
        "gemini-2.5-flash-lite", alias="GEMINI_FALLBACK_MODEL"
    )
    gemini_instructions: str = Field(
        DEFAULT_GEMINI_INSTRUCTIONS, alias="GEMINI_INSTRUCTIONS"
    )
    gemini_base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta", alias="GEMINI_BASE_URL"
    )
    gemini_max_output_tokens: int = Field(1024, alias="GEMINI_MAX_OUTPUT_TOKENS")
    llm_timeout_seconds: float = Field(60.0, alias="LLM_TIMEOUT_SECONDS")

    # Reference context for the assistant
    cl_docs_path: str = Field("cl-docs.md", alias="CL_DOCS_PATH")
    dezzy_docs_path: str = Field("dezzy-docs.md", alias="DEZZY_DOCS_PATH")
    docs_folder: str = Field("Docs", alias="DOCS_FOLDER")

    # Chat history
    dezzy_history_file: str = Field("dezzy-history.json", alias="DEZZY_HISTORY_FILE")
    dezzy_history_max_age_hours: int = Field(24, alias="DEZZY_HISTORY_MAX_AGE_HOURS")
    dezzy_history_max_turns: int = Field(30, alias="DEZZY_HISTORY_MAX_TURNS")

    # Project storage
    project_storage: str = Field("file", alias="PROJECT_STORAGE")  # memory|file|redis
    project_storage_dir: str = Field(".projects", alias="PROJECT_STORAGE_DIR")
    project_storage_quota_bytes: int = Field(
        5 * 1024 * 1024, alias="PROJECT_STORAGE_QUOTA_BYTES"
    )
    redis_url: str = Field("redis://localhost:6379/0", alias="REDIS_URL")

    # CORS
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")

    def get_cors_origins(self) -> list[str]:
        """Parse CORS origins from string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]


_settings = None


def get_settings() -> Settings:
    """Get settings instance (useful for dependency injection)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
