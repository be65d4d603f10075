from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tutor service settings loaded from env / .env.

    Every key can be overridden with a ``TUTOR_`` prefixed environment
    variable, e.g. ``TUTOR_MAX_ITERATIONS=4``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TUTOR_",
        env_file=".env",
        extra="ignore",
        protected_namespaces=()
    )

    service_name: str = Field(default="personal-ai-tutor", description="Service name")
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="json", description="json or console")
    port: int = Field(default=3006, description="HTTP listen port")

    model_name: str = Field(default="gpt-4o", description="Chat model used for tutoring")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")

    max_iterations: int = Field(default=6, ge=1, description="Cap on model passes per run")
    max_tool_concurrency: int = Field(default=8, ge=1, description="Parallel tool calls per dispatch")
    tool_timeout_seconds: float = Field(default=30.0, gt=0, description="Per tool call deadline")
    run_timeout_seconds: float = Field(default=120.0, gt=0, description="Per run deadline")

    memory_top_k: int = Field(default=5, ge=0, description="Personal history snippets per run")
    worldview_top_k: int = Field(default=3, ge=0, description="Worldview snippets per run")

    search_api_url: str = Field(default="https://api.tavily.com/search", description="Web search endpoint")
    search_api_key: Optional[str] = Field(default=None, description="Web search API key")
    search_max_results: int = Field(default=3, ge=1, description="Web search result count")

    help_click_threshold: int = Field(default=5, ge=1, description="Help clicks before TEACHER mode")


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance."""
    return Settings()
