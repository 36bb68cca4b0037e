"""Service configuration"""

from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelOption(BaseModel):
    """A model the UI may request, as listed in the model picker."""

    id: str = Field(..., description="Provider-qualified model id")
    name: str = Field(..., description="Display name")
    provider: str = Field(..., description="Model vendor")


DEFAULT_MODEL_OPTIONS: List[ModelOption] = [
    ModelOption(id="anthropic/claude-3-haiku", name="Claude 3 Haiku", provider="Anthropic"),
    ModelOption(id="anthropic/claude-3-sonnet", name="Claude 3 Sonnet", provider="Anthropic"),
    ModelOption(id="anthropic/claude-3-opus", name="Claude 3 Opus", provider="Anthropic"),
    ModelOption(id="openai/gpt-4o", name="GPT-4o", provider="OpenAI"),
    ModelOption(id="openai/gpt-3.5-turbo", name="GPT-3.5 Turbo", provider="OpenAI"),
    ModelOption(id="meta-llama/llama-3-70b-instruct", name="Llama 3 70B", provider="Meta"),
]


class Settings(BaseSettings):
    """AI service configuration.

    Every value can be overridden through the environment (case-insensitive)
    or a local ``.env`` file.
    """

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 3001
    cors_origins: List[str] = ["*"]

    # OpenRouter
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_referer: str = "https://better-projects.vercel.app/"
    openrouter_title: str = "Better Projects - Task Management"

    # Completion parameters, fixed so summaries stay consistent in tone/length
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    llm_timeout_secs: float = 60.0
    # 1 means no retry; retrying is the caller's decision
    llm_max_attempts: int = Field(1, ge=1)

    # Models
    default_model: str = "meta-llama/llama-3-70b-instruct"
    allowed_models: List[ModelOption] = Field(
        default_factory=lambda: list(DEFAULT_MODEL_OPTIONS)
    )

    # Summary cache
    cache_expiration_secs: int = Field(24 * 60 * 60, gt=0)

    # Streaming presenter
    stream_chunk_size: int = Field(15, ge=1)
    stream_interval_ms: int = Field(15, ge=0)

    # Workspace data (tasks/projects/teams) used to build prompts
    workspace_data_path: Optional[str] = None

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def llm_configured(self) -> bool:
        return bool(self.openrouter_api_key)

    @property
    def allowed_model_ids(self) -> List[str]:
        return [option.id for option in self.allowed_models]


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()
