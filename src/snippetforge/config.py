"""Configuration settings for snippetforge."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

COMPLETION_MARKER = "<task_summary>"
COMPLETION_MARKER_CLOSE = "</task_summary>"


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or overrides."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, populate_by_name=True
    )

    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL"
    )
    openai_model: str = Field(default="gpt-4.1-mini", validation_alias="OPENAI_MODEL")
    openai_timeout_seconds: int = Field(
        default=60, validation_alias="OPENAI_TIMEOUT_SECONDS"
    )
    openai_extra_headers: str | None = Field(
        default=None, validation_alias="OPENAI_EXTRA_HEADERS"
    )
    openai_disable_tool_choice: bool = Field(
        default=False, validation_alias="OPENAI_DISABLE_TOOL_CHOICE"
    )
    e2b_api_key: str | None = Field(default=None, validation_alias="E2B_API_KEY")
    sandbox_template: str = Field(
        default="vibe-nextjs-test-dev", validation_alias="SANDBOX_TEMPLATE"
    )
    sandbox_port: int = Field(default=3000, validation_alias="SANDBOX_PORT")
    max_iterations: int = Field(default=15, ge=1, validation_alias="MAX_ITERATIONS")
    completion_marker: str = Field(
        default=COMPLETION_MARKER, min_length=1, validation_alias="COMPLETION_MARKER"
    )
    parallel_tool_calls: bool = Field(default=True, validation_alias="PARALLEL_TOOL_CALLS")
    max_tool_workers: int = Field(default=4, ge=1, validation_alias="MAX_TOOL_WORKERS")
    run_timeout_seconds: float | None = Field(
        default=None, validation_alias="RUN_TIMEOUT_SECONDS"
    )
    workspace_dir: str = Field(default=".snippetforge", validation_alias="WORKSPACE_DIR")


DEFAULT_SETTINGS = Settings()
