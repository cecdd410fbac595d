"""Runtime configuration for call tracking."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="CALL_TRACKER_", env_file=".env", extra="ignore")

    app_name: str = "call-tracker"
    log_level: str = "INFO"
    log_json: bool = False
    telemetry_enabled: bool = Field(
        default=True,
        description="When false, calls are passed through without any telemetry.",
    )
    sink_backend: str = Field(default="logging", description="Telemetry sink: logging, jsonl or memory.")
    sink_path: str = Field(
        default="telemetry/calls.jsonl",
        description="Target file for the jsonl sink backend.",
    )
    raise_sink_errors: bool = False
    http_timeout_seconds: float = 10.0


settings = Settings()
