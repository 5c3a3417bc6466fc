"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

from flowbot.rest.auth import DEFAULT_API_URL
from flowbot.stream.source import DEFAULT_STREAM_URL


class ApiConfig(BaseModel):
    """Flowdock API credentials and endpoints."""

    model_config = ConfigDict(extra="ignore")

    token: str = ""
    organization: str = ""
    api_url: str = DEFAULT_API_URL
    stream_url: str = DEFAULT_STREAM_URL
    timeout_seconds: float = Field(default=10.0, gt=0)


class StreamConfig(BaseModel):
    """Which flows to listen to and how to report per-message errors."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    flows: list[str] = Field(default_factory=list)
    """``org/flow`` references passed as the stream filter."""

    active: bool = False
    events: list[str] = Field(default_factory=lambda: ["message"])
    error_queue_size: int = Field(default=100, ge=1)
    user: str | None = None
    """Own user id; entries posted by it are not dispatched."""


class Config(BaseSettings):
    """Root configuration for flowbot."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, env_prefix="FLOWBOT_", env_nested_delimiter="__")

    config_version: int = 1
    api: ApiConfig = Field(default_factory=ApiConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    commands_file: str = "~/.flowbot/commands.json"

    @property
    def commands_path(self) -> Path:
        return Path(self.commands_file).expanduser()
