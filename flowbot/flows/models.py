"""Wire models for the Flowdock stream and REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WireModel(BaseModel):
    """Base model for API payloads; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Entry(WireModel):
    """One event received from the stream."""

    event: str = ""
    content: str = ""
    flow: str = ""
    tags: list[str] = Field(default_factory=list)
    uuid: str | None = None
    id: int | None = None
    persist: bool = False
    sent: int | None = None
    app: str | None = None
    created_at: datetime | None = None
    attachments: list[Any] = Field(default_factory=list)
    user: int | str | None = None
    thread_id: str | None = None

    @field_validator("content", mode="before")
    @classmethod
    def _text_content(cls, value: Any) -> str:
        # Non-message events carry structured content; only text is routable.
        if isinstance(value, str):
            return value
        return ""

    @field_validator("tags", "attachments", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value


class Organization(WireModel):
    id: int | None = None
    name: str = ""
    parameterized_name: str = ""
    active: bool = True
    url: str = ""
    user_count: int | None = None
    user_limit: int | None = None
    flow_admins: bool = False


class Flow(WireModel):
    """A flow visible to the API token."""

    id: str
    name: str = ""
    parameterized_name: str = ""
    description: str | None = None
    email: str | None = None
    url: str = ""
    web_url: str = ""
    access_mode: str = ""
    flow_admin: bool = False
    open: bool = False
    joined: bool = False
    last_message_at: datetime | None = None
    last_message_id: int | None = None
    team_notifications: bool = False
    organization: Organization | None = None

    @property
    def stream_filter(self) -> str:
        """``org/flow`` reference used by the stream endpoint."""
        org = self.organization.parameterized_name if self.organization else ""
        return f"{org}/{self.parameterized_name}" if org else self.parameterized_name


class User(WireModel):
    id: int
    email: str = ""
    name: str = ""
    nick: str = ""
    avatar: str = ""
    website: str | None = None


class MessageData(WireModel):
    """Outbound message posted to the messages endpoint."""

    flow: str
    content: str
    event: str = "message"
    tags: list[str] = Field(default_factory=list)
    external_user_name: str | None = None
    thread_id: str | None = None

    def payload(self) -> dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        if not data.get("tags"):
            data.pop("tags", None)
        return data
