"""Pydantic models for AppSync GraphQL payloads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from golf_scheduler.domain.responses import ResponseStatus, TransportType


class _AppSyncModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UserPayload(_AppSyncModel):
    """User row."""

    id: str
    name: str
    nickname: str
    phone: str | None = None
    is_admin: bool = Field(default=False, alias="isAdmin")


class UserTagPayload(_AppSyncModel):
    """User-to-tag link."""

    id: str
    user_id: str = Field(alias="userId")
    tag_id: str = Field(alias="tagId")


class TagPayload(_AppSyncModel):
    """Tag row."""

    id: str
    name: str
    description: str | None = None
    color: str | None = None


class SessionTagPayload(_AppSyncModel):
    """Session-to-tag link."""

    id: str
    session_id: str = Field(alias="sessionId")
    tag_id: str = Field(alias="tagId")


class SessionPayload(_AppSyncModel):
    """Golf session row."""

    id: str
    title: str
    date: datetime
    description: str | None = None
    created_by_id: str = Field(alias="createdById")
    is_archived: bool | None = Field(default=None, alias="isArchived")


class ResponsePayload(_AppSyncModel):
    """Session response row."""

    id: str
    status: ResponseStatus
    note: str | None = None
    transport: TransportType | None = None
    user_id: str = Field(alias="userId")
    golf_session_id: str = Field(alias="golfSessionId")
