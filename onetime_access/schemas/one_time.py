"""One-time access API schemas.

Wire names are camelCase (durationHours, expiresAt, ...); timestamps are
ISO-8601 UTC strings with millisecond precision and a trailing Z.
Fields the service validates itself are optional here so that missing
values produce MISSING_FIELDS (400) rather than a 422.
"""

from pydantic import BaseModel, ConfigDict, Field

from onetime_access.application.dtos import CredentialResult, SessionResult
from onetime_access.shared.utils.datetime import isoformat_utc


class LoginRequest(BaseModel):
    """Request body for POST /one-time/login."""

    username: str | None = None
    password: str | None = None


class SessionResponse(BaseModel):
    """Session issued by a successful login."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., description="Opaque session token (32 hex chars)")
    expires_at: str = Field(..., alias="expiresAt")

    @classmethod
    def from_result(cls, result: SessionResult) -> "SessionResponse":
        return cls(token=result.token, expires_at=isoformat_utc(result.expires_at))


class ValidateResponse(BaseModel):
    """Validation answer; expiresAt is only present when active."""

    model_config = ConfigDict(populate_by_name=True)

    active: bool
    expires_at: str | None = Field(default=None, alias="expiresAt")


class CredentialWrite(BaseModel):
    """Request body for issuing or overwriting a credential."""

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = None
    password: str | None = None
    duration_hours: int | None = Field(default=None, alias="durationHours")


class CredentialItem(BaseModel):
    """Administrative view of a credential. Never carries the hash or the session token."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    duration_hours: int | None = Field(default=None, alias="durationHours")
    created_at: str | None = Field(default=None, alias="createdAt")
    used_at: str | None = Field(default=None, alias="usedAt")
    session_expires_at: str | None = Field(default=None, alias="sessionExpiresAt")
    state: str

    @classmethod
    def from_result(cls, result: CredentialResult) -> "CredentialItem":
        return cls(
            id=result.id,
            username=result.username,
            duration_hours=result.duration_hours,
            created_at=isoformat_utc(result.created_at),
            used_at=isoformat_utc(result.used_at),
            session_expires_at=isoformat_utc(result.session_expires_at),
            state=result.state.value,
        )


class CredentialListResponse(BaseModel):
    """Response for GET /one-time/credentials."""

    items: list[CredentialItem]


class IssuedCredentialResponse(BaseModel):
    """Response for POST /one-time/credentials."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    duration_hours: int | None = Field(default=None, alias="durationHours")
    created_at: str | None = Field(default=None, alias="createdAt")

    @classmethod
    def from_result(cls, result: CredentialResult) -> "IssuedCredentialResponse":
        return cls(
            id=result.id,
            username=result.username,
            duration_hours=result.duration_hours,
            created_at=isoformat_utc(result.created_at),
        )


class OkResponse(BaseModel):
    """Acknowledgement for update and delete."""

    ok: bool = True
