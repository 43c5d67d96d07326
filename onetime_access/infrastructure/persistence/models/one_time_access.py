"""One-time access credential table. Not tied to any user account."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from onetime_access.infrastructure.persistence.database import Base
from onetime_access.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
)


class OneTimeAccess(CuidMixin, CreatedAtMixin, Base):
    """Single-use credential. used_at marks consumption; session columns are set with it."""

    __tablename__ = "one_time_access"

    username: Mapped[str] = mapped_column(String, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    duration_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    session_token: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )
    session_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
