"""SQLAlchemy ORM models."""

from onetime_access.infrastructure.persistence.models.one_time_access import OneTimeAccess

__all__ = ["OneTimeAccess"]
