"""SQLAlchemy persistence (Postgres backend)."""
