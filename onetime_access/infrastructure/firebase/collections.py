"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Use these constants so collection names
stay consistent and act as the single source of truth for the "schema".
"""

COLLECTION_ONE_TIME_ACCESS = "one_time_access"

# Document field names in COLLECTION_ONE_TIME_ACCESS (camelCase on the wire).
FIELD_USERNAME = "username"
FIELD_PASSWORD_HASH = "passwordHash"
FIELD_DURATION_HOURS = "durationHours"
FIELD_CREATED_AT = "createdAt"
FIELD_USED_AT = "usedAt"
FIELD_SESSION_TOKEN = "sessionToken"
FIELD_SESSION_EXPIRES_AT = "sessionExpiresAt"
