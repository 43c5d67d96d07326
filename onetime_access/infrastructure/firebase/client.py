"""Firestore client construction from service account settings.

FIREBASE_SERVICE_ACCOUNT_KEY (inline JSON) wins over
FIREBASE_SERVICE_ACCOUNT_PATH (file). The client is created by the app
lifespan and stored on ``app.state``.
"""

import json
import logging
from pathlib import Path

from onetime_access.core.config import get_settings
from onetime_access.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    service_account_credentials,
)

logger = logging.getLogger(__name__)


def _service_account_info() -> dict | None:
    settings = get_settings()
    if settings.firebase_service_account_key is not None:
        raw = settings.firebase_service_account_key.get_secret_value()
        if raw:
            return json.loads(raw)
    if settings.firebase_service_account_path:
        key_file = Path(settings.firebase_service_account_path).expanduser()
        if not key_file.is_file():
            logger.error("Service account file not found: %s", key_file)
            return None
        return json.loads(key_file.read_text(encoding="utf-8"))
    logger.error("No Firebase service account configured")
    return None


def create_firestore_client() -> FirestoreRESTClient | None:
    """Return a client for the configured project, or None if credentials are unusable.

    A None client lets the app start; readiness then reports not ready and
    store calls fail with STORE_UNAVAILABLE.
    """
    try:
        info = _service_account_info()
        if info is None:
            return None
        project_id = info.get("project_id")
        if not project_id:
            logger.error("Service account JSON has no project_id")
            return None
        client = FirestoreRESTClient(
            project_id,
            service_account_credentials(info),
            timeout=get_settings().firestore_timeout_seconds,
        )
    except Exception:
        logger.exception("Firestore client initialization failed")
        return None
    logger.info("Firestore client ready for project %s", project_id)
    return client
