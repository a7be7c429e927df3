"""
Firebase Config Module

Initializes the Firebase Admin SDK once and hands out the Firestore client.

Functions:
    get_db: Get the Firestore client, or None if Firebase is not configured.
"""

from pathlib import Path
from typing import Optional

import firebase_admin
import structlog
from firebase_admin import credentials, firestore

from trip_ledger.config.settings import get_settings

logger = structlog.get_logger(__name__)

_db = None


def get_db() -> Optional["firestore.firestore.Client"]:
    """
    Get the Firestore client.

    The Firebase app is initialized on first use from the service account
    file named in FIREBASE_CREDENTIALS_PATH.

    Returns:
        Client | None: Firestore client, or None if credentials are missing
                       or initialization failed.
    """
    global _db
    if _db is not None:
        return _db

    settings = get_settings().firebase
    if not settings.credentials_path or not Path(settings.credentials_path).exists():
        logger.warning("firebase_credentials_missing", path=settings.credentials_path)
        return None

    try:
        try:
            firebase_admin.get_app()
        except ValueError:
            options = {"projectId": settings.project_id} if settings.project_id else None
            firebase_admin.initialize_app(
                credentials.Certificate(settings.credentials_path), options
            )
        _db = firestore.client()
    except (ValueError, OSError) as e:
        logger.error("firebase_init_failed", error=str(e))
        return None

    logger.info("firebase_initialized", project_id=settings.project_id)
    return _db
