"""
Members Module

This module reads trip membership and member display names for the trip
ledger.

Features:
    - Retrieve a trip document
    - Retrieve the ordered member list of a trip
    - Resolve member uids to display names from user profiles

Data Model:
    Trip stored at: trips/{trip_id}
        - name: string
        - members: list of user uids (ordered)

    User profile stored at: users/{uid}
        - displayName: string

Functions:
    get_trip: Get a trip document.
    get_trip_members: Get the ordered member uids of a trip.
    get_member_names: Map member uids to display names.

Exceptions:
    TripNotFoundError: The requested trip does not exist.
"""

import structlog

from trip_ledger.config.firebase_config import get_db

logger = structlog.get_logger(__name__)

TRIPS_COLLECTION = "trips"
USERS_COLLECTION = "users"


class TripNotFoundError(LookupError):
    """Raised when a trip document does not exist."""


def _require_db():
    db = get_db()
    if db is None:
        raise RuntimeError("Firestore is not available")
    return db


def get_trip(trip_id: str) -> dict:
    """
    Get a trip document.

    Args:
        trip_id: The ID of the trip.

    Returns:
        dict: Trip data with its id under "id".

    Raises:
        ValueError: If trip_id is invalid.
        TripNotFoundError: If the trip does not exist.
        RuntimeError: If Firestore is not available.
    """
    if not isinstance(trip_id, str) or not trip_id.strip():
        raise ValueError("trip_id must be a non-empty string")

    snapshot = _require_db().collection(TRIPS_COLLECTION).document(trip_id).get()
    if not snapshot.exists:
        raise TripNotFoundError(f"Trip {trip_id} not found")

    return {"id": snapshot.id, **(snapshot.to_dict() or {})}


def get_trip_members(trip_id: str) -> list[str]:
    """Get the ordered member uids of a trip (empty list if it has none)."""
    trip = get_trip(trip_id)
    return list(trip.get("members") or [])


def get_member_names(member_ids: list[str]) -> dict:
    """
    Map member uids to display names.

    Args:
        member_ids: Member uids to resolve.

    Returns:
        dict: uid -> displayName for every member with a profile.
              Members without a profile or name are left out.

    Raises:
        RuntimeError: If Firestore is not available.
    """
    db = _require_db()
    names = {}

    for uid in member_ids:
        snapshot = db.collection(USERS_COLLECTION).document(uid).get()
        if not snapshot.exists:
            logger.debug("member_profile_missing", uid=uid)
            continue
        display_name = (snapshot.to_dict() or {}).get("displayName")
        if display_name:
            names[uid] = display_name

    return names
