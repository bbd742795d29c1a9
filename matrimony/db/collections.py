"""MongoDB collection names used by the matrimony API."""

from __future__ import annotations

USERS_COLLECTION = "users"
BIODATAS_COLLECTION = "biodatas"
COUNTERS_COLLECTION = "counters"
PAYMENTS_COLLECTION = "payments"
CONTACT_REQUESTS_COLLECTION = "contact_requests"
PREMIUM_REQUESTS_COLLECTION = "premium_requests"
FAVOURITES_COLLECTION = "favourites"
SUCCESS_STORIES_COLLECTION = "success_stories"

BIODATA_ID_SEQUENCE = "biodataId"

__all__ = [
    "USERS_COLLECTION",
    "BIODATAS_COLLECTION",
    "COUNTERS_COLLECTION",
    "PAYMENTS_COLLECTION",
    "CONTACT_REQUESTS_COLLECTION",
    "PREMIUM_REQUESTS_COLLECTION",
    "FAVOURITES_COLLECTION",
    "SUCCESS_STORIES_COLLECTION",
    "BIODATA_ID_SEQUENCE",
]
