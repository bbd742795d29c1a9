from __future__ import annotations

import logging
import time
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from ..db import get_db
from ..db.collections import BIODATA_ID_SEQUENCE
from ..errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..models.biodata import BiodataCreate, BiodataDocument, BiodataUpdate
from ..repositories.biodata import BiodataRepository
from ..repositories.counter import CounterRepository
from ..repositories.exceptions import DuplicateKeyRepositoryError, NotFoundRepositoryError
from ..repositories.user import UserRepository

LOGGER = logging.getLogger("uvicorn.error")

# Fields owners may never set through create/update payloads.
_PROTECTED_FIELDS = ("_id", "biodataId", "email", "isPremium", "premiumRequested", "createdAt", "updatedAt")


# Fields every stored biodata keeps; blank values for these are ignored.
_REQUIRED_FIELDS = ("name", "biodataType", "age")


def _payload_changes(payload: BiodataCreate | BiodataUpdate) -> tuple[Dict[str, Any], List[str]]:
    """Split a payload into values to set and optional fields to clear.

    An explicit null or blank string clears an optional field; omitted
    fields are left alone.
    """

    data = payload.model_dump(by_alias=True, exclude_unset=True)
    fields: Dict[str, Any] = {}
    cleared: List[str] = []
    for key, value in data.items():
        if key in _PROTECTED_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            if key not in _REQUIRED_FIELDS:
                cleared.append(key)
            continue
        fields[key] = value
    return fields, cleared


class BiodataService:
    """Biodata create/read/update/delete with owner-or-admin checks."""

    def __init__(
        self,
        biodata_repo: BiodataRepository,
        counter_repo: CounterRepository,
        user_repo: UserRepository,
    ) -> None:
        self._biodata_repo = biodata_repo
        self._counter_repo = counter_repo
        self._user_repo = user_repo

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def allocate_biodata_id(self) -> int:
        return await self._counter_repo.next_value(BIODATA_ID_SEQUENCE)

    async def _is_admin(self, email: str) -> bool:
        user = await self._user_repo.get_by_email(email)
        return bool(user and user.role == "admin")

    async def _ensure_owner_or_admin(self, owner_email: str, requester_email: str) -> None:
        if owner_email == requester_email:
            return
        if not await self._is_admin(requester_email):
            raise ForbiddenError("only the owner or an admin may change this biodata")

    async def get(self, biodata_id: int) -> BiodataDocument:
        doc = await self._biodata_repo.get_by_biodata_id(biodata_id)
        if not doc:
            raise NotFoundError("biodata not found")
        return doc

    async def get_by_email(self, email: str) -> BiodataDocument:
        doc = await self._biodata_repo.get_by_email((email or "").strip().lower())
        if not doc:
            raise NotFoundError("biodata not found")
        return doc

    async def create(self, owner_email: str, payload: BiodataCreate) -> BiodataDocument:
        if await self._biodata_repo.get_by_email(owner_email):
            raise ConflictError("biodata already exists for this account")

        fields, _ = _payload_changes(payload)
        # Allocation failures propagate before anything is written.
        biodata_id = await self.allocate_biodata_id()
        try:
            document = await self._biodata_repo.insert(
                biodata_id=biodata_id,
                email=owner_email,
                fields=fields,
                created_at=self._now_ms(),
            )
        except DuplicateKeyRepositoryError:
            LOGGER.warning("Biodata id %s discarded after duplicate insert for %s", biodata_id, owner_email)
            raise ConflictError("biodata already exists for this account") from None
        LOGGER.info("Biodata %s created for %s", biodata_id, owner_email)
        return document

    async def update(
        self,
        biodata_id: int,
        requester_email: str,
        payload: BiodataUpdate,
    ) -> BiodataDocument:
        existing = await self.get(biodata_id)
        await self._ensure_owner_or_admin(existing.email, requester_email)
        return await self._apply_update(existing, payload)

    async def _apply_update(self, existing: BiodataDocument, payload: BiodataUpdate) -> BiodataDocument:
        updates, cleared = _payload_changes(payload)
        if not updates and not cleared:
            return existing
        updates["updatedAt"] = self._now_ms()
        try:
            return await self._biodata_repo.update_by_biodata_id(existing.biodata_id, updates, unset=cleared)
        except NotFoundRepositoryError:
            raise NotFoundError("biodata not found") from None

    async def save_by_email(
        self,
        email: str,
        requester_email: str,
        payload: BiodataUpdate,
    ) -> tuple[BiodataDocument, bool]:
        """Update the biodata owned by ``email`` or create it if missing.

        Returns the document and whether it was created.
        """

        owner_email = (email or "").strip().lower()
        if not owner_email:
            raise ValidationError("email required")
        await self._ensure_owner_or_admin(owner_email, requester_email)

        existing = await self._biodata_repo.get_by_email(owner_email)
        if existing:
            return await self._apply_update(existing, payload), False

        try:
            create_payload = BiodataCreate.model_validate(payload.model_dump(by_alias=True, exclude_unset=True))
        except PydanticValidationError as exc:
            raise ValidationError("name, biodataType and age are required to create a biodata") from exc
        return await self.create(owner_email, create_payload), True

    async def delete(self, biodata_id: int, requester_email: str) -> None:
        existing = await self.get(biodata_id)
        await self._ensure_owner_or_admin(existing.email, requester_email)
        if not await self._biodata_repo.delete_by_biodata_id(biodata_id):
            raise NotFoundError("biodata not found")
        LOGGER.info("Biodata %s deleted by %s", biodata_id, requester_email)


def get_biodata_service() -> BiodataService:
    db = get_db()
    return BiodataService(
        biodata_repo=BiodataRepository(db),
        counter_repo=CounterRepository(db),
        user_repo=UserRepository(db),
    )


__all__ = ["BiodataService", "get_biodata_service"]
