from __future__ import annotations

import logging
import time
from typing import Optional

from ..db import get_db
from ..errors import ConflictError, ForbiddenError, NotFoundError
from ..models.identifiers import parse_object_id
from ..models.payment import PremiumRequestDocument
from ..repositories.biodata import BiodataRepository
from ..repositories.exceptions import (
    DuplicateKeyRepositoryError,
    NotFoundRepositoryError,
    StaleStateRepositoryError,
)
from ..repositories.requests import PremiumRequestRepository

LOGGER = logging.getLogger("uvicorn.error")


class PremiumService:
    """Owners ask for premium; admins approve and flip ``isPremium``."""

    def __init__(self, request_repo: PremiumRequestRepository, biodata_repo: BiodataRepository) -> None:
        self._request_repo = request_repo
        self._biodata_repo = biodata_repo

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def request_premium(self, email: str, biodata_id: int) -> PremiumRequestDocument:
        biodata = await self._biodata_repo.get_by_biodata_id(biodata_id)
        if not biodata:
            raise NotFoundError("biodata not found")
        if biodata.email != email:
            raise ForbiddenError("only the owner may request premium")
        if biodata.is_premium:
            raise ConflictError("biodata is already premium")
        if await self._request_repo.get_pending_for_biodata(biodata_id):
            raise ConflictError("premium request already pending")

        now_ms = self._now_ms()
        try:
            request = await self._request_repo.insert(email=email, biodata_id=biodata_id, created_at=now_ms)
        except DuplicateKeyRepositoryError:
            raise ConflictError("premium request already pending") from None
        await self._biodata_repo.update_by_biodata_id(
            biodata_id, {"premiumRequested": True, "updatedAt": now_ms}
        )
        return request

    async def list_requests(self, status: Optional[str] = None) -> list[PremiumRequestDocument]:
        return await self._request_repo.list_requests(status)

    async def approve(self, request_id: str) -> PremiumRequestDocument:
        object_id = parse_object_id(request_id, "premium request id")
        now_ms = self._now_ms()
        try:
            approved = await self._request_repo.approve(object_id, now_ms)
        except NotFoundRepositoryError:
            raise NotFoundError("premium request not found") from None
        except StaleStateRepositoryError:
            raise ConflictError("premium request already approved") from None

        try:
            await self._biodata_repo.update_by_biodata_id(
                approved.biodata_id,
                {"isPremium": True, "premiumRequested": False, "updatedAt": now_ms},
            )
        except NotFoundRepositoryError:
            LOGGER.warning("Premium approved for missing biodata %s", approved.biodata_id)
        return approved


def get_premium_service() -> PremiumService:
    db = get_db()
    return PremiumService(PremiumRequestRepository(db), BiodataRepository(db))


__all__ = ["PremiumService", "get_premium_service"]
