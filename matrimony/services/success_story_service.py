from __future__ import annotations

import time

from ..db import get_db
from ..errors import NotFoundError
from ..models.success_story import SuccessStory, SuccessStoryCreate
from ..repositories.biodata import BiodataRepository
from ..repositories.success_story import SuccessStoryRepository


class SuccessStoryService:
    def __init__(self, story_repo: SuccessStoryRepository, biodata_repo: BiodataRepository) -> None:
        self._story_repo = story_repo
        self._biodata_repo = biodata_repo

    async def share(self, email: str, payload: SuccessStoryCreate) -> SuccessStory:
        if not await self._biodata_repo.get_by_biodata_id(payload.self_biodata_id):
            raise NotFoundError("biodata not found")
        fields = payload.model_dump(by_alias=True, exclude_none=True)
        fields["story"] = payload.story.strip()
        return await self._story_repo.append(email=email, fields=fields, created_at=int(time.time() * 1000))

    async def list_stories(self) -> list[SuccessStory]:
        return await self._story_repo.list_newest_first()


def get_success_story_service() -> SuccessStoryService:
    db = get_db()
    return SuccessStoryService(SuccessStoryRepository(db), BiodataRepository(db))


__all__ = ["SuccessStoryService", "get_success_story_service"]
