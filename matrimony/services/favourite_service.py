from __future__ import annotations

import time

from ..db import get_db
from ..errors import NotFoundError
from ..models.favourite import FavouriteEntry
from ..repositories.biodata import BiodataRepository
from ..repositories.favourite import FavouriteRepository


class FavouriteService:
    def __init__(self, favourite_repo: FavouriteRepository, biodata_repo: BiodataRepository) -> None:
        self._favourite_repo = favourite_repo
        self._biodata_repo = biodata_repo

    async def add(self, email: str, biodata_id: int) -> bool:
        if not await self._biodata_repo.get_by_biodata_id(biodata_id):
            raise NotFoundError("biodata not found")
        return await self._favourite_repo.add(email, biodata_id, int(time.time() * 1000))

    async def remove(self, email: str, biodata_id: int) -> bool:
        return await self._favourite_repo.remove(email, biodata_id)

    async def list_for_user(self, email: str) -> list[FavouriteEntry]:
        links = await self._favourite_repo.list_for_user(email)
        biodatas = await self._biodata_repo.get_many(link["biodataId"] for link in links)
        entries: list[FavouriteEntry] = []
        for link in links:
            biodata = biodatas.get(link["biodataId"])
            if not biodata:
                # Biodata was deleted after being favourited
                continue
            entries.append(
                FavouriteEntry(
                    biodataId=biodata.biodata_id,
                    name=biodata.name,
                    permanentDivision=biodata.permanent_division,
                    occupation=biodata.occupation,
                    favouritedAt=link.get("createdAt"),
                )
            )
        return entries


def get_favourite_service() -> FavouriteService:
    db = get_db()
    return FavouriteService(FavouriteRepository(db), BiodataRepository(db))


__all__ = ["FavouriteService", "get_favourite_service"]
