"""Translate biodata search parameters into a Mongo filter, sort and page."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING

from ..db import get_db
from ..models.biodata import Biodata, BiodataPage
from ..repositories.biodata import BiodataRepository, SortSpec

# Fields searched by the free-text ``q`` parameter.
TEXT_SEARCH_FIELDS = ("name", "occupation", "permanentDivision")


def parse_int(value: Any) -> Optional[int]:
    """Lenient integer parsing: anything unparseable counts as absent."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _clean(value: Any) -> Optional[str]:
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return None


@dataclass(frozen=True)
class BiodataFilters:
    gender: Optional[str] = None
    permanent_division: Optional[str] = None
    present_division: Optional[str] = None
    marital_status: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    q: Optional[str] = None

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "BiodataFilters":
        return cls(
            gender=_clean(params.get("gender")),
            permanent_division=_clean(params.get("permanentDivision")),
            present_division=_clean(params.get("presentDivision")),
            marital_status=_clean(params.get("maritalStatus")),
            min_age=parse_int(params.get("minAge")),
            max_age=parse_int(params.get("maxAge")),
            q=_clean(params.get("q")),
        )


def build_filter(filters: BiodataFilters) -> dict[str, Any]:
    """AND of every supplied constraint; ``q`` is an OR across text fields."""

    query: dict[str, Any] = {}

    if filters.gender:
        query["biodataType"] = {"$regex": f"^{re.escape(filters.gender)}$", "$options": "i"}
    if filters.permanent_division:
        query["permanentDivision"] = filters.permanent_division
    if filters.present_division:
        query["presentDivision"] = filters.present_division
    if filters.marital_status:
        query["maritalStatus"] = filters.marital_status

    age: dict[str, int] = {}
    if filters.min_age is not None:
        age["$gte"] = filters.min_age
    if filters.max_age is not None:
        age["$lte"] = filters.max_age
    if age:
        query["age"] = age

    if filters.q:
        pattern = re.escape(filters.q)
        query["$or"] = [
            {field: {"$regex": pattern, "$options": "i"}} for field in TEXT_SEARCH_FIELDS
        ]

    return query


def build_sort(direction: Optional[str]) -> SortSpec:
    """Sort by age; ``biodataId`` keeps equal ages in creation order."""

    order = DESCENDING if (direction or "").strip().lower() == "desc" else ASCENDING
    return [("age", order), ("biodataId", ASCENDING)]


class BiodataQueryService:
    """Runs filtered, sorted and paginated biodata searches."""

    def __init__(self, repository: BiodataRepository) -> None:
        self._repository = repository

    async def query(
        self,
        filters: BiodataFilters,
        sort: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> tuple[list[Biodata], int]:
        query = build_filter(filters)
        skip = 0
        take = 0
        if limit is not None and limit > 0:
            current = page if page is not None and page > 0 else 1
            skip = (current - 1) * limit
            take = limit

        documents = await self._repository.search(query, sort=build_sort(sort), skip=skip, limit=take)
        total = await self._repository.count(query)
        items = [Biodata(**doc.model_dump(by_alias=True, round_trip=True)) for doc in documents]
        return items, total

    async def query_page(self, params: dict[str, Any]) -> BiodataPage:
        """Entry point for raw query-string values."""

        page = parse_int(params.get("page"))
        limit = parse_int(params.get("limit"))
        items, total = await self.query(
            BiodataFilters.from_params(params),
            sort=_clean(params.get("sort")),
            page=page,
            limit=limit,
        )
        paginated = limit is not None and limit > 0
        if paginated and (page is None or page < 1):
            page = 1
        return BiodataPage(items=items, total=total, page=page, limit=limit)


def get_biodata_query_service() -> BiodataQueryService:
    return BiodataQueryService(BiodataRepository(get_db()))


__all__ = [
    "BiodataFilters",
    "BiodataQueryService",
    "build_filter",
    "build_sort",
    "get_biodata_query_service",
    "parse_int",
]
