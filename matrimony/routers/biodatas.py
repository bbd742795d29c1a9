"""Biodata CRUD plus the public search endpoint."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..dependencies import get_current_email
from ..models.biodata import (
    Biodata,
    BiodataCreate,
    BiodataDocument,
    BiodataPage,
    BiodataSaveResponse,
    BiodataUpdate,
    OwnerBiodata,
)
from ..models.user import UpdateResult
from ..services.biodata_query import BiodataQueryService, get_biodata_query_service
from ..services.biodata_service import BiodataService, get_biodata_service

router = APIRouter(prefix="/biodatas", tags=["biodatas"])


def _public(doc: BiodataDocument) -> Biodata:
    return Biodata(**doc.model_dump(by_alias=True, round_trip=True))


def _owner_view(doc: BiodataDocument) -> OwnerBiodata:
    return OwnerBiodata(**doc.model_dump(by_alias=True, round_trip=True))


@router.get("", response_model=BiodataPage)
async def search_biodatas(
    gender: Optional[str] = None,
    permanent_division: Optional[str] = Query(default=None, alias="permanentDivision"),
    present_division: Optional[str] = Query(default=None, alias="presentDivision"),
    marital_status: Optional[str] = Query(default=None, alias="maritalStatus"),
    # Numeric params arrive as text so malformed values are ignored, not rejected
    min_age: Optional[str] = Query(default=None, alias="minAge"),
    max_age: Optional[str] = Query(default=None, alias="maxAge"),
    q: Optional[str] = None,
    sort: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: BiodataQueryService = Depends(get_biodata_query_service),
) -> BiodataPage:
    return await service.query_page(
        {
            "gender": gender,
            "permanentDivision": permanent_division,
            "presentDivision": present_division,
            "maritalStatus": marital_status,
            "minAge": min_age,
            "maxAge": max_age,
            "q": q,
            "sort": sort,
            "page": page,
            "limit": limit,
        }
    )


@router.post("", response_model=OwnerBiodata, status_code=status.HTTP_201_CREATED)
async def create_biodata(
    payload: BiodataCreate,
    email: str = Depends(get_current_email),
    service: BiodataService = Depends(get_biodata_service),
) -> OwnerBiodata:
    return _owner_view(await service.create(email, payload))


@router.get("/mine", response_model=OwnerBiodata)
async def my_biodata(
    email: str = Depends(get_current_email),
    service: BiodataService = Depends(get_biodata_service),
) -> OwnerBiodata:
    return _owner_view(await service.get_by_email(email))


@router.get("/by-email/{email}", response_model=Biodata)
async def biodata_by_email(
    email: str,
    service: BiodataService = Depends(get_biodata_service),
) -> Biodata:
    return _public(await service.get_by_email(email))


@router.put("/by-email/{email}", response_model=BiodataSaveResponse)
async def save_biodata_by_email(
    email: str,
    payload: BiodataUpdate,
    response: Response,
    current_email: str = Depends(get_current_email),
    service: BiodataService = Depends(get_biodata_service),
) -> BiodataSaveResponse:
    doc, created = await service.save_by_email(email, current_email, payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return BiodataSaveResponse(
        message="Biodata created" if created else "Biodata updated",
        data=_owner_view(doc),
    )


@router.get("/{biodata_id}", response_model=Biodata)
async def get_biodata(
    biodata_id: int,
    service: BiodataService = Depends(get_biodata_service),
) -> Biodata:
    return _public(await service.get(biodata_id))


@router.put("/{biodata_id}", response_model=OwnerBiodata)
async def update_biodata(
    biodata_id: int,
    payload: BiodataUpdate,
    email: str = Depends(get_current_email),
    service: BiodataService = Depends(get_biodata_service),
) -> OwnerBiodata:
    return _owner_view(await service.update(biodata_id, email, payload))


@router.delete("/{biodata_id}", response_model=UpdateResult)
async def delete_biodata(
    biodata_id: int,
    email: str = Depends(get_current_email),
    service: BiodataService = Depends(get_biodata_service),
) -> UpdateResult:
    await service.delete(biodata_id, email)
    return UpdateResult(success=True)


__all__ = ["router"]
