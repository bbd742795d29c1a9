from fastapi import APIRouter, Depends

from ..dependencies import get_current_email
from ..models.favourite import (
    FavouriteList,
    FavouriteRemovalResponse,
    FavouriteRequest,
    FavouriteResponse,
)
from ..services.favourite_service import FavouriteService, get_favourite_service

router = APIRouter(prefix="/favourites", tags=["favourites"])


@router.post("", response_model=FavouriteResponse)
async def add_favourite(
    payload: FavouriteRequest,
    email: str = Depends(get_current_email),
    service: FavouriteService = Depends(get_favourite_service),
) -> FavouriteResponse:
    created = await service.add(email, payload.biodata_id)
    return FavouriteResponse(created=created)


@router.get("", response_model=FavouriteList)
async def list_favourites(
    email: str = Depends(get_current_email),
    service: FavouriteService = Depends(get_favourite_service),
) -> FavouriteList:
    return FavouriteList(favourites=await service.list_for_user(email))


@router.delete("/{biodata_id}", response_model=FavouriteRemovalResponse)
async def remove_favourite(
    biodata_id: int,
    email: str = Depends(get_current_email),
    service: FavouriteService = Depends(get_favourite_service),
) -> FavouriteRemovalResponse:
    return FavouriteRemovalResponse(removed=await service.remove(email, biodata_id))


__all__ = ["router"]
