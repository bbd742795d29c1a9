from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FavouriteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    biodata_id: int = Field(alias="biodataId", ge=1)


class FavouriteResponse(BaseModel):
    status: Literal["ok"] = "ok"
    created: bool


class FavouriteEntry(BaseModel):
    """A favourited biodata with the summary fields the dashboard lists."""

    model_config = ConfigDict(populate_by_name=True)

    biodata_id: int = Field(alias="biodataId")
    name: Optional[str] = None
    permanent_division: Optional[str] = Field(default=None, alias="permanentDivision")
    occupation: Optional[str] = None
    favourited_at: Optional[int] = Field(default=None, alias="favouritedAt")


class FavouriteList(BaseModel):
    favourites: List[FavouriteEntry] = Field(default_factory=list)


class FavouriteRemovalResponse(BaseModel):
    status: Literal["ok"] = "ok"
    removed: bool = False


__all__ = [
    "FavouriteEntry",
    "FavouriteList",
    "FavouriteRemovalResponse",
    "FavouriteRequest",
    "FavouriteResponse",
]
