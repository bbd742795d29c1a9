from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import PyObjectId


class SuccessStoryCreate(BaseModel):
    """Payload for sharing a marriage story."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    self_biodata_id: int = Field(alias="selfBiodataId", ge=1)
    partner_biodata_id: int = Field(alias="partnerBiodataId", ge=1)
    couple_image: Optional[str] = Field(default=None, alias="coupleImage", max_length=512)
    story: str = Field(min_length=1, max_length=2000)
    marriage_date: Optional[str] = Field(default=None, alias="marriageDate")
    rating: int = Field(default=5, ge=1, le=5)


class SuccessStory(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    email: str
    self_biodata_id: int = Field(alias="selfBiodataId")
    partner_biodata_id: int = Field(alias="partnerBiodataId")
    couple_image: Optional[str] = Field(default=None, alias="coupleImage")
    story: str
    marriage_date: Optional[str] = Field(default=None, alias="marriageDate")
    rating: int = 5
    created_at: int = Field(alias="createdAt")


class SuccessStoryList(BaseModel):
    stories: List[SuccessStory] = Field(default_factory=list)


__all__ = ["SuccessStory", "SuccessStoryCreate", "SuccessStoryList"]
