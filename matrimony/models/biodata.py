from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .identifiers import PyObjectId

BiodataType = Literal["Male", "Female"]


def _normalize_biodata_type(value):
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("male", "female"):
            return text.capitalize()
    return value


class _BiodataFields(BaseModel):
    """Profile attributes shared by stored documents and request payloads."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = Field(default=None, max_length=120)
    biodata_type: Optional[BiodataType] = Field(default=None, alias="biodataType")
    age: Optional[int] = Field(default=None, ge=18, le=100)
    date_of_birth: Optional[str] = Field(default=None, alias="dateOfBirth")
    height: Optional[str] = None
    weight: Optional[str] = None
    occupation: Optional[str] = Field(default=None, max_length=120)
    race: Optional[str] = None
    fathers_name: Optional[str] = Field(default=None, alias="fathersName")
    mothers_name: Optional[str] = Field(default=None, alias="mothersName")
    permanent_division: Optional[str] = Field(default=None, alias="permanentDivision")
    present_division: Optional[str] = Field(default=None, alias="presentDivision")
    marital_status: Optional[str] = Field(default=None, alias="maritalStatus")
    expected_partner_age: Optional[str] = Field(default=None, alias="expectedPartnerAge")
    expected_partner_height: Optional[str] = Field(default=None, alias="expectedPartnerHeight")
    expected_partner_weight: Optional[str] = Field(default=None, alias="expectedPartnerWeight")
    mobile_number: Optional[str] = Field(default=None, alias="mobileNumber")
    profile_image: Optional[str] = Field(default=None, alias="profileImage")

    @field_validator("biodata_type", mode="before")
    @classmethod
    def _case_insensitive_type(cls, value):
        return _normalize_biodata_type(value)


class BiodataDocument(_BiodataFields):
    """Canonical biodata document stored in MongoDB."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    biodata_id: int = Field(alias="biodataId")
    email: str
    # Stored documents may predate validation; keep whatever category is there.
    biodata_type: Optional[str] = Field(default=None, alias="biodataType")
    age: Optional[int] = None
    is_premium: bool = Field(default=False, alias="isPremium")
    premium_requested: bool = Field(default=False, alias="premiumRequested")
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")


class OwnerBiodata(BiodataDocument):
    """Full biodata, returned only to its owner or an admin."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", arbitrary_types_allowed=True)


class Biodata(OwnerBiodata):
    """Public representation of a biodata returned via the API.

    Contact details stay hidden until a contact request is approved.
    """

    email: Optional[str] = Field(default=None, exclude=True)
    mobile_number: Optional[str] = Field(default=None, alias="mobileNumber", exclude=True)


class BiodataCreate(_BiodataFields):
    """Payload accepted when creating a biodata."""

    name: str = Field(min_length=1, max_length=120)
    biodata_type: BiodataType = Field(alias="biodataType")
    age: int = Field(ge=18, le=100)


class BiodataUpdate(_BiodataFields):
    """Mutable biodata fields; anything omitted is left untouched."""


class BiodataPage(BaseModel):
    """One page of query results plus the full matching count."""

    items: List[Biodata] = Field(default_factory=list)
    total: int = 0
    page: Optional[int] = None
    limit: Optional[int] = None


class BiodataSaveResponse(BaseModel):
    success: bool = True
    message: str
    data: OwnerBiodata


__all__ = [
    "Biodata",
    "OwnerBiodata",
    "BiodataCreate",
    "BiodataDocument",
    "BiodataPage",
    "BiodataSaveResponse",
    "BiodataType",
    "BiodataUpdate",
]
