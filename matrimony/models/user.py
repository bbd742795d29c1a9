from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import PyObjectId

Role = Literal["user", "admin"]


class TokenRequest(BaseModel):
    """Identity payload exchanged for a session token."""

    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=3, max_length=254)


class TokenResponse(BaseModel):
    token: str


class UserCreate(BaseModel):
    """Payload sent on first sign-in. Role is never taken from the client."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: str = Field(min_length=3, max_length=254)
    name: Optional[str] = Field(default=None, max_length=120)
    photo_url: Optional[str] = Field(default=None, alias="photoURL")


class UserDocument(BaseModel):
    """Canonical user account stored in MongoDB."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    email: str
    name: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    role: Role = "user"
    is_premium: bool = Field(default=False, alias="isPremium")
    is_active: bool = Field(default=True, alias="isActive")
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")
    last_login_at: Optional[int] = Field(default=None, alias="lastLoginAt")


class User(UserDocument):
    """Public-facing user account."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", arbitrary_types_allowed=True)


class UserUpsertResponse(BaseModel):
    created: bool
    message: str
    user: User


class UserList(BaseModel):
    users: List[User] = Field(default_factory=list)


class AdminCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_admin: bool = Field(alias="isAdmin")


class RoleUpdate(BaseModel):
    role: str


class UpdateResult(BaseModel):
    success: bool


__all__ = [
    "AdminCheckResponse",
    "Role",
    "RoleUpdate",
    "TokenRequest",
    "TokenResponse",
    "UpdateResult",
    "User",
    "UserCreate",
    "UserDocument",
    "UserList",
    "UserUpsertResponse",
]
