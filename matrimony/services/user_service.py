from __future__ import annotations

import time
from typing import Any, Dict, Optional

from ..db import get_db
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models.identifiers import parse_object_id
from ..models.user import UserCreate, UserDocument
from ..repositories.exceptions import NotFoundRepositoryError
from ..repositories.user import UserRepository
from .auth_service import normalize_email

ROLES = ("user", "admin")


def _clean_str(value: Any, max_len: int) -> Optional[str]:
    if isinstance(value, str):
        text = value.strip()
        if text:
            return text[:max_len]
    return None


class UserService:
    """Account sign-in upserts and admin mutations."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)

    async def upsert_user(self, payload: UserCreate) -> tuple[UserDocument, bool]:
        email = normalize_email(payload.email)
        profile: Dict[str, Any] = {}
        name = _clean_str(payload.name, 120)
        if name:
            profile["name"] = name
        photo = _clean_str(payload.photo_url, 512)
        if photo:
            profile["photoURL"] = photo
        return await self._repository.upsert_by_email(email=email, profile=profile, now_ms=self._now_ms())

    async def get_by_email(self, email: str) -> Optional[UserDocument]:
        text = (email or "").strip().lower()
        if not text:
            return None
        return await self._repository.get_by_email(text)

    async def is_admin(self, email: str) -> bool:
        user = await self.get_by_email(email)
        return bool(user and user.role == "admin")

    async def require_admin(self, email: str) -> UserDocument:
        user = await self.get_by_email(email)
        if not user or user.role != "admin":
            raise ForbiddenError("admin access required")
        return user

    async def fetch_for(self, email: str, requester_email: str) -> UserDocument:
        """Load an account for its owner or an admin."""

        target = (email or "").strip().lower()
        if target != requester_email and not await self.is_admin(requester_email):
            raise ForbiddenError()
        user = await self.get_by_email(target)
        if not user:
            raise NotFoundError("user not found")
        return user

    async def list_users(self, name: Optional[str] = None) -> list[UserDocument]:
        return await self._repository.list_users(_clean_str(name, 120))

    async def _update(self, user_id: str, updates: Dict[str, Any]) -> UserDocument:
        object_id = parse_object_id(user_id, "user id")
        updates["updatedAt"] = self._now_ms()
        try:
            return await self._repository.update_by_object_id(object_id, updates)
        except NotFoundRepositoryError:
            raise NotFoundError("user not found") from None

    async def set_role(self, user_id: str, role: str) -> UserDocument:
        if role not in ROLES:
            raise ValidationError("invalid role")
        return await self._update(user_id, {"role": role})

    async def make_admin(self, user_id: str) -> UserDocument:
        return await self._update(user_id, {"role": "admin"})

    async def make_premium(self, user_id: str) -> UserDocument:
        return await self._update(user_id, {"isPremium": True})

    async def delete_user(self, user_id: str) -> None:
        object_id = parse_object_id(user_id, "user id")
        if not await self._repository.delete_by_object_id(object_id):
            raise NotFoundError("user not found")


def get_user_service() -> UserService:
    return UserService(UserRepository(get_db()))


__all__ = ["UserService", "get_user_service"]
