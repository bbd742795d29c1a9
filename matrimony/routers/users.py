from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ..dependencies import get_current_email, require_admin
from ..models.user import (
    AdminCheckResponse,
    RoleUpdate,
    UpdateResult,
    User,
    UserCreate,
    UserList,
    UserUpsertResponse,
)
from ..services.user_service import UserService, get_user_service

router = APIRouter(prefix="/users", tags=["users"])


def _public(doc) -> User:
    return User(**doc.model_dump(by_alias=True, round_trip=True))


@router.post("", response_model=UserUpsertResponse)
async def upsert_user(
    body: UserCreate,
    response: Response,
    service: UserService = Depends(get_user_service),
) -> UserUpsertResponse:
    doc, created = await service.upsert_user(body)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return UserUpsertResponse(
        created=created,
        message="User created" if created else "User already exists",
        user=_public(doc),
    )


@router.get("", response_model=UserList)
async def list_users(
    name: Optional[str] = None,
    _admin: str = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> UserList:
    return UserList(users=[_public(doc) for doc in await service.list_users(name)])


@router.get("/admin/{email}", response_model=AdminCheckResponse)
async def check_admin(
    email: str,
    _email: str = Depends(get_current_email),
    service: UserService = Depends(get_user_service),
) -> AdminCheckResponse:
    return AdminCheckResponse(isAdmin=await service.is_admin(email))


@router.get("/{email}", response_model=User)
async def get_user(
    email: str,
    current_email: str = Depends(get_current_email),
    service: UserService = Depends(get_user_service),
) -> User:
    return _public(await service.fetch_for(email, current_email))


@router.patch("/role/{user_id}", response_model=User)
async def update_role(
    user_id: str,
    body: RoleUpdate,
    _admin: str = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> User:
    return _public(await service.set_role(user_id, body.role))


@router.patch("/{user_id}/make-admin", response_model=User)
async def make_admin(
    user_id: str,
    _admin: str = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> User:
    return _public(await service.make_admin(user_id))


@router.patch("/{user_id}/make-premium", response_model=User)
async def make_premium(
    user_id: str,
    _admin: str = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> User:
    return _public(await service.make_premium(user_id))


@router.delete("/{user_id}", response_model=UpdateResult)
async def delete_user(
    user_id: str,
    _admin: str = Depends(require_admin),
    service: UserService = Depends(get_user_service),
) -> UpdateResult:
    await service.delete_user(user_id)
    return UpdateResult(success=True)


__all__ = ["router"]
