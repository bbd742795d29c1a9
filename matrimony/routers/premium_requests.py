from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_current_email, require_admin
from ..models.payment import PremiumRequest, PremiumRequestCreate, PremiumRequestList
from ..services.premium_service import PremiumService, get_premium_service

router = APIRouter(prefix="/premium-requests", tags=["premium"])


def _public(doc) -> PremiumRequest:
    return PremiumRequest(**doc.model_dump(by_alias=True, round_trip=True))


@router.post("", response_model=PremiumRequest, status_code=status.HTTP_201_CREATED)
async def request_premium(
    body: PremiumRequestCreate,
    email: str = Depends(get_current_email),
    service: PremiumService = Depends(get_premium_service),
) -> PremiumRequest:
    return _public(await service.request_premium(email, body.biodata_id))


@router.get("", response_model=PremiumRequestList)
async def list_premium_requests(
    status_filter: Optional[Literal["pending", "approved"]] = Query(default=None, alias="status"),
    _admin: str = Depends(require_admin),
    service: PremiumService = Depends(get_premium_service),
) -> PremiumRequestList:
    requests = await service.list_requests(status_filter)
    return PremiumRequestList(premiumRequests=[_public(r) for r in requests])


@router.patch("/{request_id}/approve", response_model=PremiumRequest)
async def approve_premium_request(
    request_id: str,
    _admin: str = Depends(require_admin),
    service: PremiumService = Depends(get_premium_service),
) -> PremiumRequest:
    return _public(await service.approve(request_id))


__all__ = ["router"]
