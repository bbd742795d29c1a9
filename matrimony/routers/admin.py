from fastapi import APIRouter, Depends

from ..dependencies import require_admin
from ..models.admin import AdminStats
from ..services.admin_service import AdminStatsService, get_admin_stats_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStats)
async def admin_stats(
    _admin: str = Depends(require_admin),
    service: AdminStatsService = Depends(get_admin_stats_service),
) -> AdminStats:
    return await service.stats()


__all__ = ["router"]
