from __future__ import annotations

from ..db import get_db
from ..models.admin import AdminStats
from ..repositories.biodata import BiodataRepository
from ..repositories.requests import PaymentRepository, PremiumRequestRepository
from ..repositories.success_story import SuccessStoryRepository
from ..repositories.user import UserRepository


class AdminStatsService:
    """Aggregate counters for the admin dashboard."""

    def __init__(
        self,
        biodata_repo: BiodataRepository,
        user_repo: UserRepository,
        payment_repo: PaymentRepository,
        premium_repo: PremiumRequestRepository,
        story_repo: SuccessStoryRepository,
    ) -> None:
        self._biodata_repo = biodata_repo
        self._user_repo = user_repo
        self._payment_repo = payment_repo
        self._premium_repo = premium_repo
        self._story_repo = story_repo

    async def stats(self) -> AdminStats:
        def _type(value: str) -> dict:
            return {"biodataType": {"$regex": f"^{value}$", "$options": "i"}}

        return AdminStats(
            totalBiodatas=await self._biodata_repo.count(),
            maleBiodatas=await self._biodata_repo.count(_type("male")),
            femaleBiodatas=await self._biodata_repo.count(_type("female")),
            premiumBiodatas=await self._biodata_repo.count({"isPremium": True}),
            totalUsers=await self._user_repo.count(),
            totalContactRequests=await self._payment_repo.count_contact_requests(),
            pendingContactRequests=await self._payment_repo.count_contact_requests("pending"),
            pendingPremiumRequests=await self._premium_repo.count("pending"),
            successStories=await self._story_repo.count(),
            totalRevenue=await self._payment_repo.total_revenue(),
        )


def get_admin_stats_service() -> AdminStatsService:
    db = get_db()
    return AdminStatsService(
        BiodataRepository(db),
        UserRepository(db),
        PaymentRepository(db),
        PremiumRequestRepository(db),
        SuccessStoryRepository(db),
    )


__all__ = ["AdminStatsService", "get_admin_stats_service"]
