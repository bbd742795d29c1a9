from pydantic import BaseModel, ConfigDict, Field


class AdminStats(BaseModel):
    """Dashboard counters; revenue is the sum of recorded payment amounts."""

    model_config = ConfigDict(populate_by_name=True)

    total_biodatas: int = Field(alias="totalBiodatas")
    male_biodatas: int = Field(alias="maleBiodatas")
    female_biodatas: int = Field(alias="femaleBiodatas")
    premium_biodatas: int = Field(alias="premiumBiodatas")
    total_users: int = Field(alias="totalUsers")
    total_contact_requests: int = Field(alias="totalContactRequests")
    pending_contact_requests: int = Field(alias="pendingContactRequests")
    pending_premium_requests: int = Field(alias="pendingPremiumRequests")
    success_stories: int = Field(alias="successStories")
    total_revenue: float = Field(alias="totalRevenue")


__all__ = ["AdminStats"]
