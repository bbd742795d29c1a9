from __future__ import annotations

import pytest

from matrimony.db import get_db
from matrimony.db.collections import PREMIUM_REQUESTS_COLLECTION, SUCCESS_STORIES_COLLECTION
from matrimony.repositories.requests import PremiumRequestRepository


async def _biodata(api_client, headers, name: str, biodata_type: str = "Female", **extra) -> int:
    body = {"name": name, "age": 27, "biodataType": biodata_type, **extra}
    response = await api_client.post("/biodatas", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["biodataId"]


@pytest.mark.asyncio
async def test_premium_request_lifecycle(api_client, make_user) -> None:
    owner = await make_user("owner@x.com")
    other = await make_user("other@x.com")
    admin = await make_user("admin@x.com", admin=True)
    biodata_id = await _biodata(api_client, owner, "Owner")

    assert (await api_client.post("/premium-requests", json={"biodataId": biodata_id}, headers=other)).status_code == 403

    created = await api_client.post("/premium-requests", json={"biodataId": biodata_id}, headers=owner)
    assert created.status_code == 201, created.text
    request_id = created.json()["_id"]
    assert created.json()["status"] == "pending"
    assert (await api_client.get(f"/biodatas/{biodata_id}")).json()["premiumRequested"] is True

    duplicate = await api_client.post("/premium-requests", json={"biodataId": biodata_id}, headers=owner)
    assert duplicate.status_code == 409

    pending = await api_client.get("/premium-requests", params={"status": "pending"}, headers=admin)
    assert [r["_id"] for r in pending.json()["premiumRequests"]] == [request_id]

    approved = await api_client.patch(f"/premium-requests/{request_id}/approve", headers=admin)
    assert approved.status_code == 200, approved.text
    assert approved.json()["status"] == "approved"

    biodata = (await api_client.get(f"/biodatas/{biodata_id}")).json()
    assert biodata["isPremium"] is True
    assert biodata["premiumRequested"] is False

    assert (await api_client.patch(f"/premium-requests/{request_id}/approve", headers=admin)).status_code == 409
    already = await api_client.post("/premium-requests", json={"biodataId": biodata_id}, headers=owner)
    assert already.status_code == 409


@pytest.mark.asyncio
async def test_racing_premium_requests_leave_one_pending(api_client, make_user, monkeypatch) -> None:
    owner = await make_user("racer@x.com")
    biodata_id = await _biodata(api_client, owner, "Racer")

    async def _not_yet_visible(self, biodata_id: int):
        return None

    # Both requests pass the pending check before either insert lands.
    monkeypatch.setattr(PremiumRequestRepository, "get_pending_for_biodata", _not_yet_visible)

    first = await api_client.post("/premium-requests", json={"biodataId": biodata_id}, headers=owner)
    second = await api_client.post("/premium-requests", json={"biodataId": biodata_id}, headers=owner)

    assert first.status_code == 201, first.text
    assert second.status_code == 409
    assert second.json() == {"message": "premium request already pending"}
    pending = {"biodataId": biodata_id, "status": "pending"}
    assert await get_db()[PREMIUM_REQUESTS_COLLECTION].count_documents(pending) == 1


@pytest.mark.asyncio
async def test_favourites_are_idempotent_and_listed_with_summary(api_client, make_user) -> None:
    owner = await make_user("bride@x.com")
    fan = await make_user("fan@x.com")
    biodata_id = await _biodata(api_client, owner, "Bride", permanentDivision="Sylhet", occupation="Nurse")

    first = await api_client.post("/favourites", json={"biodataId": biodata_id}, headers=fan)
    assert first.status_code == 200, first.text
    assert first.json()["created"] is True
    second = await api_client.post("/favourites", json={"biodataId": biodata_id}, headers=fan)
    assert second.json()["created"] is False

    missing = await api_client.post("/favourites", json={"biodataId": 404}, headers=fan)
    assert missing.status_code == 404

    listing = await api_client.get("/favourites", headers=fan)
    favourites = listing.json()["favourites"]
    assert len(favourites) == 1
    assert favourites[0]["biodataId"] == biodata_id
    assert favourites[0]["permanentDivision"] == "Sylhet"
    assert favourites[0]["occupation"] == "Nurse"

    assert (await api_client.get("/favourites", headers=owner)).json()["favourites"] == []

    removed = await api_client.delete(f"/favourites/{biodata_id}", headers=fan)
    assert removed.json() == {"status": "ok", "removed": True}
    removed_again = await api_client.delete(f"/favourites/{biodata_id}", headers=fan)
    assert removed_again.json()["removed"] is False


@pytest.mark.asyncio
async def test_success_stories_are_public_and_newest_first(api_client, make_user) -> None:
    bride = await make_user("bride@x.com")
    groom = await make_user("groom@x.com")
    bride_id = await _biodata(api_client, bride, "Bride")
    groom_id = await _biodata(api_client, groom, "Groom", "Male")

    anonymous = await api_client.post(
        "/success-stories",
        json={"selfBiodataId": bride_id, "partnerBiodataId": groom_id, "story": "Hi"},
    )
    assert anonymous.status_code == 401

    for text in ("We met here", "Married last spring"):
        response = await api_client.post(
            "/success-stories",
            json={"selfBiodataId": bride_id, "partnerBiodataId": groom_id, "story": text, "rating": 5},
            headers=bride,
        )
        assert response.status_code == 201, response.text

    # Force a deterministic ordering regardless of clock resolution
    await get_db()[SUCCESS_STORIES_COLLECTION].update_one({"story": "We met here"}, {"$set": {"createdAt": 1}})

    stories = (await api_client.get("/success-stories")).json()["stories"]
    assert [s["story"] for s in stories] == ["Married last spring", "We met here"]

    bad_rating = await api_client.post(
        "/success-stories",
        json={"selfBiodataId": bride_id, "partnerBiodataId": groom_id, "story": "x", "rating": 9},
        headers=bride,
    )
    assert bad_rating.status_code == 400


@pytest.mark.asyncio
async def test_admin_stats_counts_and_revenue(api_client, make_user) -> None:
    admin = await make_user("admin@x.com", admin=True)
    bride = await make_user("bride@x.com")
    groom = await make_user("groom@x.com")
    seeker = await make_user("seeker@x.com")
    bride_id = await _biodata(api_client, bride, "Bride")
    groom_id = await _biodata(api_client, groom, "Groom", "Male")

    for biodata_id, amount in ((bride_id, 5), (groom_id, 7.5)):
        paid = await api_client.post(
            "/payments",
            json={"biodataId": biodata_id, "amount": amount, "transactionId": f"pi_{biodata_id}"},
            headers=seeker,
        )
        assert paid.status_code == 201, paid.text
    await api_client.post("/premium-requests", json={"biodataId": bride_id}, headers=bride)

    assert (await api_client.get("/admin/stats", headers=seeker)).status_code == 403

    stats = await api_client.get("/admin/stats", headers=admin)
    assert stats.status_code == 200, stats.text
    assert stats.json() == {
        "totalBiodatas": 2,
        "maleBiodatas": 1,
        "femaleBiodatas": 1,
        "premiumBiodatas": 0,
        "totalUsers": 4,
        "totalContactRequests": 2,
        "pendingContactRequests": 2,
        "pendingPremiumRequests": 1,
        "successStories": 0,
        "totalRevenue": 12.5,
    }


@pytest.mark.asyncio
async def test_root_and_health(api_client) -> None:
    assert (await api_client.get("/")).json() == {"status": "matrimony-api-ok"}
    health = await api_client.get("/health/db")
    assert health.json()["mongo"] == "connected"
