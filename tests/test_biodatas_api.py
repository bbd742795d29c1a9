from __future__ import annotations

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from conftest import auth_headers
from matrimony.db import get_db
from matrimony.db.collections import BIODATAS_COLLECTION
from matrimony.repositories.counter import CounterRepository


def _profile(name: str, age: int, biodata_type: str = "Female", **extra) -> dict:
    return {"name": name, "age": age, "biodataType": biodata_type, **extra}


@pytest.mark.asyncio
async def test_ids_are_allocated_sequentially_and_never_reused(api_client, make_user) -> None:
    first_headers = await make_user("a@x.com")
    response = await api_client.post("/biodatas", json=_profile("Asha", 27), headers=first_headers)
    assert response.status_code == 201, response.text
    payload = response.json()
    assert payload["biodataId"] == 1
    assert payload["email"] == "a@x.com"
    assert payload["biodataType"] == "Female"
    assert payload["isPremium"] is False

    second_headers = await make_user("b@x.com")
    response = await api_client.post("/biodatas", json=_profile("Bina", 29), headers=second_headers)
    assert response.status_code == 201, response.text
    assert response.json()["biodataId"] == 2

    deleted = await api_client.delete("/biodatas/1", headers=first_headers)
    assert deleted.status_code == 200, deleted.text
    assert (await api_client.get("/biodatas/1")).status_code == 404

    response = await api_client.post("/biodatas", json=_profile("Asha", 27), headers=first_headers)
    assert response.status_code == 201, response.text
    assert response.json()["biodataId"] == 3


@pytest.mark.asyncio
async def test_search_endpoint_paginates_filtered_results(api_client, make_user) -> None:
    created = []
    for index in range(12):
        headers = await make_user(f"m{index}@x.com")
        body = _profile(f"Groom {index}", 20 + index // 2, "male")
        response = await api_client.post("/biodatas", json=body, headers=headers)
        assert response.status_code == 201, response.text
        created.append(response.json())

    expected = sorted(created, key=lambda doc: (doc["age"], doc["biodataId"]))

    response = await api_client.get(
        "/biodatas",
        params={"gender": "male", "minAge": 20, "maxAge": 25, "page": 2, "limit": 5},
    )
    assert response.status_code == 200, response.text
    page = response.json()
    assert page["total"] == 12
    assert page["page"] == 2
    assert page["limit"] == 5
    assert [doc["biodataId"] for doc in page["items"]] == [doc["biodataId"] for doc in expected[5:10]]


@pytest.mark.asyncio
async def test_search_ignores_malformed_numbers(api_client, make_user) -> None:
    headers = await make_user("solo@x.com")
    await api_client.post("/biodatas", json=_profile("Solo", 33), headers=headers)

    response = await api_client.get("/biodatas", params={"minAge": "abc", "limit": "-1"})
    assert response.status_code == 200, response.text
    page = response.json()
    assert page["total"] == 1
    assert len(page["items"]) == 1


@pytest.mark.asyncio
async def test_token_is_required_and_verified(api_client) -> None:
    missing = await api_client.post("/biodatas", json=_profile("X", 30))
    assert missing.status_code == 401
    assert missing.json()["message"]

    invalid = await api_client.post(
        "/biodatas",
        json=_profile("X", 30),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert invalid.status_code == 403


@pytest.mark.asyncio
async def test_issued_token_authenticates(api_client) -> None:
    token_resp = await api_client.post("/jwt", json={"email": "Token@X.com"})
    assert token_resp.status_code == 200, token_resp.text
    headers = {"Authorization": f"Bearer {token_resp.json()['token']}"}

    response = await api_client.post("/biodatas", json=_profile("Tara", 26), headers=headers)
    assert response.status_code == 201, response.text
    assert response.json()["email"] == "token@x.com"


@pytest.mark.asyncio
async def test_one_biodata_per_account(api_client, make_user) -> None:
    headers = await make_user("dup@x.com")
    assert (await api_client.post("/biodatas", json=_profile("One", 25), headers=headers)).status_code == 201
    again = await api_client.post("/biodatas", json=_profile("Two", 25), headers=headers)
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_create_validates_payload(api_client, make_user) -> None:
    headers = await make_user("bad@x.com")
    response = await api_client.post(
        "/biodatas",
        json={"name": "Young", "age": 12, "biodataType": "Female"},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "invalid request"

    response = await api_client.post(
        "/biodatas",
        json={"name": "Nobody", "age": 30, "biodataType": "robot"},
        headers=headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_only_owner_or_admin_may_update_or_delete(api_client, make_user) -> None:
    owner = await make_user("owner@x.com")
    stranger = await make_user("stranger@x.com")
    admin = await make_user("admin@x.com", admin=True)

    created = await api_client.post("/biodatas", json=_profile("Owner", 31), headers=owner)
    biodata_id = created.json()["biodataId"]

    forbidden = await api_client.put(f"/biodatas/{biodata_id}", json={"occupation": "Pilot"}, headers=stranger)
    assert forbidden.status_code == 403

    updated = await api_client.put(
        f"/biodatas/{biodata_id}",
        json={"occupation": "Engineer", "biodataId": 99, "isPremium": True},
        headers=owner,
    )
    assert updated.status_code == 200, updated.text
    body = updated.json()
    assert body["occupation"] == "Engineer"
    assert body["biodataId"] == biodata_id
    assert body["isPremium"] is False

    by_admin = await api_client.put(f"/biodatas/{biodata_id}", json={"race": "Fair"}, headers=admin)
    assert by_admin.status_code == 200
    assert by_admin.json()["race"] == "Fair"

    assert (await api_client.delete(f"/biodatas/{biodata_id}", headers=stranger)).status_code == 403
    assert (await api_client.delete(f"/biodatas/{biodata_id}", headers=admin)).status_code == 200
    assert (await api_client.delete(f"/biodatas/{biodata_id}", headers=admin)).status_code == 404


@pytest.mark.asyncio
async def test_save_by_email_creates_then_updates(api_client, make_user) -> None:
    headers = await make_user("upsert@x.com")

    created = await api_client.put(
        "/biodatas/by-email/upsert@x.com",
        json=_profile("Mina", 24, permanentDivision="Dhaka"),
        headers=headers,
    )
    assert created.status_code == 201, created.text
    assert created.json()["message"] == "Biodata created"
    biodata_id = created.json()["data"]["biodataId"]

    updated = await api_client.put(
        "/biodatas/by-email/upsert@x.com",
        json={"occupation": "Banker"},
        headers=headers,
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["message"] == "Biodata updated"
    assert updated.json()["data"]["biodataId"] == biodata_id

    fetched = await api_client.get("/biodatas/by-email/upsert@x.com")
    assert fetched.json()["occupation"] == "Banker"

    mine = await api_client.get("/biodatas/mine", headers=headers)
    assert mine.json()["biodataId"] == biodata_id

    incomplete = await api_client.put(
        "/biodatas/by-email/other@x.com",
        json={"occupation": "Banker"},
        headers=auth_headers("other@x.com"),
    )
    assert incomplete.status_code == 400


@pytest.mark.asyncio
async def test_public_reads_hide_contact_details(api_client, make_user) -> None:
    headers = await make_user("private@x.com")
    created = await api_client.post(
        "/biodatas",
        json=_profile("Private", 28, mobileNumber="+8801700000000"),
        headers=headers,
    )
    assert created.status_code == 201, created.text
    biodata_id = created.json()["biodataId"]
    assert created.json()["mobileNumber"] == "+8801700000000"

    search = await api_client.get("/biodatas")
    one = await api_client.get(f"/biodatas/{biodata_id}")
    by_email = await api_client.get("/biodatas/by-email/private@x.com")
    for public in (search.json()["items"][0], one.json(), by_email.json()):
        assert public["biodataId"] == biodata_id
        assert "mobileNumber" not in public
        assert "email" not in public

    mine = await api_client.get("/biodatas/mine", headers=headers)
    assert mine.json()["mobileNumber"] == "+8801700000000"
    assert mine.json()["email"] == "private@x.com"


@pytest.mark.asyncio
async def test_owner_can_clear_optional_fields(api_client, make_user) -> None:
    headers = await make_user("clear@x.com")
    created = await api_client.post(
        "/biodatas",
        json=_profile("Clear", 30, occupation="Pilot", race="Fair"),
        headers=headers,
    )
    biodata_id = created.json()["biodataId"]

    updated = await api_client.put(
        f"/biodatas/{biodata_id}",
        json={"occupation": None, "race": "  ", "name": ""},
        headers=headers,
    )
    assert updated.status_code == 200, updated.text
    body = updated.json()
    assert body.get("occupation") is None
    assert body.get("race") is None
    assert body["name"] == "Clear"

    stored = await get_db()[BIODATAS_COLLECTION].find_one({"biodataId": biodata_id})
    assert "occupation" not in stored
    assert "race" not in stored


@pytest.mark.asyncio
async def test_allocator_failure_aborts_creation(api_client, make_user, monkeypatch) -> None:
    headers = await make_user("fail@x.com")

    async def _unavailable(self, sequence: str) -> int:
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(CounterRepository, "next_value", _unavailable)

    response = await api_client.post("/biodatas", json=_profile("Lost", 28), headers=headers)
    assert response.status_code == 500
    assert response.json() == {"message": "storage unavailable"}
    assert await get_db()[BIODATAS_COLLECTION].count_documents({}) == 0
