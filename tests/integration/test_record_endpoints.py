"""Integration tests for mother, litter and offspring endpoints.

Covers the record-keeping API end to end:
- Mother registration, listing and cascading removal
- Litter recording with derived ids and presence-sensitive updates
- Offspring recording, renames, weaning and deaths
"""

import pytest
from httpx import AsyncClient


async def record_litter(client: AsyncClient, headers: dict, mother_id: str, birth_date: str, **extra) -> dict:
    payload = {"mother_id": mother_id, "birth_date": birth_date, "reported_litter_size": 2}
    payload.update(extra)
    response = await client.post("/api/litters/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def record_offspring(client: AsyncClient, headers: dict, litter_id: str, offspring_id: str, sex: str = "female") -> dict:
    response = await client.post(
        "/api/offspring/",
        json={"litter_id": litter_id, "offspring_id": offspring_id, "sex": sex},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestMotherEndpoints:
    """Test /api/mothers endpoints."""

    @pytest.mark.asyncio
    async def test_add_and_get_mother(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.post(
            "/api/mothers/",
            json={"mother_id": "EWE-102", "notes": "Bought in spring"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["mother_id"] == "EWE-102"
        assert data["notes"] == "Bought in spring"
        assert data["next_litter_sequence"] == 1

        response = await async_client.get("/api/mothers/EWE-102", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["mother_id"] == "EWE-102"

    @pytest.mark.asyncio
    async def test_list_mothers_includes_implicit_registrations(self, async_client: AsyncClient, auth_headers: dict):
        await async_client.post("/api/mothers/", json={"mother_id": "EWE-1"}, headers=auth_headers)
        await record_litter(async_client, auth_headers, "EWE-2", "2024-03-01")

        response = await async_client.get("/api/mothers/", headers=auth_headers)

        assert response.status_code == 200
        assert [m["mother_id"] for m in response.json()] == ["EWE-1", "EWE-2"]

    @pytest.mark.asyncio
    async def test_remove_mother_cascades(self, async_client: AsyncClient, auth_headers: dict):
        litter = await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, litter["litter_id"], "L-1")
        await record_offspring(async_client, auth_headers, litter["litter_id"], "L-2")

        response = await async_client.delete("/api/mothers/EWE-1", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"mother_id": "EWE-1", "litters_removed": 1, "offspring_removed": 2}
        assert (await async_client.get("/api/mothers/EWE-1", headers=auth_headers)).status_code == 404
        assert (await async_client.get("/api/litters/EWE-1-1", headers=auth_headers)).status_code == 404
        assert (await async_client.get("/api/offspring/L-1", headers=auth_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_list_litters_of_mother(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2023-03-01")
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")

        response = await async_client.get("/api/mothers/EWE-1/litters", headers=auth_headers)

        assert response.status_code == 200
        assert [l["litter_id"] for l in response.json()] == ["EWE-1-1", "EWE-1-2"]


class TestLitterEndpoints:
    """Test /api/litters endpoints."""

    @pytest.mark.asyncio
    async def test_record_litter_derives_id(self, async_client: AsyncClient, auth_headers: dict):
        data = await record_litter(
            async_client, auth_headers, "EWE-102", "2024-03-14", father_id="RAM-7"
        )

        assert data["litter_id"] == "EWE-102-1"
        assert data["sequence"] == 1
        assert data["father_id"] == "RAM-7"
        assert data["birth_date"] == "2024-03-14"
        assert data["notes"] == ""

    @pytest.mark.asyncio
    async def test_record_litter_rejects_negative_size(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.post(
            "/api/litters/",
            json={"mother_id": "EWE-1", "birth_date": "2024-03-01", "reported_litter_size": -1},
            headers=auth_headers,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_clears_father_only_when_sent(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01", father_id="RAM-1", notes="n")

        response = await async_client.put(
            "/api/litters/EWE-1-1", json={"notes": "revised"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["father_id"] == "RAM-1"
        assert response.json()["notes"] == "revised"

        response = await async_client.put(
            "/api/litters/EWE-1-1", json={"father_id": None}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["father_id"] is None
        assert response.json()["notes"] == "revised"

    @pytest.mark.asyncio
    async def test_update_mother_is_a_conflict(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")

        response = await async_client.put(
            "/api/litters/EWE-1-1", json={"mother_id": "EWE-2"}, headers=auth_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_delete_litter(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "L-1")

        response = await async_client.delete("/api/litters/EWE-1-1", headers=auth_headers)

        assert response.status_code == 204
        assert (await async_client.get("/api/offspring/L-1", headers=auth_headers)).status_code == 404
        next_litter = await record_litter(async_client, auth_headers, "EWE-1", "2024-09-01")
        assert next_litter["litter_id"] == "EWE-1-2"

    @pytest.mark.asyncio
    async def test_list_offspring_of_litter(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "L-1", "male")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "L-2", "female")

        response = await async_client.get("/api/litters/EWE-1-1/offspring", headers=auth_headers)

        assert response.status_code == 200
        assert [(o["offspring_id"], o["sex"]) for o in response.json()] == [
            ("L-1", "male"),
            ("L-2", "female"),
        ]


class TestOffspringEndpoints:
    """Test /api/offspring endpoints."""

    @pytest.mark.asyncio
    async def test_record_offspring(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")

        data = await record_offspring(async_client, auth_headers, "EWE-1-1", "LAMB-311")

        assert data == {
            "offspring_id": "LAMB-311",
            "litter_id": "EWE-1-1",
            "sex": "female",
            "notes": "",
            "is_alive": True,
            "survived_to_weaning": False,
        }

    @pytest.mark.asyncio
    async def test_record_offspring_in_unknown_litter(self, async_client: AsyncClient, auth_headers: dict):
        response = await async_client.post(
            "/api/offspring/",
            json={"litter_id": "GHOST-1", "offspring_id": "L-1", "sex": "male"},
            headers=auth_headers,
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_weaning_then_death_keeps_weaning(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "L-1")

        response = await async_client.post("/api/offspring/L-1/weaning", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["survived_to_weaning"] is True

        response = await async_client.post("/api/offspring/L-1/death", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["is_alive"] is False
        assert response.json()["survived_to_weaning"] is True

    @pytest.mark.asyncio
    async def test_lifecycle_violations_are_invalid_state(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "L-1")
        await async_client.post("/api/offspring/L-1/death", headers=auth_headers)

        weaning = await async_client.post("/api/offspring/L-1/weaning", headers=auth_headers)
        death = await async_client.post("/api/offspring/L-1/death", headers=auth_headers)

        assert weaning.status_code == 409
        assert weaning.json()["error_code"] == "INVALID_STATE"
        assert death.status_code == 409
        assert death.json()["error_code"] == "INVALID_STATE"

    @pytest.mark.asyncio
    async def test_rename_offspring(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "X")
        await async_client.post("/api/offspring/X/weaning", headers=auth_headers)

        response = await async_client.put(
            "/api/offspring/X", json={"new_offspring_id": "Y"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["offspring_id"] == "Y"
        assert response.json()["survived_to_weaning"] is True
        assert (await async_client.get("/api/offspring/X", headers=auth_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_rename_to_existing_id_conflicts(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "X")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "Y")

        response = await async_client.put(
            "/api/offspring/X", json={"new_offspring_id": "Y"}, headers=auth_headers
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_offspring(self, async_client: AsyncClient, auth_headers: dict):
        await record_litter(async_client, auth_headers, "EWE-1", "2024-03-01")
        await record_offspring(async_client, auth_headers, "EWE-1-1", "X")

        response = await async_client.delete("/api/offspring/X", headers=auth_headers)

        assert response.status_code == 204
        assert (await async_client.get("/api/offspring/X", headers=auth_headers)).status_code == 404
