"""Tests for pet registration, ownership rules and active-pet selection."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql

from petcrush.common.exceptions import NotFound
from petcrush.domains.match.models import Like, Match, Message
from petcrush.domains.match.service import match_service
from petcrush.domains.pet import repository as pet_repository_module
from petcrush.domains.pet.models import Pet
from petcrush.domains.pet.service import pet_service
from petcrush.domains.report.models import Report
from tests.conftest import PHOTOS, auth_headers, pet_payload


async def active_ids(session_factory, owner_id):
    async with session_factory() as session:
        result = await session.execute(
            select(Pet.id).where(Pet.owner_id == owner_id, Pet.is_active.is_(True))
        )
        return list(result.scalars())


async def pet_count(session_factory):
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(Pet))).scalar_one()


# ════════════════════════════════════════════════════════════════
# POST /api/pets
# ════════════════════════════════════════════════════════════════

class TestCreatePet:

    @pytest.mark.asyncio
    async def test_create_returns_201_and_first_pet_is_active(self, client, alice):
        response = await client.post("/api/pets", json=pet_payload(), headers=auth_headers(alice))

        assert response.status_code == 201
        body = response.json()
        assert body["ownerId"] == alice.id
        assert body["displayName"] == "Thor"
        assert body["isActive"] is True
        assert body["videoDuration"] == 12

    @pytest.mark.asyncio
    async def test_second_pet_is_not_active(self, client, alice):
        await client.post("/api/pets", json=pet_payload(), headers=auth_headers(alice))
        second = await client.post("/api/pets", json=pet_payload(displayName="Mia"), headers=auth_headers(alice))

        assert second.status_code == 201
        assert second.json()["isActive"] is False

    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        response = await client.post("/api/pets", json=pet_payload())
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_blocked_content_rejected_before_persistence(self, client, session_factory, alice):
        rejected = await client.post(
            "/api/pets",
            json=pet_payload(about="Vendo por R$500, aceito pix"),
            headers=auth_headers(alice),
        )
        assert rejected.status_code == 400
        assert rejected.json() == {
            "message": "Sales content is not allowed.",
            "code": "validation",
            "field": "about",
        }
        assert await pet_count(session_factory) == 0

        accepted = await client.post(
            "/api/pets",
            json=pet_payload(about="Carinhoso e brincalhão."),
            headers=auth_headers(alice),
        )
        assert accepted.status_code == 201
        assert await pet_count(session_factory) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field, value", [
        ("displayName", "Thor vendo"),
        ("healthNotes", "Frete grátis"),
    ])
    async def test_other_text_fields_filtered(self, client, alice, field, value):
        response = await client.post("/api/pets", json=pet_payload(**{field: value}), headers=auth_headers(alice))
        assert response.status_code == 400
        assert response.json()["field"] == field

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides, field", [
        ({"photos": PHOTOS[:2]}, "photos"),
        ({"videoUrl": None, "videoDuration": None}, "videoUrl"),
        ({"videoDuration": 3}, "videoDuration"),
    ])
    async def test_insufficient_media_rejected(self, client, session_factory, alice, overrides, field):
        response = await client.post("/api/pets", json=pet_payload(**overrides), headers=auth_headers(alice))

        assert response.status_code == 400
        assert response.json()["field"] == field
        assert await pet_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_negative_age_rejected(self, client, alice):
        response = await client.post("/api/pets", json=pet_payload(ageMonths=-1), headers=auth_headers(alice))
        assert response.status_code == 400
        assert response.json()["field"] == "ageMonths"

    @pytest.mark.asyncio
    async def test_missing_required_field_rejected(self, client, alice):
        payload = pet_payload()
        del payload["breed"]
        response = await client.post("/api/pets", json=payload, headers=auth_headers(alice))
        assert response.status_code == 400
        assert response.json()["field"] == "breed"


# ════════════════════════════════════════════════════════════════
# GET / PUT / DELETE
# ════════════════════════════════════════════════════════════════

class TestPetCrud:

    @pytest.mark.asyncio
    async def test_get_includes_public_owner(self, client, alice, make_pet):
        pet = await make_pet(alice, display_name="Luna")

        response = await client.get(f"/api/pets/{pet.id}")
        body = response.json()
        assert response.status_code == 200
        assert body["displayName"] == "Luna"
        assert body["owner"]["id"] == alice.id
        assert body["owner"]["displayName"] == "Alice"
        assert "email" not in body["owner"]

    @pytest.mark.asyncio
    async def test_get_unknown_404(self, client):
        response = await client.get("/api/pets/999")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_filters_and_newest_first(self, client, alice, bob, make_pet):
        first = await make_pet(alice, species="Dog")
        await make_pet(bob, species="Cat")
        third = await make_pet(bob, species="Dog", is_donation=True)

        response = await client.get("/api/pets", params={"species": "Dog"})
        assert [p["id"] for p in response.json()] == [third.id, first.id]

        donations = await client.get("/api/pets", params={"species": "Dog", "isDonation": "true"})
        assert [p["id"] for p in donations.json()] == [third.id]

    @pytest.mark.asyncio
    async def test_mine_lists_oldest_first(self, client, alice, bob, make_pet):
        p1 = await make_pet(alice)
        await make_pet(bob)
        p2 = await make_pet(alice)

        response = await client.get("/api/pets/mine", headers=auth_headers(alice))
        assert [p["id"] for p in response.json()] == [p1.id, p2.id]

    @pytest.mark.asyncio
    async def test_update_by_owner(self, client, alice, make_pet):
        pet = await make_pet(alice)

        response = await client.put(
            f"/api/pets/{pet.id}", json={"about": "Updated bio", "trained": True}, headers=auth_headers(alice)
        )
        assert response.status_code == 200
        assert response.json()["about"] == "Updated bio"
        assert response.json()["trained"] is True
        assert response.json()["breed"] == "Mixed"

    @pytest.mark.asyncio
    async def test_update_rules(self, client, alice, bob, make_pet):
        pet = await make_pet(alice)
        headers = auth_headers(alice)

        not_owner = await client.put(f"/api/pets/{pet.id}", json={"about": "x"}, headers=auth_headers(bob))
        assert not_owner.status_code == 403

        unknown = await client.put("/api/pets/999", json={"about": "x"}, headers=headers)
        assert unknown.status_code == 404

        few_photos = await client.put(f"/api/pets/{pet.id}", json={"photos": PHOTOS[:1]}, headers=headers)
        assert few_photos.status_code == 400

        short_video = await client.put(f"/api/pets/{pet.id}", json={"videoDuration": 4.5}, headers=headers)
        assert short_video.status_code == 400

        sales = await client.put(f"/api/pets/{pet.id}", json={"about": "Pagamento via pix"}, headers=headers)
        assert sales.status_code == 400

    @pytest.mark.asyncio
    async def test_new_video_needs_its_duration(self, client, alice, make_pet):
        pet = await make_pet(alice)
        headers = auth_headers(alice)
        new_video = "https://cdn.example.com/media/new.mp4"

        without_duration = await client.put(f"/api/pets/{pet.id}", json={"videoUrl": new_video}, headers=headers)
        assert without_duration.status_code == 400
        assert without_duration.json()["field"] == "videoDuration"

        too_short = await client.put(
            f"/api/pets/{pet.id}", json={"videoUrl": new_video, "videoDuration": 3}, headers=headers
        )
        assert too_short.status_code == 400

        accepted = await client.put(
            f"/api/pets/{pet.id}", json={"videoUrl": new_video, "videoDuration": 8}, headers=headers
        )
        assert accepted.status_code == 200
        assert accepted.json()["videoUrl"] == new_video
        assert accepted.json()["videoDuration"] == 8

        same_video = await client.put(f"/api/pets/{pet.id}", json={"videoUrl": new_video}, headers=headers)
        assert same_video.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_cascades(self, client, session, session_factory, alice, bob, make_pet):
        a = await make_pet(alice)
        b = await make_pet(bob)
        await match_service.like(session, alice.id, a.id, b.id)
        result = await match_service.like(session, bob.id, b.id, a.id)
        await match_service.post_message(session, alice.id, result.match_id, "Olá!")
        session.add(Report(reporter_id=alice.id, target_pet_id=b.id, reason="fake profile"))
        await session.commit()

        forbidden = await client.delete(f"/api/pets/{b.id}", headers=auth_headers(alice))
        assert forbidden.status_code == 403

        response = await client.delete(f"/api/pets/{b.id}", headers=auth_headers(bob))
        assert response.status_code == 204

        async with session_factory() as check:
            for model in (Like, Match, Message, Report):
                count = (await check.execute(select(func.count()).select_from(model))).scalar_one()
                assert count == 0, model.__name__
            assert await check.get(Pet, a.id) is not None


# ════════════════════════════════════════════════════════════════
# Active pet selection
# ════════════════════════════════════════════════════════════════

class TestActivePet:

    @pytest.mark.asyncio
    async def test_no_pets_returns_none(self, session, alice):
        assert await pet_service.get_active_pet(session, alice.id) is None

    @pytest.mark.asyncio
    async def test_promotes_earliest_when_none_flagged(self, session, session_factory, alice, make_pet):
        first = await make_pet(alice)
        await make_pet(alice)

        pet = await pet_service.get_active_pet(session, alice.id)
        await session.commit()

        assert pet.id == first.id
        assert pet.is_active is True
        assert await active_ids(session_factory, alice.id) == [first.id]

    @pytest.mark.asyncio
    async def test_returns_flagged_pet(self, session, alice, make_pet):
        await make_pet(alice)
        flagged = await make_pet(alice, is_active=True)

        pet = await pet_service.get_active_pet(session, alice.id)
        assert pet.id == flagged.id

    @pytest.mark.asyncio
    async def test_switching_keeps_exactly_one_active(self, session, session_factory, alice, make_pet):
        pets = [await make_pet(alice, is_active=(i == 0)) for i in range(3)]

        for target in [pets[2], pets[1], pets[1], pets[0], pets[2]]:
            chosen = await pet_service.set_active_pet(session, alice.id, target.id)
            await session.commit()
            assert chosen.is_active is True
            assert await active_ids(session_factory, alice.id) == [target.id]

    @pytest.mark.asyncio
    async def test_switching_locks_owner_pets_before_clearing(
        self, session, session_factory, alice, bob, make_pet, monkeypatch
    ):
        mine = [await make_pet(alice, is_active=(i == 0)) for i in range(2)]
        await make_pet(bob, is_active=True)
        locks = []
        original_lock_rows = pet_repository_module.lock_rows

        def recording_lock_rows(*criteria):
            stmt = original_lock_rows(*criteria)
            locks.append(str(stmt.compile(dialect=postgresql.dialect())))
            return stmt

        monkeypatch.setattr(pet_repository_module, "lock_rows", recording_lock_rows)

        await pet_service.set_active_pet(session, alice.id, mine[1].id)
        await session.commit()

        assert len(locks) == 1
        assert "owner_id" in locks[0] and locks[0].endswith("FOR UPDATE")
        assert await active_ids(session_factory, alice.id) == [mine[1].id]

    @pytest.mark.asyncio
    async def test_set_active_hides_other_owners_pets(self, session, alice, bob, make_pet):
        await make_pet(alice)
        bobs = await make_pet(bob)

        with pytest.raises(NotFound) as not_owned:
            await pet_service.set_active_pet(session, alice.id, bobs.id)
        with pytest.raises(NotFound) as unknown:
            await pet_service.set_active_pet(session, alice.id, 9999)
        assert not_owned.value.message == unknown.value.message == "Pet not found"

    @pytest.mark.asyncio
    async def test_active_endpoints(self, client, alice, make_pet):
        headers = auth_headers(alice)
        empty = await client.get("/api/pets/mine/active", headers=headers)
        assert empty.status_code == 200
        assert empty.json() is None

        first = await make_pet(alice)
        second = await make_pet(alice)

        promoted = await client.get("/api/pets/mine/active", headers=headers)
        assert promoted.json()["id"] == first.id

        switched = await client.patch("/api/pets/mine/active", json={"petId": second.id}, headers=headers)
        assert switched.status_code == 200
        assert switched.json()["id"] == second.id

        current = await client.get("/api/pets/mine/active", headers=headers)
        assert current.json()["id"] == second.id

        mine = await client.get("/api/pets/mine", headers=headers)
        assert [p["isActive"] for p in mine.json()] == [False, True]
