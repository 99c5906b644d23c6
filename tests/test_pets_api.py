"""Pet registry endpoints: CRUD, ownership guards, public lookup and view history."""

from datetime import datetime

import pytest

from sqlalchemy.exc import OperationalError

from app.core.exceptions import QRCodeGenerationError
from app.infrastructure.repositories.pet_repository import SQLAlchemyPetRepository
from app.interfaces.deps import get_geolocation_service, get_qr_code_service
from app.main import app


class FakeGeoLocation:

    def __init__(self):
        self.calls = []

    def get_ip_info(self, ip):
        self.calls.append(ip)
        return {
            "country": "Spain",
            "city": "Madrid",
            "region": "Madrid",
            "coordinates": {"latitude": 40.4, "longitude": -3.7},
            "timezone": "Europe/Madrid",
            "isp": "Movistar",
        }


class BrokenGeoLocation:

    def get_ip_info(self, ip):
        raise RuntimeError("geolocation backend down")


class BrokenQRCode:

    def generate_qr_code(self, unique_id, base_url):
        raise QRCodeGenerationError()


@pytest.fixture
def fake_geo():
    geo = FakeGeoLocation()
    app.dependency_overrides[get_geolocation_service] = lambda: geo
    yield geo
    app.dependency_overrides.pop(get_geolocation_service, None)


class TestCreate:

    def test_admin_creates_pet_with_qr(self, client, admin, owner, pet_payload):
        resp = client.post("/api/pets", json={**pet_payload, "ownerId": owner["id"]}, headers=admin["headers"])
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Mascota creada exitosamente"

        pet = body["data"]
        assert len(pet["uniqueId"]) == 10
        assert len(pet["id"]) == 24
        assert pet["ownerId"] == owner["id"]
        assert pet["qrCode"].startswith("data:image/png;base64,")
        assert pet["createdBy"] == "admin"
        assert pet["lastModifiedBy"] == "admin"
        assert pet["viewHistory"] == []
        assert [p["number"] for p in pet["phone"]] == ["+34 600 123 456", "(91) 555-0101"]
        assert pet["phone"][0]["isPrimary"] is True

    def test_owner_defaults_to_creator(self, create_pet, admin):
        assert create_pet()["ownerId"] == admin["id"]

    def test_pet_owner_cannot_create(self, client, owner, pet_payload):
        resp = client.post("/api/pets", json=pet_payload, headers=owner["headers"])
        assert resp.status_code == 403
        assert resp.json()["message"] == "Permisos insuficientes"

    def test_requires_authentication(self, client, pet_payload):
        assert client.post("/api/pets", json=pet_payload).status_code == 401

    def test_guard_runs_before_validation(self, client, owner):
        resp = client.post("/api/pets", json={"name": "x"}, headers=owner["headers"])
        assert resp.status_code == 403
        assert resp.json()["message"] == "Permisos insuficientes"

    def test_anonymous_invalid_body_is_401(self, client):
        resp = client.post("/api/pets", json={})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token de acceso requerido"

    @pytest.mark.parametrize(
        "phone",
        [None, [], [{"number": "not-a-number", "owner": "Ana"}]],
        ids=["missing", "empty", "malformed"],
    )
    def test_rejects_bad_phones(self, client, admin, pet_payload, phone):
        body = {**pet_payload}
        if phone is None:
            del body["phone"]
        else:
            body["phone"] = phone
        resp = client.post("/api/pets", json=body, headers=admin["headers"])
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_unknown_owner_rejected(self, client, admin, pet_payload):
        resp = client.post("/api/pets", json={**pet_payload, "ownerId": "f" * 24}, headers=admin["headers"])
        assert resp.status_code == 400
        assert resp.json()["message"] == "El propietario especificado no existe"

    def test_qr_failure_is_500(self, client, admin, pet_payload):
        app.dependency_overrides[get_qr_code_service] = lambda: BrokenQRCode()
        try:
            resp = client.post("/api/pets", json=pet_payload, headers=admin["headers"])
        finally:
            app.dependency_overrides.pop(get_qr_code_service, None)
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "message": "Error generando código QR", "data": None}


class TestList:

    def test_admin_sees_all_owner_sees_own(self, client, create_pet, admin, owner, other_owner):
        create_pet(owner_id=owner["id"], name="Firulais")
        create_pet(owner_id=other_owner["id"], name="Michi")

        assert len(client.get("/api/pets", headers=admin["headers"]).json()["data"]) == 2
        own = client.get("/api/pets", headers=owner["headers"]).json()["data"]
        assert [p["name"] for p in own] == ["Firulais"]

    def test_my_pets(self, client, create_pet, owner):
        create_pet(owner_id=owner["id"])
        resp = client.get("/api/pets/my-pets", headers=owner["headers"])
        assert len(resp.json()["data"]) == 1

    def test_empty_list_is_success(self, client, owner):
        resp = client.get("/api/pets/my-pets", headers=owner["headers"])
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "No se encontraron mascotas", "data": []}

    def test_by_owner_self_and_admin(self, client, create_pet, admin, owner):
        create_pet(owner_id=owner["id"])
        assert len(client.get(f"/api/pets/owner/{owner['id']}", headers=owner["headers"]).json()["data"]) == 1
        assert len(client.get(f"/api/pets/owner/{owner['id']}", headers=admin["headers"]).json()["data"]) == 1

    def test_by_owner_forbidden_for_others(self, client, owner, other_owner):
        resp = client.get(f"/api/pets/owner/{other_owner['id']}", headers=owner["headers"])
        assert resp.status_code == 403
        assert resp.json()["message"] == "Solo puedes ver tus propias mascotas"


class TestPublicLookup:

    def test_storage_id_and_short_id_resolve_identically(self, client, create_pet):
        pet = create_pet()
        by_id = client.get(f"/api/pets/{pet['id']}").json()["data"]
        by_short = client.get(f"/api/pets/{pet['uniqueId']}").json()["data"]
        assert by_id["id"] == by_short["id"] == pet["id"]

    def test_each_fetch_appends_one_view(self, client, create_pet):
        pet = create_pet()
        for expected in (1, 2, 3):
            data = client.get(f"/api/pets/{pet['uniqueId']}").json()["data"]
            assert len(data["viewHistory"]) == expected

    def test_view_entry_contents(self, client, create_pet, fake_geo):
        pet = create_pet()
        headers = {
            "User-Agent": "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0) Mobile Safari",
        }
        resp = client.get(f"/api/pets/{pet['uniqueId']}?viewedBy=vecino", headers=headers)
        entry = resp.json()["data"]["viewHistory"][0]

        assert fake_geo.calls == ["testclient"]
        assert entry["viewedBy"] == "vecino"
        assert entry["ipAddress"] == "testclient"
        assert entry["deviceUsed"]["type"] == "mobile"
        assert entry["location"]["city"] == "Madrid"
        assert entry["location"]["coordinates"] == {"latitude": 40.4, "longitude": -3.7}

    def test_forwarded_header_from_untrusted_peer_is_ignored(self, client, create_pet, fake_geo):
        pet = create_pet()
        resp = client.get(f"/api/pets/{pet['uniqueId']}", headers={"X-Forwarded-For": "203.0.113.7"})
        assert fake_geo.calls == ["testclient"]
        assert resp.json()["data"]["viewHistory"][0]["ipAddress"] == "testclient"

    def test_viewed_by_defaults_to_user_agent(self, client, create_pet):
        pet = create_pet()
        resp = client.get(f"/api/pets/{pet['uniqueId']}", headers={"User-Agent": "curl/8.0"})
        entry = resp.json()["data"]["viewHistory"][0]
        assert entry["viewedBy"] == "curl/8.0"
        assert entry["location"]["country"] == "unknown"

    def test_geolocation_failure_does_not_fail_read(self, client, create_pet):
        pet = create_pet()
        app.dependency_overrides[get_geolocation_service] = lambda: BrokenGeoLocation()
        try:
            resp = client.get(f"/api/pets/{pet['uniqueId']}")
        finally:
            app.dependency_overrides.pop(get_geolocation_service, None)

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["id"] == pet["id"]
        assert data["viewHistory"][0]["location"]["country"] == "unknown"

    def test_history_write_failure_does_not_fail_read(self, client, create_pet, monkeypatch):
        pet = create_pet()

        def failing_add_view(self, pet, entry):
            raise OperationalError("INSERT INTO pet_view_history", {}, Exception("disk I/O error"))

        monkeypatch.setattr(SQLAlchemyPetRepository, "add_view", failing_add_view)
        resp = client.get(f"/api/pets/{pet['uniqueId']}")

        assert resp.status_code == 200
        assert resp.json()["data"]["name"] == pet["name"]
        assert resp.json()["data"]["viewHistory"] == []

    def test_unknown_pet(self, client):
        resp = client.get("/api/pets/doesnotexist")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Mascota no encontrada", "data": None}


class TestHistory:

    def test_owner_reads_history(self, client, create_pet, owner):
        pet = create_pet(owner_id=owner["id"])
        client.get(f"/api/pets/{pet['uniqueId']}")
        resp = client.get(f"/api/pets/{pet['id']}/history", headers=owner["headers"])
        data = resp.json()["data"]
        assert data["petId"] == pet["id"]
        assert data["uniqueId"] == pet["uniqueId"]
        assert len(data["viewHistory"]) == 1

    def test_other_owner_forbidden(self, client, create_pet, owner, other_owner):
        pet = create_pet(owner_id=owner["id"])
        resp = client.get(f"/api/pets/{pet['uniqueId']}/history", headers=other_owner["headers"])
        assert resp.status_code == 403
        assert resp.json()["message"] == "Solo puedes ver tus propias mascotas"


class TestUpdate:

    def test_owner_updates_own_pet(self, client, create_pet, owner, pet_payload):
        pet = create_pet(owner_id=owner["id"])
        body = {**pet_payload, "name": "Firu", "isLost": True, "phone": [{"number": "600000000", "owner": "Ana"}]}
        resp = client.put(f"/api/pets/{pet['uniqueId']}", json=body, headers=owner["headers"])

        assert resp.status_code == 200
        assert resp.json()["message"] == "Mascota actualizada exitosamente"
        updated = resp.json()["data"]
        assert updated["name"] == "Firu"
        assert updated["isLost"] is True
        assert [p["number"] for p in updated["phone"]] == ["600000000"]
        assert updated["lastModifiedBy"] == "maria"
        assert updated["createdBy"] == "admin"
        assert datetime.fromisoformat(updated["lastModifiedAt"]) > datetime.fromisoformat(pet["lastModifiedAt"])
        assert updated["qrCode"] == pet["qrCode"]

    def test_other_owner_forbidden(self, client, create_pet, owner, other_owner, pet_payload):
        pet = create_pet(owner_id=owner["id"])
        resp = client.put(f"/api/pets/{pet['id']}", json=pet_payload, headers=other_owner["headers"])
        assert resp.status_code == 403
        assert resp.json()["message"] == "Solo puedes editar tus propias mascotas"

    def test_owner_cannot_reassign(self, client, create_pet, owner, other_owner, pet_payload):
        pet = create_pet(owner_id=owner["id"])
        body = {**pet_payload, "ownerId": other_owner["id"]}
        resp = client.put(f"/api/pets/{pet['id']}", json=body, headers=owner["headers"])
        assert resp.json()["data"]["ownerId"] == owner["id"]

    def test_admin_reassigns(self, client, create_pet, admin, owner, other_owner, pet_payload):
        pet = create_pet(owner_id=owner["id"])
        body = {**pet_payload, "ownerId": other_owner["id"]}
        resp = client.put(f"/api/pets/{pet['id']}", json=body, headers=admin["headers"])
        assert resp.json()["data"]["ownerId"] == other_owner["id"]

    def test_unknown_pet(self, client, owner, pet_payload):
        resp = client.put("/api/pets/" + "a" * 24, json=pet_payload, headers=owner["headers"])
        assert resp.status_code == 404

    def test_validation(self, client, create_pet, owner, pet_payload):
        pet = create_pet(owner_id=owner["id"])
        resp = client.put(f"/api/pets/{pet['id']}", json={**pet_payload, "phone": []}, headers=owner["headers"])
        assert resp.status_code == 400


class TestDelete:

    def test_admin_deletes(self, client, create_pet, admin):
        pet = create_pet()
        resp = client.delete(f"/api/pets/{pet['uniqueId']}", headers=admin["headers"])
        assert resp.json() == {"success": True, "message": "Mascota eliminada correctamente", "data": None}
        assert client.get(f"/api/pets/{pet['id']}").status_code == 404

    def test_owner_cannot_delete(self, client, create_pet, owner):
        pet = create_pet(owner_id=owner["id"])
        assert client.delete(f"/api/pets/{pet['id']}", headers=owner["headers"]).status_code == 403

    def test_delete_unknown(self, client, admin):
        assert client.delete("/api/pets/nothere123", headers=admin["headers"]).status_code == 404
