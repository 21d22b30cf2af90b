from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from niaxtu_admin.api.app import create_app
from niaxtu_admin.settings import load_settings
from niaxtu_admin.storage.memory_store import DocumentStore


def _build_client(store: DocumentStore | None = None) -> TestClient:
    settings = load_settings(env={}, dotenv_path="does-not-exist.env")
    app = create_app(store=store or DocumentStore(), settings=settings)
    return TestClient(app)


class HealthzApiTest(unittest.TestCase):
    def test_healthz(self) -> None:
        client = _build_client()
        response = client.get("/api/v1/healthz")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok", "environment": "development"})


class SectorApiTest(unittest.TestCase):
    def setUp(self) -> None:
        self.client = _build_client()

    def _create_sector(self, name: str = "Santé", **extra) -> dict:
        response = self.client.post("/api/v1/sectors", json={"name": name, **extra})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_create_and_list(self) -> None:
        created = self._create_sector(description="Hôpitaux", color="#EF4444")
        self._create_sector("Éducation")

        self.assertEqual(created["name"], "Santé")
        self.assertEqual(created["color"], "#ef4444")
        self.assertEqual(created["order"], 1)
        self.assertTrue(created["is_active"])

        response = self.client.get("/api/v1/sectors")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total"], 2)
        self.assertEqual([item["name"] for item in body["items"]], ["Santé", "Éducation"])

        detail = self.client.get(f"/api/v1/sectors/{created['id']}")
        self.assertEqual(detail.status_code, 200)
        self.assertEqual(detail.json()["description"], "Hôpitaux")

    def test_duplicate_name_conflict(self) -> None:
        self._create_sector()

        response = self.client.post("/api/v1/sectors", json={"name": "Santé"})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"]["code"], "conflict")

    def test_validation_errors(self) -> None:
        invalid_color = self.client.post("/api/v1/sectors", json={"name": "Santé", "color": "red"})
        missing_name = self.client.post("/api/v1/sectors", json={"description": "x"})
        blank_name = self.client.post("/api/v1/sectors", json={"name": "   "})

        self.assertEqual(invalid_color.status_code, 422)
        self.assertEqual(invalid_color.json()["error"]["code"], "validation_error")
        self.assertEqual(missing_name.status_code, 422)
        self.assertEqual(missing_name.json()["error"]["details"][0]["field"], "name")
        self.assertEqual(blank_name.status_code, 422)
        self.assertEqual(blank_name.json()["error"]["message"], "Le nom est requis.")

    def test_not_found(self) -> None:
        response = self.client.get("/api/v1/sectors/unknown")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["code"], "not_found")

    def test_update_toggle_and_empty_patch(self) -> None:
        created = self._create_sector()

        empty = self.client.patch(f"/api/v1/sectors/{created['id']}", json={})
        self.assertEqual(empty.status_code, 400)
        self.assertEqual(empty.json()["error"]["code"], "bad_request")

        updated = self.client.patch(f"/api/v1/sectors/{created['id']}", json={"name": "Santé publique"})
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["name"], "Santé publique")

        toggled = self.client.post(f"/api/v1/sectors/{created['id']}/toggle")
        self.assertEqual(toggled.status_code, 200)
        self.assertEqual(toggled.json(), {"id": created["id"], "is_active": False})

        inactive = self.client.get("/api/v1/sectors", params={"active": "false"})
        self.assertEqual(inactive.json()["total"], 1)

    def test_delete_blocked_while_sub_sector_exists(self) -> None:
        sector = self._create_sector()
        sub_sector = self.client.post(
            "/api/v1/subsectors",
            json={"sector_id": sector["id"], "name": "Pharmacies"},
        )
        self.assertEqual(sub_sector.status_code, 201)

        blocked = self.client.delete(f"/api/v1/sectors/{sector['id']}")
        self.assertEqual(blocked.status_code, 409)

        nested = self.client.get(f"/api/v1/sectors/{sector['id']}/subsectors")
        self.assertEqual([item["name"] for item in nested.json()["items"]], ["Pharmacies"])

        self.assertEqual(self.client.delete(f"/api/v1/subsectors/{sub_sector.json()['id']}").status_code, 204)
        self.assertEqual(self.client.delete(f"/api/v1/sectors/{sector['id']}").status_code, 204)
        self.assertEqual(self.client.get(f"/api/v1/sectors/{sector['id']}").status_code, 404)

    def test_sub_sector_requires_existing_sector(self) -> None:
        response = self.client.post("/api/v1/subsectors", json={"sector_id": "missing", "name": "Pharmacies"})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["error"]["code"], "validation_error")


class StructureApiTest(unittest.TestCase):
    def setUp(self) -> None:
        self.client = _build_client()
        self.sector_id = self.client.post("/api/v1/sectors", json={"name": "Santé"}).json()["id"]
        for name, city in (("Hôpital Principal", "Dakar"), ("Hôpital Fann", "Dakar"), ("Centre de santé", "Thiès")):
            response = self.client.post(
                "/api/v1/structures",
                json={"sector_id": self.sector_id, "name": name, "city": city},
            )
            self.assertEqual(response.status_code, 201, response.text)

    def test_filters_search_and_paging(self) -> None:
        in_dakar = self.client.get("/api/v1/structures", params={"city": "Dakar"}).json()
        self.assertEqual(in_dakar["total"], 2)

        search = self.client.get("/api/v1/structures", params={"q": "hôpital", "limit": 1, "offset": 1}).json()
        self.assertEqual(search["total"], 2)
        self.assertEqual([item["name"] for item in search["items"]], ["Hôpital Principal"])

        by_sector = self.client.get("/api/v1/structures", params={"sector_id": self.sector_id}).json()
        self.assertEqual(by_sector["total"], 3)

    def test_update_location(self) -> None:
        structure = self.client.get("/api/v1/structures", params={"city": "Thiès"}).json()["items"][0]

        response = self.client.patch(
            f"/api/v1/structures/{structure['id']}",
            json={"city": "Mbour", "address": "Route de Saly"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["city"], "Mbour")
        self.assertEqual(response.json()["address"], "Route de Saly")

    def test_clear_sub_sector(self) -> None:
        sub_sector_id = self.client.post(
            "/api/v1/subsectors",
            json={"sector_id": self.sector_id, "name": "Hôpitaux"},
        ).json()["id"]
        structure = self.client.get("/api/v1/structures", params={"city": "Thiès"}).json()["items"][0]

        attached = self.client.patch(f"/api/v1/structures/{structure['id']}", json={"sub_sector_id": sub_sector_id})
        cleared = self.client.patch(f"/api/v1/structures/{structure['id']}", json={"sub_sector_id": ""})

        self.assertEqual(attached.json()["sub_sector_id"], sub_sector_id)
        self.assertEqual(cleared.status_code, 200)
        self.assertIsNone(cleared.json()["sub_sector_id"])


class TypeApiTest(unittest.TestCase):
    def setUp(self) -> None:
        self.client = _build_client()

    def test_complaint_types(self) -> None:
        created = self.client.post(
            "/api/v1/types/complaints",
            json={"name": "Corruption", "severity": "critique", "auto_assignment": True},
        )
        self.client.post("/api/v1/types/complaints", json={"name": "Retard"})

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["severity"], "critique")

        critical = self.client.get("/api/v1/types/complaints", params={"severity": "critique"}).json()
        self.assertEqual([item["name"] for item in critical["items"]], ["Corruption"])

        invalid = self.client.get("/api/v1/types/complaints", params={"severity": "extreme"})
        self.assertEqual(invalid.status_code, 422)

        stats = self.client.get(f"/api/v1/types/complaints/{created.json()['id']}/statistics")
        self.assertEqual(stats.status_code, 200)
        self.assertEqual(stats.json()["total"], 0)

    def test_target_types(self) -> None:
        created = self.client.post(
            "/api/v1/types/targets",
            json={"name": "Personnel", "category": "personne", "examples": ["Médecin", " "]},
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["examples"], ["Médecin"])

        type_id = created.json()["id"]
        toggled = self.client.post(f"/api/v1/types/targets/{type_id}/toggle")
        self.assertFalse(toggled.json()["is_active"])

        self.assertEqual(self.client.delete(f"/api/v1/types/targets/{type_id}").status_code, 204)
        self.assertEqual(self.client.get("/api/v1/types/targets").json()["total"], 0)


if __name__ == "__main__":
    unittest.main()
