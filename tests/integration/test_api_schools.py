"""Tests for school API endpoints."""

import pytest
from fastapi.testclient import TestClient


def create_school(client: TestClient, name: str = "Kirkwood", domain: str = "kirkwood.edu"):
    return client.post("/v1/schools", json={"name": name, "domain": domain})


@pytest.mark.integration
class TestSchoolsAPI:
    """Test cases for school API endpoints."""

    def test_create_school_success(self, client: TestClient):
        response = create_school(client, domain=" Kirkwood.EDU ")

        assert response.status_code == 201
        data = response.json()
        assert data["domain"] == "kirkwood.edu"
        assert data["status"] == "ACTIVE"

    def test_create_school_blank_fields(self, client: TestClient):
        response = client.post("/v1/schools", json={"name": "", "domain": ""})

        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"name", "domain"}

    def test_duplicate_domain_conflict(self, client: TestClient):
        assert create_school(client).status_code == 201

        response = create_school(client, name="Kirkwood Again")

        assert response.status_code == 409
        problem = response.json()
        assert problem["title"] == "Duplicate Domain"
        assert "kirkwood.edu" in problem["detail"]

    def test_deleted_domain_can_be_registered_again(self, client: TestClient):
        school = create_school(client).json()
        assert client.delete(f"/v1/schools/{school['id']}").status_code == 204

        response = create_school(client, name="Kirkwood CC")

        assert response.status_code == 201
        assert response.json()["id"] != school["id"]

    def test_get_school_with_locations(self, client: TestClient):
        school = create_school(client).json()
        added = client.post(f"/v1/schools/{school['id']}/locations", json={"name": "Linn Hall"})
        assert added.status_code == 201

        response = client.get(f"/v1/schools/{school['id']}")

        assert response.status_code == 200
        data = response.json()
        assert [loc["name"] for loc in data["locations"]] == ["Linn Hall"]
        assert data["locations"][0]["status"] == "ACTIVE"

    def test_get_missing_school(self, client: TestClient):
        response = client.get("/v1/schools/404")

        assert response.status_code == 404
        assert response.json()["detail"] == "School with ID 404 does not exist"

    def test_delete_school_hides_it(self, client: TestClient):
        school = create_school(client).json()

        assert client.delete(f"/v1/schools/{school['id']}").status_code == 204
        assert client.delete(f"/v1/schools/{school['id']}").status_code == 204
        assert client.get(f"/v1/schools/{school['id']}").status_code == 404
        assert client.get("/v1/schools").json()["schools"] == []

    def test_list_schools(self, client: TestClient):
        create_school(client, name="Kirkwood", domain="kirkwood.edu")
        create_school(client, name="Coe College", domain="coe.edu")

        response = client.get("/v1/schools")

        assert response.status_code == 200
        data = response.json()
        assert [s["name"] for s in data["schools"]] == ["Coe College", "Kirkwood"]
        assert data["total_items"] == 2

    def test_list_schools_zero_page_size(self, client: TestClient):
        response = client.get("/v1/schools", params={"page_size": 0})

        assert response.status_code == 422
        assert "page_size" in response.json()["errors"]


@pytest.mark.integration
class TestSchoolMatchAPI:

    def test_match_subdomain(self, client: TestClient):
        school = create_school(client).json()

        response = client.get("/v1/schools/match", params={"email": "alex@student.kirkwood.edu"})

        assert response.status_code == 200
        data = response.json()
        assert data["school"]["id"] == school["id"]
        assert data["redirect"] == "/schools/kirkwood"

    def test_no_match(self, client: TestClient):
        response = client.get("/v1/schools/match", params={"email": "alex@gmail.com"})

        assert response.status_code == 200
        assert response.json() == {"school": None, "redirect": "/"}

    def test_invalid_email(self, client: TestClient):
        response = client.get("/v1/schools/match", params={"email": "no-at-sign"})

        assert response.status_code == 422
        assert response.json()["title"] == "Invalid Email"

    def test_missing_email_parameter(self, client: TestClient):
        response = client.get("/v1/schools/match")

        assert response.status_code == 422
