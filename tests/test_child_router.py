"""Tests for the child CRUD router through the employees of a company."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from rest_commons.models.employee import Employee


def employees_url(company_id: str) -> str:
    return f"/api/v1/companies/{company_id}/employees"


class TestChildList:
    def test_only_own_children_listed(self, client: TestClient, company_factory, employee_factory) -> None:
        acme = company_factory(email="acme@company.org")
        other = company_factory(email="other@company.org")
        employee_factory(acme, first_name="Ada", last_name="Lovelace")
        employee_factory(acme, first_name="Alan", last_name="Turing")
        employee_factory(other, first_name="Grace", last_name="Hopper")

        body = client.get(employees_url(acme.id)).json()

        assert body["totalElements"] == 2
        # default sort: last name, first name
        assert [e["last_name"] for e in body["content"]] == ["Lovelace", "Turing"]

    def test_unknown_parent(self, client: TestClient) -> None:
        response = client.get(employees_url("notexisting"))
        assert response.status_code == 404
        assert response.json()["message"] == "Company not found"


class TestChildGet:
    def test_cross_parent_lookup_is_not_found(self, client: TestClient, company_factory, employee_factory) -> None:
        acme = company_factory(email="acme@company.org")
        other = company_factory(email="other@company.org")
        employee = employee_factory(acme)

        assert client.get(f"{employees_url(acme.id)}/{employee.id}").status_code == 200
        response = client.get(f"{employees_url(other.id)}/{employee.id}")
        assert response.status_code == 404
        assert response.json()["message"] == "Employee not found"


class TestChildCreate:
    def test_create_sets_parent(self, client: TestClient, company_factory, db_session: Session) -> None:
        acme = company_factory()

        response = client.post(employees_url(acme.id), json={"first_name": "Ada", "last_name": "Lovelace"})

        assert response.status_code == 201
        data = response.json()
        assert data["company_id"] == acme.id
        assert db_session.get(Employee, data["id"]).company_id == acme.id

    def test_create_for_missing_parent(self, client: TestClient) -> None:
        response = client.post(employees_url("notexisting"), json={"first_name": "Ada", "last_name": "Lovelace"})
        assert response.status_code == 404

    def test_create_invalid(self, client: TestClient, company_factory) -> None:
        acme = company_factory()
        response = client.post(employees_url(acme.id), json={"first_name": ""})
        assert response.status_code == 400
        assert set(response.json()["fields"]) == {"first_name", "last_name"}

    def test_create_malformed_email(self, client: TestClient, company_factory) -> None:
        acme = company_factory()
        response = client.post(
            employees_url(acme.id),
            json={"first_name": "Ada", "last_name": "Lovelace", "email": "a..b@company..org"},
        )
        assert response.status_code == 400
        assert list(response.json()["fields"]) == ["email"]


class TestChildUpdateDelete:
    def test_update(self, client: TestClient, company_factory, employee_factory) -> None:
        acme = company_factory()
        employee = employee_factory(acme)
        payload = {"first_name": "Augusta", "last_name": "King", "email": "ada@company.org"}

        response = client.put(f"{employees_url(acme.id)}/{employee.id}", json=payload)

        assert response.status_code == 200
        assert response.json() == {"id": employee.id, "company_id": acme.id, **payload}

    def test_update_through_other_parent(self, client: TestClient, company_factory, employee_factory) -> None:
        acme = company_factory(email="acme@company.org")
        other = company_factory(email="other@company.org")
        employee = employee_factory(acme)

        response = client.put(
            f"{employees_url(other.id)}/{employee.id}",
            json={"first_name": "X", "last_name": "Y"},
        )
        assert response.status_code == 404

    def test_delete(self, client: TestClient, company_factory, employee_factory, db_session: Session) -> None:
        acme = company_factory()
        employee = employee_factory(acme)
        employee_id = employee.id

        assert client.delete(f"{employees_url(acme.id)}/{employee_id}").status_code == 204
        assert db_session.get(Employee, employee_id) is None

    def test_delete_through_other_parent(
        self, client: TestClient, company_factory, employee_factory, db_session: Session
    ) -> None:
        acme = company_factory(email="acme@company.org")
        other = company_factory(email="other@company.org")
        employee = employee_factory(acme)

        assert client.delete(f"{employees_url(other.id)}/{employee.id}").status_code == 404
        assert db_session.get(Employee, employee.id) is not None
