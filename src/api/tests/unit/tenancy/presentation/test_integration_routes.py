"""Unit tests for integration HTTP routes."""

from __future__ import annotations

from fastapi import status

from tenancy.domain.aggregates import Department

GMAIL_CONFIG = {
    "client_id": "client.apps.googleusercontent.com",
    "client_secret": "hunter2",
    "redirect_uri": "https://api.example.com/oauth/gmail/callback",
}


def _gmail_url(organization) -> str:
    return f"/tenancy/organizations/{organization.id}/integrations/gmail"


class TestConfigureGmail:
    def test_create_then_update(self, world, client, organization, owner):
        world.act_as(owner)

        created = client.put(_gmail_url(organization), json=GMAIL_CONFIG)
        updated = client.put(
            _gmail_url(organization), json={**GMAIL_CONFIG, "name": "Inbox"}
        )

        assert created.status_code == status.HTTP_200_OK
        assert created.json()["created"] is True
        assert updated.json() == {
            "integration_id": created.json()["integration_id"],
            "created": False,
        }

    def test_member_forbidden(self, world, client, organization, member):
        world.act_as(member)

        response = client.put(_gmail_url(organization), json=GMAIL_CONFIG)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_blank_secret(self, world, client, organization, owner):
        world.act_as(owner)

        response = client.put(
            _gmail_url(organization), json={**GMAIL_CONFIG, "client_secret": " "}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_foreign_department(self, world, client, organization, owner):
        other = world.store.add_organization("Globex")
        foreign = world.store.add_department(
            Department.create(name="Sales", slug="sales", organization_id=other.id)
        )
        world.act_as(owner)

        response = client.put(
            _gmail_url(organization),
            json={**GMAIL_CONFIG, "department_id": foreign.id.value},
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_malformed_department_id(self, world, client, organization, owner):
        world.act_as(owner)

        response = client.put(
            _gmail_url(organization), json={**GMAIL_CONFIG, "department_id": "nope"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestListIntegrations:
    def test_secrets_are_masked(self, world, client, organization, owner, member):
        world.act_as(owner)
        client.put(_gmail_url(organization), json=GMAIL_CONFIG)
        world.act_as(member)

        response = client.get(f"/tenancy/organizations/{organization.id}/integrations")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["count"] == 1
        gmail = body["integrations"][0]
        assert gmail["type"] == "gmail"
        assert gmail["connected"] is False
        assert gmail["config"]["clientSecret"] == "***"
        assert gmail["config"]["clientId"] == GMAIL_CONFIG["client_id"]
        assert "hunter2" not in response.text

    def test_outsider_forbidden(self, world, client, organization, outsider):
        world.act_as(outsider)

        response = client.get(f"/tenancy/organizations/{organization.id}/integrations")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestDisconnectGmail:
    def test_disconnect(self, world, client, organization, owner):
        world.act_as(owner)
        client.put(_gmail_url(organization), json=GMAIL_CONFIG)

        response = client.delete(_gmail_url(organization))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"disconnected": True}

    def test_disconnect_when_absent(self, world, client, organization, owner):
        world.act_as(owner)

        response = client.delete(_gmail_url(organization))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"disconnected": False}


class TestDepartmentIntegration:
    def test_resolves_organization_record(self, world, client, organization, owner):
        department = world.store.add_department(
            Department.create(
                name="Support", slug="support", organization_id=organization.id
            )
        )
        world.act_as(owner)
        client.put(_gmail_url(organization), json=GMAIL_CONFIG)

        response = client.get(
            f"/tenancy/departments/{department.id}/integrations/gmail"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["config"]["clientSecret"] == "***"

    def test_not_configured(self, world, client, organization, member):
        department = world.store.add_department(
            Department.create(
                name="Support", slug="support", organization_id=organization.id
            )
        )
        world.act_as(member)

        response = client.get(
            f"/tenancy/departments/{department.id}/integrations/notion"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Notion is not configured."

    def test_unknown_type(self, world, client, organization, member):
        department = world.store.add_department(
            Department.create(
                name="Support", slug="support", organization_id=organization.id
            )
        )
        world.act_as(member)

        response = client.get(
            f"/tenancy/departments/{department.id}/integrations/fax"
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
