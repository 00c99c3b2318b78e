"""Unit tests for the Department aggregate."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from tenancy.domain.aggregates import Department
from tenancy.domain.value_objects import (
    DepartmentId,
    DepartmentPlan,
    LinkedTo,
    OrganizationId,
    Unlinked,
)


def _legacy_department(**overrides) -> Department:
    now = datetime.now(UTC)
    values = dict(
        id=DepartmentId.generate(),
        name="Support",
        slug="Legacy_Support",
        org_link=Unlinked(),
        plan=DepartmentPlan.FREE,
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return Department(**values)


class TestCreate:
    def test_creates_linked_department(self):
        organization_id = OrganizationId.generate()

        department = Department.create(
            name="  Marketing  ", slug="marketing", organization_id=organization_id
        )

        assert department.name == "Marketing"
        assert department.org_link == LinkedTo(organization_id=organization_id)
        assert department.organization_id == organization_id
        assert department.plan is DepartmentPlan.FREE

    def test_keeps_requested_plan(self):
        department = Department.create(
            name="Sales",
            slug="sales",
            organization_id=OrganizationId.generate(),
            plan=DepartmentPlan.ENTERPRISE,
        )

        assert department.plan is DepartmentPlan.ENTERPRISE

    @pytest.mark.parametrize("name", ["", "   "])
    def test_rejects_blank_name(self, name):
        with pytest.raises(ValueError, match="Department name is required."):
            Department.create(
                name=name, slug="ops", organization_id=OrganizationId.generate()
            )

    @pytest.mark.parametrize(
        "slug", ["Eng", "eng_team", "eng.team", "x", "x" * 64, "-ops"]
    )
    def test_accepts_any_non_blank_slug_within_column_length(self, slug):
        department = Department.create(
            name="Ops", slug=slug, organization_id=OrganizationId.generate()
        )

        assert department.slug == slug

    def test_trims_slug(self):
        department = Department.create(
            name="Ops", slug="  ops  ", organization_id=OrganizationId.generate()
        )

        assert department.slug == "ops"

    @pytest.mark.parametrize("slug", ["", "   "])
    def test_rejects_blank_slug(self, slug):
        with pytest.raises(ValueError, match="Department slug is required."):
            Department.create(
                name="Ops", slug=slug, organization_id=OrganizationId.generate()
            )

    def test_rejects_slug_longer_than_column(self):
        with pytest.raises(ValueError, match="cannot exceed 64 characters"):
            Department.create(
                name="Ops", slug="x" * 65, organization_id=OrganizationId.generate()
            )


class TestLegacyRows:
    def test_loading_does_not_revalidate_slug(self):
        department = _legacy_department()

        assert department.slug == "Legacy_Support"
        assert department.organization_id is None

    def test_loading_does_not_revalidate_name(self):
        department = _legacy_department(name="")

        assert department.name == ""


class TestRename:
    def test_trims_and_touches(self):
        department = _legacy_department()
        before = department.updated_at

        department.rename("  Customer Support ")

        assert department.name == "Customer Support"
        assert department.updated_at >= before

    def test_rejects_blank(self):
        with pytest.raises(ValueError):
            _legacy_department().rename("  ")


class TestLinkTo:
    def test_links_unlinked_department(self):
        department = _legacy_department()
        organization_id = OrganizationId.generate()

        assert department.link_to(organization_id) is True
        assert department.organization_id == organization_id

    def test_relinking_same_organization_is_a_no_op(self):
        organization_id = OrganizationId.generate()
        department = _legacy_department(
            org_link=LinkedTo(organization_id=organization_id)
        )

        assert department.link_to(organization_id) is False
