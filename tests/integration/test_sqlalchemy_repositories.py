"""Integration tests for the SQLAlchemy repositories on a migrated SQLite database."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import text

from patriot_thanks.core.errors import DuplicateDomainError, NotFoundError
from patriot_thanks.db.models import Business, School
from patriot_thanks.services.business_service import BusinessService
from patriot_thanks.services.school_service import SchoolService

TODAY = date(2025, 6, 15)


@pytest.mark.integration
class TestSoftDelete:
    """Soft-deleted rows stay in the table but disappear from every read."""

    async def test_mark_deleted_hides_business(self, sql_repos, reference_data, db_session):
        business = await sql_repos.business.create(
            name="Joe's Diner", business_type_id=reference_data["restaurant"]
        )

        assert await sql_repos.business.mark_deleted(business.id) is True
        await sql_repos.business.commit()

        assert await sql_repos.business.get_by_id(business.id) is None
        assert await sql_repos.business.list_all() == []
        assert await sql_repos.business.count() == 0

        row = db_session.execute(
            text("SELECT deleted_at FROM businesses WHERE id = :id"), {"id": business.id}
        ).one()
        assert row.deleted_at is not None

    async def test_mark_deleted_is_idempotent(self, sql_repos, reference_data, db_session):
        business = await sql_repos.business.create(
            name="Joe's Diner", business_type_id=reference_data["restaurant"]
        )
        await sql_repos.business.mark_deleted(business.id)
        await sql_repos.business.commit()
        first = db_session.execute(
            text("SELECT deleted_at FROM businesses WHERE id = :id"), {"id": business.id}
        ).scalar()

        assert await sql_repos.business.mark_deleted(business.id) is False
        await sql_repos.business.commit()

        second = db_session.execute(
            text("SELECT deleted_at FROM businesses WHERE id = :id"), {"id": business.id}
        ).scalar()
        assert first == second

    async def test_mark_deleted_unknown_id(self, sql_repos):
        assert await sql_repos.business.mark_deleted(12345) is False

    async def test_list_page_counts_live_rows_only(self, sql_repos, reference_data):
        ids = []
        for name in ["Charlie", "Alpha", "Bravo"]:
            business = await sql_repos.business.create(
                name=name, business_type_id=reference_data["retail"]
            )
            ids.append(business.id)
        await sql_repos.business.mark_deleted(ids[1])
        await sql_repos.business.commit()

        page = await sql_repos.business.list_page(offset=0, limit=10)

        assert [b.name for b in page] == ["Bravo", "Charlie"]
        assert await sql_repos.business.count() == 2


@pytest.mark.integration
class TestIncentiveQueries:

    async def test_active_filter_and_eager_types(self, sql_repos, reference_data):
        business = await sql_repos.business.create(
            name="Joe's Diner", business_type_id=reference_data["restaurant"]
        )
        types = await sql_repos.incentive_type.get_by_ids(
            [reference_data["active_duty"], reference_data["veteran"]]
        )
        active = await sql_repos.incentive.create(
            business_id=business.id,
            title="Veteran Discount",
            description="10% off",
            incentive_types=types,
            discount_percentage=Decimal("10.00"),
        )
        await sql_repos.incentive.create(
            business_id=business.id, title="Old", description="d", is_active=False
        )
        deleted = await sql_repos.incentive.create(
            business_id=business.id, title="Deleted", description="d"
        )
        await sql_repos.incentive.mark_deleted(deleted.id)
        await sql_repos.incentive.commit()

        found = await sql_repos.incentive.get_by_business_and_active(business.id, True)

        assert [i.id for i in found] == [active.id]
        assert [t.name for t in found[0].incentive_types] == ["Veteran", "Active Duty"]
        assert found[0].discount_percentage == Decimal("10.00")

    async def test_inactive_query(self, sql_repos, reference_data):
        business = await sql_repos.business.create(
            name="Joe's Diner", business_type_id=reference_data["restaurant"]
        )
        inactive = await sql_repos.incentive.create(
            business_id=business.id, title="Old", description="d", is_active=False
        )

        found = await sql_repos.incentive.get_by_business_and_active(business.id, False)

        assert [i.id for i in found] == [inactive.id]


@pytest.mark.integration
class TestSchoolRepository:

    async def test_get_by_domain_is_exact(self, sql_repos):
        school = await sql_repos.school.create(name="Kirkwood", domain="kirkwood.edu")

        assert (await sql_repos.school.get_by_domain("kirkwood.edu")).id == school.id
        assert await sql_repos.school.get_by_domain("student.kirkwood.edu") is None
        assert await sql_repos.school.get_by_domain("wood.edu") is None

    async def test_duplicate_live_domain(self, sql_repos):
        await sql_repos.school.create(name="Kirkwood", domain="kirkwood.edu")

        with pytest.raises(DuplicateDomainError):
            await sql_repos.school.create(name="Other", domain="kirkwood.edu")

    async def test_domain_of_deleted_school_is_reusable(self, sql_repos):
        old = await sql_repos.school.create(name="Kirkwood", domain="kirkwood.edu")
        await sql_repos.school.mark_deleted(old.id)
        await sql_repos.school.commit()

        new = await sql_repos.school.create(name="Kirkwood CC", domain="kirkwood.edu")

        assert new.id != old.id
        assert (await sql_repos.school.get_by_domain("kirkwood.edu")).id == new.id

    async def test_deleted_school_is_not_resolved(self, sql_repos):
        school = await sql_repos.school.create(name="Kirkwood", domain="kirkwood.edu")
        await sql_repos.school.mark_deleted(school.id)
        await sql_repos.school.commit()

        assert await sql_repos.school.get_by_domain("kirkwood.edu") is None


@pytest.mark.integration
class TestServicesOverSQLAlchemy:
    """The services behave the same over the real database."""

    async def test_business_detail_round_trip(self, sql_repos, reference_data):
        service = BusinessService(sql_repos, today=lambda: TODAY)
        business = await service.create_business(
            {"name": "Joe's Diner", "business_type_id": reference_data["restaurant"]}
        )
        await service.add_location(business.id, {
            "location_name": "Main",
            "is_primary": True,
            "address": {
                "street_address": "123 Main St",
                "city": "Cedar Rapids",
                "state_id": reference_data["iowa"],
                "zip_code": "52401",
            },
        })
        await service.add_incentive(business.id, {
            "title": "Veteran Discount",
            "description": "15% off",
            "discount_percentage": Decimal("15"),
            "end_date": date(2025, 12, 31),
            "incentive_type_ids": [reference_data["veteran"]],
        })

        detail = await service.get_business_with_active_incentives(business.id)

        assert detail.business_type.name == "Restaurant"
        assert detail.locations[0].address.full_address == "123 Main St, Cedar Rapids, IA 52401"
        summary = detail.incentives[0]
        assert summary.formatted_discount == "15%"
        assert summary.validity_display == "Valid until Dec 31, 2025"
        assert summary.currently_valid is True
        assert [t.name for t in summary.incentive_types] == ["Veteran"]

    async def test_delete_business_cascades(self, sql_repos, reference_data, db_session):
        service = BusinessService(sql_repos, today=lambda: TODAY)
        business = await service.create_business(
            {"name": "Joe's Diner", "business_type_id": reference_data["restaurant"]}
        )
        location = await service.add_location(business.id, {"location_name": "Main"})
        incentive = await service.add_incentive(
            business.id, {"title": "t", "description": "d"}
        )

        assert await service.delete_business(business.id) is True

        assert await sql_repos.business_location.get_by_id(location.id) is None
        assert await sql_repos.incentive.get_by_id(incentive.id) is None
        with pytest.raises(NotFoundError):
            await service.get_business_with_active_incentives(business.id)

        # Rows remain in storage
        assert db_session.query(Business).filter(Business.id == business.id).count() == 1

    async def test_delete_school_cascades(self, sql_repos):
        service = SchoolService(sql_repos)
        school = await service.create_school({"name": "Kirkwood", "domain": "kirkwood.edu"})
        location = await service.add_location(school.id, {"name": "Linn Hall"})

        await service.delete_school(school.id)

        assert await sql_repos.school_location.get_by_id(location.id) is None
        assert await sql_repos.school.get_by_id(school.id) is None

    async def test_match_school_for_email(self, sql_repos):
        service = SchoolService(sql_repos)
        await service.create_school({"name": "Kirkwood", "domain": "kirkwood.edu"})

        match = await service.match_school_for_email("alex@student.kirkwood.edu")

        assert isinstance(match.school, School)
        assert match.redirect == "/schools/kirkwood"
