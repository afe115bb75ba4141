"""Unit tests for BusinessService over in-memory repositories."""

from datetime import date
from decimal import Decimal

import pytest

from patriot_thanks.core.errors import NotFoundError, ValidationFailure
from patriot_thanks.services.business_service import BusinessService

TODAY = date(2025, 6, 15)


@pytest.fixture
def service(memory_repos):
    return BusinessService(memory_repos, today=lambda: TODAY)


async def create_business(service, name="Joe's Diner", business_type_id=1):
    return await service.create_business({"name": name, "business_type_id": business_type_id})


@pytest.mark.unit
class TestGetBusinessWithActiveIncentives:
    """Assembling a business with its locations and active incentives."""

    async def test_missing_business_raises_not_found(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_business_with_active_incentives(999)
        assert "999" in str(exc_info.value)

    async def test_only_active_incentives_are_included(self, service):
        business = await create_business(service)
        await service.add_incentive(business.id, {
            "title": "Veteran Discount",
            "description": "10% off",
            "discount_percentage": Decimal("10.00"),
        })
        await service.add_incentive(business.id, {
            "title": "Retired Offer",
            "description": "No longer offered",
            "is_active": False,
        })

        detail = await service.get_business_with_active_incentives(business.id)

        assert detail.name == "Joe's Diner"
        assert detail.business_type.name == "Restaurant"
        assert [i.title for i in detail.incentives] == ["Veteran Discount"]
        assert detail.incentives[0].formatted_discount == "10%"
        assert detail.incentives[0].currently_valid is True

    async def test_expired_active_incentive_is_included_as_not_valid(self, service):
        business = await create_business(service)
        await service.add_incentive(business.id, {
            "title": "Memorial Day",
            "description": "$5 off",
            "discount_amount": Decimal("5"),
            "start_date": date(2025, 5, 20),
            "end_date": date(2025, 5, 31),
        })

        detail = await service.get_business_with_active_incentives(business.id)

        assert len(detail.incentives) == 1
        summary = detail.incentives[0]
        assert summary.currently_valid is False
        assert summary.validity_display == "Valid until May 31, 2025"
        assert summary.formatted_discount == "$5.00 off"

    async def test_today_is_read_on_every_call(self, memory_repos):
        days = iter([date(2025, 5, 1), date(2025, 8, 1)])
        service = BusinessService(memory_repos, today=lambda: next(days))
        business = await create_business(service)
        await service.add_incentive(business.id, {
            "title": "Summer", "description": "d", "end_date": date(2025, 6, 30),
        })

        first = await service.get_active_incentives(business.id)
        second = await service.get_active_incentives(business.id)

        assert first[0].currently_valid is True
        assert second[0].currently_valid is False

    async def test_locations_are_listed_primary_first(self, service):
        business = await create_business(service)
        await service.add_location(business.id, {"location_name": "Annex"})
        await service.add_location(business.id, {"location_name": "Main", "is_primary": True})

        detail = await service.get_business_with_active_incentives(business.id)

        assert [loc.location_name for loc in detail.locations] == ["Main", "Annex"]


@pytest.mark.unit
class TestCreateBusiness:

    async def test_create_strips_name(self, service):
        business = await create_business(service, name="  Joe's Diner  ")
        assert business.name == "Joe's Diner"
        assert business.is_active is True
        assert business.is_verified is False

    async def test_invalid_fields_are_all_reported(self, service):
        with pytest.raises(ValidationFailure) as exc_info:
            await service.create_business({"name": " "})
        assert set(exc_info.value.errors) == {"name", "business_type_id"}

    async def test_unknown_business_type(self, service):
        with pytest.raises(ValidationFailure) as exc_info:
            await create_business(service, business_type_id=42)
        assert set(exc_info.value.errors) == {"business_type_id"}

    async def test_add_incentive_validates(self, service):
        business = await create_business(service)

        with pytest.raises(ValidationFailure) as exc_info:
            await service.add_incentive(business.id, {
                "title": "",
                "description": "d",
                "discount_percentage": Decimal("150"),
                "incentive_type_ids": [1, 9],
                "start_date": date(2025, 6, 1),
                "end_date": date(2025, 5, 1),
            })

        assert set(exc_info.value.errors) == {
            "title", "discount_percentage", "incentive_type_ids", "end_date",
        }

    async def test_add_incentive_attaches_types_in_display_order(self, service):
        business = await create_business(service)
        await service.add_incentive(business.id, {
            "title": "t", "description": "d", "incentive_type_ids": [2, 1],
        })

        summaries = await service.get_active_incentives(business.id)

        assert [t.name for t in summaries[0].incentive_types] == ["Veteran", "Active Duty"]

    async def test_add_incentive_to_missing_business(self, service):
        with pytest.raises(NotFoundError):
            await service.add_incentive(5, {"title": "t", "description": "d"})

    async def test_add_location_resolves_state(self, service):
        business = await create_business(service)

        location = await service.add_location(business.id, {
            "location_name": "Main",
            "address": {
                "street_address": "1 A St", "city": "Ames", "state_id": 1, "zip_code": "50010",
            },
        })

        assert location.address.full_address == "1 A St, Ames, IA 50010"

    async def test_add_location_unknown_state(self, service, memory_repos):
        business = await create_business(service)

        with pytest.raises(ValidationFailure) as exc_info:
            await service.add_location(business.id, {
                "location_name": "Main",
                "address": {
                    "street_address": "1 A St", "city": "Ames", "state_id": 9999,
                    "zip_code": "50010",
                },
            })

        assert set(exc_info.value.errors) == {"address.state_id"}
        assert await memory_repos.business_location.get_by_business_id(business.id) == []


@pytest.mark.unit
class TestListBusinesses:

    async def test_pagination(self, service):
        for name in ["Delta", "Alpha", "Charlie", "Bravo", "Echo"]:
            await create_business(service, name=name)

        page = await service.list_businesses(page=2, page_size=2)

        assert [b.name for b in page.items] == ["Charlie", "Delta"]
        assert page.total_items == 5
        assert page.total_pages == 3
        assert page.current_page == 2

    async def test_default_page_size_is_ten(self, service):
        for i in range(12):
            await create_business(service, name=f"Business {i:02d}")

        page = await service.list_businesses()

        assert len(page.items) == 10
        assert page.total_pages == 2

    async def test_deleted_businesses_are_not_counted(self, service):
        kept = await create_business(service, name="Kept")
        gone = await create_business(service, name="Gone")
        await service.delete_business(gone.id)

        page = await service.list_businesses()

        assert [b.id for b in page.items] == [kept.id]
        assert page.total_items == 1

    async def test_empty_listing(self, service):
        page = await service.list_businesses()
        assert page.items == []
        assert page.total_pages == 0

    async def test_page_must_be_positive(self, service):
        with pytest.raises(ValidationFailure) as exc_info:
            await service.list_businesses(page=0)
        assert "page" in exc_info.value.errors


@pytest.mark.unit
class TestDeletes:
    """Soft deletes hide records and are idempotent."""

    async def test_deleted_business_is_not_found(self, service):
        business = await create_business(service)

        assert await service.delete_business(business.id) is True

        with pytest.raises(NotFoundError):
            await service.get_business_with_active_incentives(business.id)

    async def test_delete_business_twice_is_a_noop(self, service, memory_repos):
        business = await create_business(service)
        await service.delete_business(business.id)
        first_stamp = memory_repos.business._items[business.id].deleted_at

        assert await service.delete_business(business.id) is False
        assert memory_repos.business._items[business.id].deleted_at == first_stamp

    async def test_delete_business_cascades(self, service, memory_repos):
        business = await create_business(service)
        location = await service.add_location(business.id, {"location_name": "Main"})
        incentive = await service.add_incentive(business.id, {"title": "t", "description": "d"})

        await service.delete_business(business.id)

        assert await memory_repos.business_location.get_by_id(location.id) is None
        assert await memory_repos.incentive.get_by_id(incentive.id) is None

    async def test_delete_incentive_hides_it(self, service):
        business = await create_business(service)
        incentive = await service.add_incentive(business.id, {"title": "t", "description": "d"})

        assert await service.delete_incentive(incentive.id) is True
        assert await service.delete_incentive(incentive.id) is False
        assert await service.get_active_incentives(business.id) == []

    async def test_delete_location_hides_it(self, service):
        business = await create_business(service)
        location = await service.add_location(business.id, {"location_name": "Main"})

        assert await service.delete_location(location.id) is True

        detail = await service.get_business_with_active_incentives(business.id)
        assert detail.locations == []

    async def test_delete_missing_records_is_a_noop(self, service):
        assert await service.delete_business(404) is False
        assert await service.delete_location(404) is False
        assert await service.delete_incentive(404) is False


@pytest.mark.unit
class TestLookups:

    async def test_types_are_ordered_by_display_order(self, service):
        business_types = await service.list_business_types()
        incentive_types = await service.list_incentive_types()

        assert [t.name for t in business_types] == ["Retail", "Restaurant"]
        assert [t.name for t in incentive_types] == ["Veteran", "Active Duty"]
