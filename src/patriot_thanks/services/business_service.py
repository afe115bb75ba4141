"""
Business aggregate operations.

A business is assembled from its own row, its live locations and its live,
active incentives, each incentive evaluated against the service clock. All
deletes are soft deletes; deleting a business also hides its locations and
incentives in the same transaction.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, List, Mapping, Optional

from ..core.errors import NotFoundError
from ..db.models import Address, Business, BusinessLocation, BusinessType, Incentive, IncentiveType
from ..domain.incentives import IncentiveSummary, to_summary
from ..domain.validation import (
    business_errors,
    ensure_valid,
    incentive_errors,
)
from ..repositories.interfaces import RepositoryContainer
from ..utils.logging_config import get_logger

logger = get_logger("services")

DEFAULT_PAGE_SIZE = 10


@dataclass
class BusinessDetail:
    """A business with its type, live locations and evaluated active incentives."""

    id: int
    name: str
    description: Optional[str]
    website: Optional[str]
    is_verified: bool
    is_active: bool
    business_type: Optional[BusinessType]
    locations: List[BusinessLocation] = field(default_factory=list)
    incentives: List[IncentiveSummary] = field(default_factory=list)


@dataclass
class BusinessPage:
    """One page of live businesses."""

    items: List[Business]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int


def page_window(page: int, page_size: int) -> tuple:
    """Offset and limit for a 1-based page. Raises ValidationFailure for bad input."""
    errors = {}
    if page < 1:
        errors["page"] = "must be at least 1"
    if page_size < 1:
        errors["page_size"] = "must be at least 1"
    ensure_valid(errors)
    return (page - 1) * page_size, page_size


def total_pages(total_items: int, page_size: int) -> int:
    return -(-total_items // page_size)


class BusinessService:
    """Business reads, creation and cascading soft delete."""

    def __init__(self, repos: RepositoryContainer, today: Callable[[], date] = date.today):
        self.repos = repos
        self._today = today

    async def _require_business(self, business_id: int) -> Business:
        business = await self.repos.business.get_by_id(business_id)
        if business is None:
            logger.info(f"Business {business_id} not found")
            raise NotFoundError("Business", business_id)
        return business

    async def get_business_with_active_incentives(self, business_id: int) -> BusinessDetail:
        """
        Load a business with its live locations and active incentives.

        Incentives past their end date are still included (with
        ``currently_valid=False``); only the ``is_active`` flag filters them.

        Raises:
            NotFoundError: If the business is absent or soft-deleted
        """
        business = await self._require_business(business_id)
        locations = await self.repos.business_location.get_by_business_id(business_id)
        incentives = await self._active_summaries(business_id)

        return BusinessDetail(
            id=business.id,
            name=business.name,
            description=business.description,
            website=business.website,
            is_verified=bool(business.is_verified),
            is_active=bool(business.is_active),
            business_type=business.business_type,
            locations=list(locations),
            incentives=incentives,
        )

    async def get_active_incentives(self, business_id: int) -> List[IncentiveSummary]:
        """Summaries of a live business's active incentives, evaluated for today."""
        await self._require_business(business_id)
        return await self._active_summaries(business_id)

    async def _active_summaries(self, business_id: int) -> List[IncentiveSummary]:
        today = self._today()
        incentives = await self.repos.incentive.get_by_business_and_active(business_id, True)
        return [to_summary(incentive, today) for incentive in incentives]

    async def list_businesses(
        self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> BusinessPage:
        """List live businesses ordered by name, one 1-based page at a time."""
        offset, limit = page_window(page, page_size)
        total = await self.repos.business.count()
        items = await self.repos.business.list_page(offset, limit)
        return BusinessPage(
            items=list(items),
            total_items=total,
            total_pages=total_pages(total, page_size),
            current_page=page,
            page_size=page_size,
        )

    async def create_business(self, data: Mapping[str, Any]) -> Business:
        """Validate and persist a new business.

        Raises:
            ValidationFailure: For a blank name, a missing type or an unknown type
        """
        errors = business_errors(data)
        type_id = data.get("business_type_id")
        if type_id is not None and await self.repos.business_type.get_by_id(type_id) is None:
            errors["business_type_id"] = f"unknown business type {type_id}"
        ensure_valid(errors)

        business = await self.repos.business.create(
            name=data["name"].strip(),
            business_type_id=type_id,
            description=data.get("description"),
            website=data.get("website"),
            submitted_by_user_id=data.get("submitted_by_user_id"),
            is_verified=bool(data.get("is_verified", False)),
            is_active=bool(data.get("is_active", True)),
        )
        logger.info(f"Created business {business.id} '{business.name}'")
        return business

    async def add_location(self, business_id: int, data: Mapping[str, Any]) -> BusinessLocation:
        """Attach a location (with an optional street address) to a live business.

        Raises:
            NotFoundError: If the business is absent or soft-deleted
            ValidationFailure: If the address names an unknown state
        """
        await self._require_business(business_id)

        address = None
        address_data = data.get("address")
        if address_data:
            state_id = address_data["state_id"]
            state = await self.repos.us_state.get_by_id(state_id)
            if state is None:
                ensure_valid({"address.state_id": f"unknown state {state_id}"})
            address = Address(
                street_address=address_data["street_address"],
                address_line_2=address_data.get("address_line_2"),
                city=address_data["city"],
                state_id=state.id,
                state=state,
                zip_code=address_data["zip_code"],
                latitude=address_data.get("latitude"),
                longitude=address_data.get("longitude"),
            )

        location = await self.repos.business_location.create(
            business_id=business_id,
            location_name=data.get("location_name"),
            address=address,
            phone=data.get("phone"),
            email=data.get("email"),
            hours_of_operation=data.get("hours_of_operation"),
            is_primary=bool(data.get("is_primary", False)),
            is_active=bool(data.get("is_active", True)),
        )
        logger.info(f"Added location {location.id} to business {business_id}")
        return location

    async def add_incentive(self, business_id: int, data: Mapping[str, Any]) -> Incentive:
        """Validate and attach an incentive to a live business.

        Raises:
            NotFoundError: If the business is absent or soft-deleted
            ValidationFailure: For blank text, an out-of-range percentage or
                unknown incentive types
        """
        await self._require_business(business_id)

        errors = incentive_errors(data)
        type_ids = list(data.get("incentive_type_ids") or [])
        incentive_types: List[IncentiveType] = []
        if type_ids:
            incentive_types = await self.repos.incentive_type.get_by_ids(type_ids)
            missing = sorted(set(type_ids) - {t.id for t in incentive_types})
            if missing:
                errors["incentive_type_ids"] = f"unknown incentive types {missing}"
        start, end = data.get("start_date"), data.get("end_date")
        if start is not None and end is not None and end < start:
            errors["end_date"] = "must not be before start_date"
        ensure_valid(errors)

        incentive = await self.repos.incentive.create(
            business_id=business_id,
            title=data["title"].strip(),
            description=data["description"],
            incentive_types=incentive_types,
            discount_amount=data.get("discount_amount"),
            discount_percentage=data.get("discount_percentage"),
            terms_and_conditions=data.get("terms_and_conditions"),
            verification_required=data.get("verification_required"),
            start_date=start,
            end_date=end,
            is_active=bool(data.get("is_active", True)),
            submitted_by_user_id=data.get("submitted_by_user_id"),
        )
        logger.info(f"Added incentive {incentive.id} to business {business_id}")
        return incentive

    async def delete_business(self, business_id: int) -> bool:
        """
        Soft-delete a business together with its live locations and incentives.

        Idempotent: deleting an already deleted business changes nothing and
        returns False.
        """
        deleted = await self.repos.business.mark_deleted(business_id)
        if not deleted:
            return False

        locations = await self.repos.business_location.mark_deleted_by_business(business_id)
        incentives = await self.repos.incentive.mark_deleted_by_business(business_id)
        await self.repos.business.commit()
        logger.info(
            f"Deleted business {business_id} "
            f"({locations} location(s), {incentives} incentive(s))"
        )
        return True

    async def delete_location(self, location_id: int) -> bool:
        """Soft-delete one business location. Idempotent."""
        deleted = await self.repos.business_location.mark_deleted(location_id)
        await self.repos.business_location.commit()
        if deleted:
            logger.info(f"Deleted business location {location_id}")
        return deleted

    async def delete_incentive(self, incentive_id: int) -> bool:
        """Soft-delete one incentive. Idempotent."""
        deleted = await self.repos.incentive.mark_deleted(incentive_id)
        await self.repos.incentive.commit()
        if deleted:
            logger.info(f"Deleted incentive {incentive_id}")
        return deleted

    async def list_business_types(self) -> List[BusinessType]:
        return await self.repos.business_type.list_ordered()

    async def list_incentive_types(self) -> List[IncentiveType]:
        return await self.repos.incentive_type.list_ordered()
