"""In-memory implementations of repository interfaces for testing."""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from .interfaces import (
    BusinessRepository,
    BusinessLocationRepository,
    IncentiveRepository,
    BusinessTypeRepository,
    IncentiveTypeRepository,
    SchoolRepository,
    SchoolLocationRepository,
    UsStateRepository,
    RepositoryContainer,
)
from .soft_delete import MemorySoftDeletePolicy
from ..core.enums import SchoolStatus, LocationStatus
from ..core.errors import DuplicateDomainError
from ..db.models import (
    Address,
    Business,
    BusinessLocation,
    BusinessType,
    Incentive,
    IncentiveType,
    School,
    SchoolLocation,
    UsState,
)


class BaseMemoryRepository:
    """Base in-memory repository implementation."""

    async def save(self, entity) -> None:
        """Save an entity to the repository."""
        # In memory implementation doesn't need explicit saves
        pass

    async def commit(self) -> None:
        """Commit the current transaction."""
        # In memory - changes are immediate
        pass

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        pass


class MemoryBusinessRepository(
    BaseMemoryRepository, MemorySoftDeletePolicy, BusinessRepository
):
    """In-memory implementation of BusinessRepository."""

    def __init__(self, business_types: Optional["MemoryBusinessTypeRepository"] = None):
        super().__init__()
        self._business_types = business_types

    async def list_page(self, offset: int, limit: int) -> List[Business]:
        """Get one page of businesses ordered by name."""
        ordered = sorted(self._live(), key=lambda b: (b.name, b.id))
        return ordered[offset:offset + limit]

    async def count(self) -> int:
        """Count live businesses."""
        return sum(1 for _ in self._live())

    async def create(
        self,
        name: str,
        business_type_id: int,
        description: Optional[str] = None,
        website: Optional[str] = None,
        submitted_by_user_id: Optional[int] = None,
        is_verified: bool = False,
        is_active: bool = True,
    ) -> Business:
        """Create a new business."""
        business = Business(
            name=name,
            business_type_id=business_type_id,
            description=description,
            website=website,
            submitted_by_user_id=submitted_by_user_id,
            is_verified=is_verified,
            is_active=is_active,
        )
        if self._business_types is not None:
            business.business_type = await self._business_types.get_by_id(business_type_id)
        return self._store(business)


class MemoryBusinessLocationRepository(
    BaseMemoryRepository, MemorySoftDeletePolicy, BusinessLocationRepository
):
    """In-memory implementation of BusinessLocationRepository."""

    async def get_by_business_id(self, business_id: int) -> List[BusinessLocation]:
        """Get live locations of a business, primary location first."""
        locations = [loc for loc in self._live() if loc.business_id == business_id]
        return sorted(locations, key=lambda loc: (not loc.is_primary, loc.id))

    async def create(
        self,
        business_id: int,
        location_name: Optional[str] = None,
        address: Optional[Address] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        hours_of_operation: Optional[str] = None,
        is_primary: bool = False,
        is_active: bool = True,
    ) -> BusinessLocation:
        """Create a new business location."""
        location = BusinessLocation(
            business_id=business_id,
            location_name=location_name,
            address=address,
            phone=phone,
            email=email,
            hours_of_operation=hours_of_operation,
            is_primary=is_primary,
            is_active=is_active,
        )
        return self._store(location)

    async def mark_deleted_by_business(self, business_id: int) -> int:
        """Soft-delete every live location of a business."""
        return self._mark_deleted_where(lambda loc: loc.business_id == business_id)


class MemoryIncentiveRepository(
    BaseMemoryRepository, MemorySoftDeletePolicy, IncentiveRepository
):
    """In-memory implementation of IncentiveRepository."""

    async def get_by_business_id(self, business_id: int) -> List[Incentive]:
        """Get all live incentives of a business."""
        return [i for i in self._live() if i.business_id == business_id]

    async def get_by_business_and_active(
        self, business_id: int, active: bool
    ) -> List[Incentive]:
        """Get live incentives of a business by active flag, types loaded."""
        return [
            i for i in self._live()
            if i.business_id == business_id and bool(i.is_active) == active
        ]

    async def create(
        self,
        business_id: int,
        title: str,
        description: str,
        incentive_types: Sequence[IncentiveType] = (),
        discount_amount: Optional[Decimal] = None,
        discount_percentage: Optional[Decimal] = None,
        terms_and_conditions: Optional[str] = None,
        verification_required: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_active: bool = True,
        submitted_by_user_id: Optional[int] = None,
    ) -> Incentive:
        """Create a new incentive."""
        incentive = Incentive(
            business_id=business_id,
            title=title,
            description=description,
            incentive_types=list(incentive_types),
            discount_amount=discount_amount,
            discount_percentage=discount_percentage,
            terms_and_conditions=terms_and_conditions,
            verification_required=verification_required,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
            submitted_by_user_id=submitted_by_user_id,
        )
        return self._store(incentive)

    async def mark_deleted_by_business(self, business_id: int) -> int:
        """Soft-delete every live incentive of a business."""
        return self._mark_deleted_where(lambda i: i.business_id == business_id)


class MemoryBusinessTypeRepository(BusinessTypeRepository):
    """In-memory implementation of BusinessTypeRepository."""

    def __init__(self, types: Sequence[BusinessType] = ()):
        self._types: Dict[int, BusinessType] = {t.id: t for t in types}

    def add(self, business_type: BusinessType) -> BusinessType:
        """Register a business type (reference data)."""
        self._types[business_type.id] = business_type
        return business_type

    async def get_by_id(self, type_id: int) -> Optional[BusinessType]:
        """Get a business type by ID."""
        return self._types.get(type_id)

    async def list_ordered(self) -> List[BusinessType]:
        """Get all business types by ascending display order."""
        return sorted(self._types.values(), key=lambda t: (t.display_order, t.id))


class MemoryUsStateRepository(UsStateRepository):
    """In-memory implementation of UsStateRepository."""

    def __init__(self, states: Sequence[UsState] = ()):
        self._states: Dict[int, UsState] = {s.id: s for s in states}

    async def get_by_id(self, state_id: int) -> Optional[UsState]:
        """Get a state by ID."""
        return self._states.get(state_id)


class MemoryIncentiveTypeRepository(IncentiveTypeRepository):
    """In-memory implementation of IncentiveTypeRepository."""

    def __init__(self, types: Sequence[IncentiveType] = ()):
        self._types: Dict[int, IncentiveType] = {t.id: t for t in types}

    def add(self, incentive_type: IncentiveType) -> IncentiveType:
        """Register an incentive type (reference data)."""
        self._types[incentive_type.id] = incentive_type
        return incentive_type

    async def get_by_ids(self, type_ids: Sequence[int]) -> List[IncentiveType]:
        """Get the incentive types with the given IDs, by display order."""
        found = [self._types[i] for i in set(type_ids) if i in self._types]
        return sorted(found, key=lambda t: (t.display_order, t.id))

    async def list_ordered(self) -> List[IncentiveType]:
        """Get all incentive types by ascending display order."""
        return sorted(self._types.values(), key=lambda t: (t.display_order, t.id))


class MemorySchoolRepository(BaseMemoryRepository, MemorySoftDeletePolicy, SchoolRepository):
    """In-memory implementation of SchoolRepository."""

    def __init__(self):
        super().__init__()
        self.domain_lookups: List[str] = []

    async def get_by_domain(self, domain: str) -> Optional[School]:
        """Get a live school by exact domain match."""
        self.domain_lookups.append(domain)
        for school in self._live():
            if school.domain == domain:
                return school
        return None

    async def list_page(self, offset: int, limit: int) -> List[School]:
        """Get one page of schools ordered by name."""
        ordered = sorted(self._live(), key=lambda s: (s.name, s.id))
        return ordered[offset:offset + limit]

    async def count(self) -> int:
        """Count live schools."""
        return sum(1 for _ in self._live())

    async def create(
        self, name: str, domain: str, status: SchoolStatus = SchoolStatus.ACTIVE
    ) -> School:
        """Create a new school. Raises DuplicateDomainError for a taken domain."""
        if any(school.domain == domain for school in self._live()):
            raise DuplicateDomainError(domain)
        school = School(name=name, domain=domain, status=SchoolStatus(status).value)
        return self._store(school)


class MemorySchoolLocationRepository(
    BaseMemoryRepository, MemorySoftDeletePolicy, SchoolLocationRepository
):
    """In-memory implementation of SchoolLocationRepository."""

    async def get_by_school_id(self, school_id: int) -> List[SchoolLocation]:
        """Get live locations of a school."""
        locations = [loc for loc in self._live() if loc.school_id == school_id]
        return sorted(locations, key=lambda loc: (loc.name, loc.id))

    async def create(
        self,
        school_id: int,
        name: str,
        description: Optional[str] = None,
        address: Optional[str] = None,
        parent_location_id: Optional[int] = None,
        status: LocationStatus = LocationStatus.ACTIVE,
    ) -> SchoolLocation:
        """Create a new school location."""
        location = SchoolLocation(
            school_id=school_id,
            name=name,
            description=description,
            address=address,
            parent_location_id=parent_location_id,
            status=LocationStatus(status).value,
        )
        return self._store(location)

    async def mark_deleted_by_school(self, school_id: int) -> int:
        """Soft-delete every live location of a school."""
        return self._mark_deleted_where(lambda loc: loc.school_id == school_id)


def create_memory_container(
    business_types: Sequence[BusinessType] = (),
    incentive_types: Sequence[IncentiveType] = (),
    states: Sequence[UsState] = (),
) -> RepositoryContainer:
    """Build a RepositoryContainer backed entirely by memory."""
    business_type_repo = MemoryBusinessTypeRepository(business_types)
    return RepositoryContainer(
        business_repo=MemoryBusinessRepository(business_type_repo),
        business_location_repo=MemoryBusinessLocationRepository(),
        incentive_repo=MemoryIncentiveRepository(),
        business_type_repo=business_type_repo,
        incentive_type_repo=MemoryIncentiveTypeRepository(incentive_types),
        school_repo=MemorySchoolRepository(),
        school_location_repo=MemorySchoolLocationRepository(),
        us_state_repo=MemoryUsStateRepository(states),
    )
