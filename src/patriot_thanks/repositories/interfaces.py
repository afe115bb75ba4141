"""Abstract repository interfaces for data access layer.

Not-found convention: every ``get_*`` lookup returns ``Optional[...]`` and
yields ``None`` for a missing or soft-deleted row. Services turn ``None``
into ``NotFoundError``.

Soft-deletable repositories never return rows whose ``deleted_at`` is set.
``mark_deleted*`` methods stage the update; callers commit.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

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
from ..core.enums import SchoolStatus, LocationStatus


class BaseRepository(ABC):
    """Base repository interface with common operations."""

    @abstractmethod
    async def save(self, entity) -> None:
        """Save an entity to the repository."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Rollback the current transaction."""
        pass


class SoftDeleteRepository(BaseRepository):
    """Repository for entities that are hidden instead of removed."""

    @abstractmethod
    async def get_by_id(self, entity_id: int):
        """Get a live entity by ID."""
        pass

    @abstractmethod
    async def list_all(self) -> list:
        """Get all live entities."""
        pass

    @abstractmethod
    async def mark_deleted(self, entity_id: int) -> bool:
        """Soft-delete an entity. Returns False if it was already gone."""
        pass


class BusinessRepository(SoftDeleteRepository):
    """Repository interface for Business entities."""

    @abstractmethod
    async def get_by_id(self, business_id: int) -> Optional[Business]:
        """Get a business by ID."""
        pass

    @abstractmethod
    async def list_page(self, offset: int, limit: int) -> List[Business]:
        """Get one page of businesses ordered by name."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count live businesses."""
        pass

    @abstractmethod
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
        pass


class BusinessLocationRepository(SoftDeleteRepository):
    """Repository interface for BusinessLocation entities."""

    @abstractmethod
    async def get_by_id(self, location_id: int) -> Optional[BusinessLocation]:
        """Get a business location by ID."""
        pass

    @abstractmethod
    async def get_by_business_id(self, business_id: int) -> List[BusinessLocation]:
        """Get live locations of a business, primary location first."""
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def mark_deleted_by_business(self, business_id: int) -> int:
        """Soft-delete every live location of a business."""
        pass


class IncentiveRepository(SoftDeleteRepository):
    """Repository interface for Incentive entities."""

    @abstractmethod
    async def get_by_id(self, incentive_id: int) -> Optional[Incentive]:
        """Get an incentive by ID."""
        pass

    @abstractmethod
    async def get_by_business_id(self, business_id: int) -> List[Incentive]:
        """Get all live incentives of a business."""
        pass

    @abstractmethod
    async def get_by_business_and_active(
        self, business_id: int, active: bool
    ) -> List[Incentive]:
        """Get live incentives of a business by active flag, types loaded."""
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def mark_deleted_by_business(self, business_id: int) -> int:
        """Soft-delete every live incentive of a business."""
        pass


class BusinessTypeRepository(ABC):
    """Repository interface for BusinessType lookups."""

    @abstractmethod
    async def get_by_id(self, type_id: int) -> Optional[BusinessType]:
        """Get a business type by ID."""
        pass

    @abstractmethod
    async def list_ordered(self) -> List[BusinessType]:
        """Get all business types by ascending display order."""
        pass


class UsStateRepository(ABC):
    """Repository interface for UsState lookups."""

    @abstractmethod
    async def get_by_id(self, state_id: int) -> Optional[UsState]:
        """Get a state by ID."""
        pass


class IncentiveTypeRepository(ABC):
    """Repository interface for IncentiveType lookups."""

    @abstractmethod
    async def get_by_ids(self, type_ids: Sequence[int]) -> List[IncentiveType]:
        """Get the incentive types with the given IDs, by display order."""
        pass

    @abstractmethod
    async def list_ordered(self) -> List[IncentiveType]:
        """Get all incentive types by ascending display order."""
        pass


class SchoolRepository(SoftDeleteRepository):
    """Repository interface for School entities."""

    @abstractmethod
    async def get_by_id(self, school_id: int) -> Optional[School]:
        """Get a school by ID."""
        pass

    @abstractmethod
    async def get_by_domain(self, domain: str) -> Optional[School]:
        """Get a live school by exact domain match."""
        pass

    @abstractmethod
    async def list_page(self, offset: int, limit: int) -> List[School]:
        """Get one page of schools ordered by name."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count live schools."""
        pass

    @abstractmethod
    async def create(
        self, name: str, domain: str, status: SchoolStatus = SchoolStatus.ACTIVE
    ) -> School:
        """Create a new school. Raises DuplicateDomainError for a taken domain."""
        pass


class SchoolLocationRepository(SoftDeleteRepository):
    """Repository interface for school Location entities."""

    @abstractmethod
    async def get_by_id(self, location_id: int) -> Optional[SchoolLocation]:
        """Get a school location by ID."""
        pass

    @abstractmethod
    async def get_by_school_id(self, school_id: int) -> List[SchoolLocation]:
        """Get live locations of a school."""
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def mark_deleted_by_school(self, school_id: int) -> int:
        """Soft-delete every live location of a school."""
        pass


class RepositoryContainer:
    """Container for all repository interfaces to support dependency injection."""

    def __init__(
        self,
        business_repo: BusinessRepository,
        business_location_repo: BusinessLocationRepository,
        incentive_repo: IncentiveRepository,
        business_type_repo: BusinessTypeRepository,
        incentive_type_repo: IncentiveTypeRepository,
        school_repo: SchoolRepository,
        school_location_repo: SchoolLocationRepository,
        us_state_repo: UsStateRepository,
    ):
        self.business = business_repo
        self.business_location = business_location_repo
        self.incentive = incentive_repo
        self.business_type = business_type_repo
        self.incentive_type = incentive_type_repo
        self.school = school_repo
        self.school_location = school_location_repo
        self.us_state = us_state_repo
