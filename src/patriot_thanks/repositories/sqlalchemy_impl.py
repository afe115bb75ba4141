"""SQLAlchemy concrete implementations of repository interfaces."""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from .interfaces import (
    BusinessRepository,
    BusinessLocationRepository,
    IncentiveRepository,
    BusinessTypeRepository,
    IncentiveTypeRepository,
    SchoolRepository,
    SchoolLocationRepository,
    UsStateRepository,
)
from .soft_delete import SQLAlchemySoftDeletePolicy
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


class BaseSQLAlchemyRepository:
    """Base SQLAlchemy repository implementation."""

    def __init__(self, session: Session):
        self._session = session

    async def save(self, entity) -> None:
        """Save an entity to the repository."""
        self._session.add(entity)

    async def commit(self) -> None:
        """Commit the current transaction."""
        self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        self._session.rollback()

    async def _persist(self, entity):
        await self.save(entity)
        await self.commit()
        self._session.refresh(entity)
        return entity


class SQLAlchemyBusinessRepository(
    BaseSQLAlchemyRepository, SQLAlchemySoftDeletePolicy, BusinessRepository
):
    """SQLAlchemy implementation of BusinessRepository."""

    model = Business

    async def list_page(self, offset: int, limit: int) -> List[Business]:
        """Get one page of businesses ordered by name."""
        return (
            self._live_query()
            .order_by(Business.name, Business.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    async def count(self) -> int:
        """Count live businesses."""
        return self._live_query().count()

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
        return await self._persist(business)


class SQLAlchemyBusinessLocationRepository(
    BaseSQLAlchemyRepository, SQLAlchemySoftDeletePolicy, BusinessLocationRepository
):
    """SQLAlchemy implementation of BusinessLocationRepository."""

    model = BusinessLocation

    async def get_by_business_id(self, business_id: int) -> List[BusinessLocation]:
        """Get live locations of a business, primary location first."""
        return (
            self._live_query()
            .filter(BusinessLocation.business_id == business_id)
            .order_by(BusinessLocation.is_primary.desc(), BusinessLocation.id)
            .all()
        )

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
        return await self._persist(location)

    async def mark_deleted_by_business(self, business_id: int) -> int:
        """Soft-delete every live location of a business."""
        return self._mark_deleted_where(BusinessLocation.business_id == business_id)


class SQLAlchemyIncentiveRepository(
    BaseSQLAlchemyRepository, SQLAlchemySoftDeletePolicy, IncentiveRepository
):
    """SQLAlchemy implementation of IncentiveRepository."""

    model = Incentive

    async def get_by_business_id(self, business_id: int) -> List[Incentive]:
        """Get all live incentives of a business."""
        return (
            self._live_query()
            .filter(Incentive.business_id == business_id)
            .order_by(Incentive.id)
            .all()
        )

    async def get_by_business_and_active(
        self, business_id: int, active: bool
    ) -> List[Incentive]:
        """Get live incentives of a business by active flag, types loaded."""
        return (
            self._live_query()
            .options(selectinload(Incentive.incentive_types))
            .filter(Incentive.business_id == business_id, Incentive.is_active == active)
            .order_by(Incentive.id)
            .all()
        )

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
        return await self._persist(incentive)

    async def mark_deleted_by_business(self, business_id: int) -> int:
        """Soft-delete every live incentive of a business."""
        return self._mark_deleted_where(Incentive.business_id == business_id)


class SQLAlchemyBusinessTypeRepository(BaseSQLAlchemyRepository, BusinessTypeRepository):
    """SQLAlchemy implementation of BusinessTypeRepository."""

    async def get_by_id(self, type_id: int) -> Optional[BusinessType]:
        """Get a business type by ID."""
        return self._session.get(BusinessType, type_id)

    async def list_ordered(self) -> List[BusinessType]:
        """Get all business types by ascending display order."""
        return (
            self._session.query(BusinessType)
            .order_by(BusinessType.display_order, BusinessType.id)
            .all()
        )


class SQLAlchemyUsStateRepository(BaseSQLAlchemyRepository, UsStateRepository):
    """SQLAlchemy implementation of UsStateRepository."""

    async def get_by_id(self, state_id: int) -> Optional[UsState]:
        """Get a state by ID."""
        return self._session.get(UsState, state_id)


class SQLAlchemyIncentiveTypeRepository(BaseSQLAlchemyRepository, IncentiveTypeRepository):
    """SQLAlchemy implementation of IncentiveTypeRepository."""

    async def get_by_ids(self, type_ids: Sequence[int]) -> List[IncentiveType]:
        """Get the incentive types with the given IDs, by display order."""
        if not type_ids:
            return []
        return (
            self._session.query(IncentiveType)
            .filter(IncentiveType.id.in_(list(type_ids)))
            .order_by(IncentiveType.display_order, IncentiveType.id)
            .all()
        )

    async def list_ordered(self) -> List[IncentiveType]:
        """Get all incentive types by ascending display order."""
        return (
            self._session.query(IncentiveType)
            .order_by(IncentiveType.display_order, IncentiveType.id)
            .all()
        )


class SQLAlchemySchoolRepository(
    BaseSQLAlchemyRepository, SQLAlchemySoftDeletePolicy, SchoolRepository
):
    """SQLAlchemy implementation of SchoolRepository."""

    model = School

    async def get_by_domain(self, domain: str) -> Optional[School]:
        """Get a live school by exact domain match."""
        return self._live_query().filter(School.domain == domain).first()

    async def list_page(self, offset: int, limit: int) -> List[School]:
        """Get one page of schools ordered by name."""
        return (
            self._live_query()
            .order_by(School.name, School.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    async def count(self) -> int:
        """Count live schools."""
        return self._live_query().count()

    async def create(
        self, name: str, domain: str, status: SchoolStatus = SchoolStatus.ACTIVE
    ) -> School:
        """Create a new school. Raises DuplicateDomainError for a taken domain."""
        school = School(name=name, domain=domain, status=SchoolStatus(status).value)
        try:
            return await self._persist(school)
        except IntegrityError as exc:
            await self.rollback()
            if await self.get_by_domain(domain) is not None:
                raise DuplicateDomainError(domain) from exc
            raise


class SQLAlchemySchoolLocationRepository(
    BaseSQLAlchemyRepository, SQLAlchemySoftDeletePolicy, SchoolLocationRepository
):
    """SQLAlchemy implementation of SchoolLocationRepository."""

    model = SchoolLocation

    async def get_by_school_id(self, school_id: int) -> List[SchoolLocation]:
        """Get live locations of a school."""
        return (
            self._live_query()
            .filter(SchoolLocation.school_id == school_id)
            .order_by(SchoolLocation.name, SchoolLocation.id)
            .all()
        )

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
        return await self._persist(location)

    async def mark_deleted_by_school(self, school_id: int) -> int:
        """Soft-delete every live location of a school."""
        return self._mark_deleted_where(SchoolLocation.school_id == school_id)
