"""School records and registration-time school matching."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ..core.enums import LocationStatus, SchoolStatus
from ..core.errors import NotFoundError
from ..db.models import School, SchoolLocation
from ..domain.schools import registration_redirect, resolve_school_for_email_async
from ..domain.validation import BLANK_MESSAGE, ensure_valid, school_errors
from ..repositories.interfaces import RepositoryContainer
from ..utils.logging_config import get_logger
from .business_service import DEFAULT_PAGE_SIZE, page_window, total_pages

logger = get_logger("services")


@dataclass
class SchoolDetail:
    """A school with its live campus locations."""

    id: int
    name: str
    domain: str
    status: str
    locations: List[SchoolLocation] = field(default_factory=list)


@dataclass
class SchoolPage:
    """One page of live schools."""

    items: List[School]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int


@dataclass
class SchoolMatch:
    """Outcome of matching an email to a school."""

    school: Optional[School]
    redirect: str


def normalize_domain(domain: str) -> str:
    return domain.strip().lower()


class SchoolService:
    """School CRUD over soft-deletable storage plus email-to-school matching."""

    def __init__(self, repos: RepositoryContainer):
        self.repos = repos

    async def _require_school(self, school_id: int) -> School:
        school = await self.repos.school.get_by_id(school_id)
        if school is None:
            logger.info(f"School {school_id} not found")
            raise NotFoundError("School", school_id)
        return school

    async def create_school(self, data: Mapping[str, Any]) -> School:
        """
        Validate and persist a school.

        Raises:
            ValidationFailure: For a blank name or domain
            DuplicateDomainError: If a live school already uses the domain
        """
        ensure_valid(school_errors(data))
        status = SchoolStatus(data.get("status") or SchoolStatus.ACTIVE)
        school = await self.repos.school.create(
            name=data["name"].strip(),
            domain=normalize_domain(data["domain"]),
            status=status,
        )
        logger.info(f"Created school {school.id} for domain '{school.domain}'")
        return school

    async def get_school(self, school_id: int) -> SchoolDetail:
        """Load a live school with its live locations."""
        school = await self._require_school(school_id)
        locations = await self.repos.school_location.get_by_school_id(school_id)
        return SchoolDetail(
            id=school.id,
            name=school.name,
            domain=school.domain,
            status=school.status,
            locations=list(locations),
        )

    async def list_schools(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> SchoolPage:
        """List live schools ordered by name."""
        offset, limit = page_window(page, page_size)
        total = await self.repos.school.count()
        items = await self.repos.school.list_page(offset, limit)
        return SchoolPage(
            items=list(items),
            total_items=total,
            total_pages=total_pages(total, page_size),
            current_page=page,
            page_size=page_size,
        )

    async def add_location(self, school_id: int, data: Mapping[str, Any]) -> SchoolLocation:
        """Attach a campus location to a live school."""
        await self._require_school(school_id)
        name = data.get("name")
        if name is None or not str(name).strip():
            ensure_valid({"name": BLANK_MESSAGE})

        location = await self.repos.school_location.create(
            school_id=school_id,
            name=name.strip(),
            description=data.get("description"),
            address=data.get("address"),
            parent_location_id=data.get("parent_location_id"),
            status=LocationStatus(data.get("status") or LocationStatus.ACTIVE),
        )
        logger.info(f"Added location {location.id} to school {school_id}")
        return location

    async def delete_school(self, school_id: int) -> bool:
        """Soft-delete a school and its live locations. Idempotent."""
        deleted = await self.repos.school.mark_deleted(school_id)
        if not deleted:
            return False

        locations = await self.repos.school_location.mark_deleted_by_school(school_id)
        await self.repos.school.commit()
        logger.info(f"Deleted school {school_id} ({locations} location(s))")
        return True

    async def match_school_for_email(self, email: str) -> SchoolMatch:
        """
        Resolve the school for a registering user's email.

        The most specific registered domain wins. The redirect points at the
        school's page, or home when nothing matched.

        Raises:
            InvalidEmailError: If ``email`` has no '@'
        """
        school = await resolve_school_for_email_async(
            email.strip().lower(), self.repos.school.get_by_domain
        )
        if school is None:
            logger.debug(f"No school registered for {email!r}")
        return SchoolMatch(school=school, redirect=registration_redirect(school))
