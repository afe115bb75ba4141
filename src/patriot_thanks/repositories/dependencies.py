"""Dependency injection for repository layer."""

from fastapi import Depends
from sqlalchemy.orm import Session

from ..db.database import get_db
from .interfaces import RepositoryContainer
from .sqlalchemy_impl import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyBusinessLocationRepository,
    SQLAlchemyIncentiveRepository,
    SQLAlchemyBusinessTypeRepository,
    SQLAlchemyIncentiveTypeRepository,
    SQLAlchemySchoolRepository,
    SQLAlchemySchoolLocationRepository,
    SQLAlchemyUsStateRepository,
)


def get_repository_container(
    db: Session = Depends(get_db),
) -> RepositoryContainer:
    """
    Create and configure a repository container with SQLAlchemy implementations.

    Every repository shares the request's session, so a service operation that
    touches several of them commits once.
    """
    return RepositoryContainer(
        business_repo=SQLAlchemyBusinessRepository(db),
        business_location_repo=SQLAlchemyBusinessLocationRepository(db),
        incentive_repo=SQLAlchemyIncentiveRepository(db),
        business_type_repo=SQLAlchemyBusinessTypeRepository(db),
        incentive_type_repo=SQLAlchemyIncentiveTypeRepository(db),
        school_repo=SQLAlchemySchoolRepository(db),
        school_location_repo=SQLAlchemySchoolLocationRepository(db),
        us_state_repo=SQLAlchemyUsStateRepository(db),
    )
