"""Dependency injection for the service layer."""

from fastapi import Depends

from ..repositories.dependencies import get_repository_container
from ..repositories.interfaces import RepositoryContainer
from .business_service import BusinessService
from .school_service import SchoolService


def get_business_service(
    repos: RepositoryContainer = Depends(get_repository_container),
) -> BusinessService:
    """Get a BusinessService bound to the request's repositories."""
    return BusinessService(repos)


def get_school_service(
    repos: RepositoryContainer = Depends(get_repository_container),
) -> SchoolService:
    """Get a SchoolService bound to the request's repositories."""
    return SchoolService(repos)
