"""School API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..config import get_config
from ..services.dependencies import get_school_service
from ..services.school_service import SchoolService
from .schemas import (
    ProblemDetails,
    SchoolCreate,
    SchoolDetailResponse,
    SchoolListResponse,
    SchoolLocationCreate,
    SchoolLocationResponse,
    SchoolMatchResponse,
    SchoolResponse,
)

router = APIRouter(prefix="/v1/schools", tags=["schools"])


@router.get(
    "",
    response_model=SchoolListResponse,
    responses={200: {"description": "Page of schools retrieved successfully"}},
)
async def list_schools(
    page: int = Query(1, description="1-based page number"),
    page_size: Optional[int] = Query(None, description="Schools per page"),
    service: SchoolService = Depends(get_school_service),
) -> SchoolListResponse:
    """List live schools ordered by name."""
    size = page_size if page_size is not None else get_config().app.page_size
    result = await service.list_schools(page=page, page_size=size)
    return SchoolListResponse(
        schools=[SchoolResponse.model_validate(s) for s in result.items],
        total_items=result.total_items,
        total_pages=result.total_pages,
        current_page=result.current_page,
        page_size=result.page_size,
    )


@router.post(
    "",
    response_model=SchoolResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "School created successfully"},
        409: {"model": ProblemDetails, "description": "Domain already registered"},
        422: {"model": ProblemDetails, "description": "Validation error"},
    },
)
async def create_school(
    school_data: SchoolCreate,
    service: SchoolService = Depends(get_school_service),
) -> SchoolResponse:
    """
    Register a school by its email domain.

    The domain is stored lower-cased. Only one live school may use a domain;
    the domain of a deleted school can be registered again.
    """
    school = await service.create_school(school_data.model_dump())
    return SchoolResponse.model_validate(school)


# Declared before /{school_id} so "match" is not parsed as an ID
@router.get(
    "/match",
    response_model=SchoolMatchResponse,
    responses={
        200: {"description": "Match computed (school may be null)"},
        422: {"model": ProblemDetails, "description": "Invalid email address"},
    },
)
async def match_school(
    email: str = Query(..., description="Email address of the registering user"),
    service: SchoolService = Depends(get_school_service),
) -> SchoolMatchResponse:
    """
    Find the school for an email address.

    ``alex@student.kirkwood.edu`` is tried as ``student.kirkwood.edu`` and then
    ``kirkwood.edu``. The redirect is the school page or ``/``.
    """
    match = await service.match_school_for_email(email)
    school = SchoolResponse.model_validate(match.school) if match.school else None
    return SchoolMatchResponse(school=school, redirect=match.redirect)


@router.get(
    "/{school_id}",
    response_model=SchoolDetailResponse,
    responses={
        200: {"description": "School retrieved successfully"},
        404: {"model": ProblemDetails, "description": "School not found"},
    },
)
async def get_school(
    school_id: int,
    service: SchoolService = Depends(get_school_service),
) -> SchoolDetailResponse:
    """Get a school with its campus locations."""
    detail = await service.get_school(school_id)
    return SchoolDetailResponse.model_validate(detail)


@router.delete(
    "/{school_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={204: {"description": "School deleted (or already gone)"}},
)
async def delete_school(
    school_id: int,
    service: SchoolService = Depends(get_school_service),
) -> Response:
    """Soft-delete a school and its campus locations."""
    await service.delete_school(school_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{school_id}/locations",
    response_model=SchoolLocationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Location created successfully"},
        404: {"model": ProblemDetails, "description": "School not found"},
        422: {"model": ProblemDetails, "description": "Validation error"},
    },
)
async def add_school_location(
    school_id: int,
    location_data: SchoolLocationCreate,
    service: SchoolService = Depends(get_school_service),
) -> SchoolLocationResponse:
    """Add a campus location to a school."""
    location = await service.add_location(school_id, location_data.model_dump())
    return SchoolLocationResponse.model_validate(location)
