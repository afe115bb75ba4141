"""Business, location and incentive API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..config import get_config
from ..services.business_service import BusinessService
from ..services.dependencies import get_business_service
from .schemas import (
    BusinessCreate,
    BusinessDetailResponse,
    BusinessListResponse,
    BusinessLocationCreate,
    BusinessLocationResponse,
    BusinessResponse,
    IncentiveCreate,
    IncentiveCreatedResponse,
    IncentiveListResponse,
    IncentiveSummaryResponse,
    ProblemDetails,
)

router = APIRouter(prefix="/v1", tags=["businesses"])


@router.get(
    "/businesses",
    response_model=BusinessListResponse,
    responses={
        200: {"description": "Page of businesses retrieved successfully"},
        422: {"model": ProblemDetails, "description": "Invalid page"},
    },
)
async def list_businesses(
    page: int = Query(1, description="1-based page number"),
    page_size: Optional[int] = Query(None, description="Businesses per page"),
    service: BusinessService = Depends(get_business_service),
) -> BusinessListResponse:
    """
    List live businesses ordered by name.

    Deleted businesses are never counted or returned.
    """
    size = page_size if page_size is not None else get_config().app.page_size
    result = await service.list_businesses(page=page, page_size=size)
    return BusinessListResponse(
        businesses=[BusinessResponse.model_validate(b) for b in result.items],
        total_items=result.total_items,
        total_pages=result.total_pages,
        current_page=result.current_page,
        page_size=result.page_size,
    )


@router.post(
    "/businesses",
    response_model=BusinessResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Business created successfully"},
        422: {"model": ProblemDetails, "description": "Validation error"},
    },
)
async def create_business(
    business_data: BusinessCreate,
    service: BusinessService = Depends(get_business_service),
) -> BusinessResponse:
    """Create a new business. The business type must exist."""
    business = await service.create_business(business_data.model_dump())
    return BusinessResponse.model_validate(business)


@router.get(
    "/businesses/{business_id}",
    response_model=BusinessDetailResponse,
    responses={
        200: {"description": "Business retrieved successfully"},
        404: {"model": ProblemDetails, "description": "Business not found"},
    },
)
async def get_business(
    business_id: int,
    service: BusinessService = Depends(get_business_service),
) -> BusinessDetailResponse:
    """
    Get a business with its live locations and active incentives.

    Each incentive carries its formatted discount, whether it is valid today
    and a short validity string.
    """
    detail = await service.get_business_with_active_incentives(business_id)
    return BusinessDetailResponse.model_validate(detail)


@router.delete(
    "/businesses/{business_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={204: {"description": "Business deleted (or already gone)"}},
)
async def delete_business(
    business_id: int,
    service: BusinessService = Depends(get_business_service),
) -> Response:
    """Soft-delete a business together with its locations and incentives."""
    await service.delete_business(business_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/businesses/{business_id}/incentives",
    response_model=IncentiveListResponse,
    responses={
        200: {"description": "Active incentives retrieved successfully"},
        404: {"model": ProblemDetails, "description": "Business not found"},
    },
)
async def get_business_incentives(
    business_id: int,
    service: BusinessService = Depends(get_business_service),
) -> IncentiveListResponse:
    """Get the active incentives of a business, evaluated for today."""
    summaries = await service.get_active_incentives(business_id)
    return IncentiveListResponse(
        incentives=[IncentiveSummaryResponse.model_validate(s) for s in summaries]
    )


@router.post(
    "/businesses/{business_id}/incentives",
    response_model=IncentiveCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Incentive created successfully"},
        404: {"model": ProblemDetails, "description": "Business not found"},
        422: {"model": ProblemDetails, "description": "Validation error"},
    },
)
async def add_incentive(
    business_id: int,
    incentive_data: IncentiveCreate,
    service: BusinessService = Depends(get_business_service),
) -> IncentiveCreatedResponse:
    """Add an incentive to a business."""
    incentive = await service.add_incentive(business_id, incentive_data.model_dump())
    return IncentiveCreatedResponse.model_validate(incentive)


@router.post(
    "/businesses/{business_id}/locations",
    response_model=BusinessLocationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Location created successfully"},
        404: {"model": ProblemDetails, "description": "Business not found"},
    },
)
async def add_location(
    business_id: int,
    location_data: BusinessLocationCreate,
    service: BusinessService = Depends(get_business_service),
) -> BusinessLocationResponse:
    """Add a location, optionally with a street address, to a business."""
    location = await service.add_location(business_id, location_data.model_dump())
    return BusinessLocationResponse.model_validate(location)


@router.delete(
    "/incentives/{incentive_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={204: {"description": "Incentive deleted (or already gone)"}},
)
async def delete_incentive(
    incentive_id: int,
    service: BusinessService = Depends(get_business_service),
) -> Response:
    """Soft-delete an incentive."""
    await service.delete_incentive(incentive_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/locations/{location_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={204: {"description": "Location deleted (or already gone)"}},
)
async def delete_location(
    location_id: int,
    service: BusinessService = Depends(get_business_service),
) -> Response:
    """Soft-delete a business location."""
    await service.delete_location(location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
