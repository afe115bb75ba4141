"""Reference data endpoints (business and incentive types)."""

from typing import List

from fastapi import APIRouter, Depends

from ..services.business_service import BusinessService
from ..services.dependencies import get_business_service
from .schemas import BusinessTypeResponse, IncentiveTypeResponse

router = APIRouter(prefix="/v1", tags=["lookups"])


@router.get("/business-types", response_model=List[BusinessTypeResponse])
async def list_business_types(
    service: BusinessService = Depends(get_business_service),
) -> List[BusinessTypeResponse]:
    """List business types by display order."""
    types = await service.list_business_types()
    return [BusinessTypeResponse.model_validate(t) for t in types]


@router.get("/incentive-types", response_model=List[IncentiveTypeResponse])
async def list_incentive_types(
    service: BusinessService = Depends(get_business_service),
) -> List[IncentiveTypeResponse]:
    """List incentive types by display order."""
    types = await service.list_incentive_types()
    return [IncentiveTypeResponse.model_validate(t) for t in types]
