"""Pydantic models for API request/response validation."""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict  # type: ignore

from ..core.enums import LocationStatus, SchoolStatus


# Base response models
class BaseResponse(BaseModel):
    """Base response model with common fields."""

    model_config = ConfigDict(from_attributes=True)


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs."""

    type: str = Field(description="A URI reference that identifies the problem type")
    title: str = Field(
        description="A short, human-readable summary of the problem type"
    )
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(
        None, description="A human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None, description="A URI reference that identifies the specific occurrence"
    )
    errors: Optional[Dict[str, str]] = Field(
        None, description="Invalid field names mapped to a message"
    )


# Lookup schemas
class BusinessTypeResponse(BaseResponse):
    """Schema for business type response."""

    id: int
    name: str
    description: Optional[str] = None
    display_order: int


class IncentiveTypeResponse(BaseResponse):
    """Schema for incentive type response."""

    id: int
    name: str
    description: Optional[str] = None
    display_order: int


# Business-related schemas
# Required text fields are Optional here so that blank or missing values reach
# the domain rules and come back as one ValidationFailure naming every field.
class BusinessCreate(BaseModel):
    """Schema for creating a new business."""

    name: Optional[str] = Field(None, description="Business name", max_length=255)
    business_type_id: Optional[int] = Field(None, description="Business type ID")
    description: Optional[str] = Field(None, description="Business description")
    website: Optional[str] = Field(None, description="Website URL", max_length=255)
    submitted_by_user_id: Optional[int] = Field(None, description="Submitting user ID")
    is_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)


class BusinessResponse(BaseResponse):
    """Schema for business response."""

    id: int
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    business_type_id: int
    is_verified: bool
    is_active: bool
    created_at: datetime


class BusinessListResponse(BaseModel):
    """Schema for one page of businesses."""

    businesses: List[BusinessResponse]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int


class AddressCreate(BaseModel):
    """Schema for a street address."""

    street_address: str = Field(min_length=1, max_length=255)
    address_line_2: Optional[str] = Field(None, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state_id: int
    zip_code: str = Field(min_length=1, max_length=10)
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None


class AddressResponse(BaseResponse):
    """Schema for address response."""

    id: Optional[int] = None
    street_address: str
    address_line_2: Optional[str] = None
    city: str
    state_id: int
    zip_code: str
    full_address: str


class BusinessLocationCreate(BaseModel):
    """Schema for adding a location to a business."""

    location_name: Optional[str] = Field(None, max_length=255)
    address: Optional[AddressCreate] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    hours_of_operation: Optional[str] = Field(None, max_length=255)
    is_primary: bool = Field(default=False)
    is_active: bool = Field(default=True)


class BusinessLocationResponse(BaseResponse):
    """Schema for business location response."""

    id: int
    business_id: int
    location_name: Optional[str] = None
    address: Optional[AddressResponse] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    hours_of_operation: Optional[str] = None
    is_primary: bool
    is_active: bool


# Incentive-related schemas
class IncentiveCreate(BaseModel):
    """Schema for adding an incentive to a business."""

    title: Optional[str] = Field(None, description="Incentive title", max_length=255)
    description: Optional[str] = Field(None, description="What the incentive offers")
    incentive_type_ids: List[int] = Field(default_factory=list)
    discount_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    discount_percentage: Optional[Decimal] = Field(None, decimal_places=2)
    terms_and_conditions: Optional[str] = None
    verification_required: Optional[str] = Field(None, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = Field(default=True)
    submitted_by_user_id: Optional[int] = None


class IncentiveCreatedResponse(BaseResponse):
    """Schema for a newly stored incentive."""

    id: int
    business_id: int
    title: str
    description: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool


class IncentiveTypeSummaryResponse(BaseResponse):
    id: Optional[int] = None
    name: str


class IncentiveSummaryResponse(BaseResponse):
    """Schema for an incentive evaluated for today."""

    id: Optional[int] = None
    title: str
    description: str
    discount_amount: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None
    verification_required: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    formatted_discount: str
    currently_valid: bool
    validity_display: str
    incentive_types: List[IncentiveTypeSummaryResponse] = Field(default_factory=list)


class IncentiveListResponse(BaseModel):
    """Schema for the active incentives of a business."""

    incentives: List[IncentiveSummaryResponse]


class BusinessDetailResponse(BaseResponse):
    """Schema for a business with its locations and active incentives."""

    id: int
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    is_verified: bool
    is_active: bool
    business_type: Optional[BusinessTypeResponse] = None
    locations: List[BusinessLocationResponse] = Field(default_factory=list)
    incentives: List[IncentiveSummaryResponse] = Field(default_factory=list)


# School-related schemas
class SchoolCreate(BaseModel):
    """Schema for creating a new school."""

    name: Optional[str] = Field(None, description="School name", max_length=255)
    domain: Optional[str] = Field(
        None, description="Email domain, e.g. kirkwood.edu", max_length=255
    )
    status: SchoolStatus = Field(default=SchoolStatus.ACTIVE)


class SchoolResponse(BaseResponse):
    """Schema for school response."""

    id: int
    name: str
    domain: str
    status: SchoolStatus


class SchoolListResponse(BaseModel):
    """Schema for one page of schools."""

    schools: List[SchoolResponse]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int


class SchoolLocationCreate(BaseModel):
    """Schema for adding a campus location to a school."""

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = Field(None, max_length=255)
    parent_location_id: Optional[int] = None
    status: LocationStatus = Field(default=LocationStatus.ACTIVE)


class SchoolLocationResponse(BaseResponse):
    """Schema for school location response."""

    id: int
    school_id: int
    parent_location_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    status: LocationStatus


class SchoolDetailResponse(SchoolResponse):
    """Schema for a school with its campus locations."""

    locations: List[SchoolLocationResponse] = Field(default_factory=list)


class SchoolMatchResponse(BaseModel):
    """Schema for the school matched to an email."""

    school: Optional[SchoolResponse] = None
    redirect: str
