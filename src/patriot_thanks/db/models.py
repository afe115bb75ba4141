"""SQLAlchemy models for Patriot Thanks."""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Date,
    DateTime,
    Boolean,
    Numeric,
    ForeignKey,
    Table,
    Index,
    text,
)
from sqlalchemy.orm import relationship

from .database import Base
from ..core.enums import SchoolStatus, LocationStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """created_at / updated_at maintained on insert and update."""

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )


class SoftDeleteMixin:
    """Rows are hidden by setting deleted_at instead of being removed."""

    deleted_at = Column(DateTime(timezone=True), nullable=True, default=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class UsState(Base):
    """A US state referenced by addresses."""

    __tablename__ = "us_states"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(2), nullable=False, unique=True)
    name = Column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<UsState(code='{self.code}')>"


class Address(TimestampMixin, Base):
    """A street address for a business location."""

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    street_address = Column(String(255), nullable=False)
    address_line_2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    state_id = Column(Integer, ForeignKey("us_states.id"), nullable=False)
    zip_code = Column(String(10), nullable=False)
    latitude = Column(Numeric(10, 7), nullable=True)
    longitude = Column(Numeric(10, 7), nullable=True)

    state = relationship("UsState", lazy="joined")

    @property
    def full_address(self) -> str:
        """Single-line address, e.g. '123 Main St, Suite 4, Cedar Rapids, IA 52401'."""
        parts = [self.street_address]
        if self.address_line_2:
            parts.append(self.address_line_2)
        parts.append(self.city)
        state_code = self.state.code if self.state is not None else ""
        return f"{', '.join(parts)}, {state_code} {self.zip_code}"


class BusinessType(Base):
    """Category of business (Restaurant, Retail, Automotive, ...)."""

    __tablename__ = "business_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<BusinessType(id={self.id}, name='{self.name}')>"


class IncentiveType(Base):
    """Audience an incentive targets (Veteran, Active Duty, First Responder, ...)."""

    __tablename__ = "incentive_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<IncentiveType(id={self.id}, name='{self.name}')>"


business_incentive_types = Table(
    "business_incentive_types",
    Base.metadata,
    Column("incentive_id", Integer, ForeignKey("incentives.id"), primary_key=True),
    Column(
        "incentive_type_id", Integer, ForeignKey("incentive_types.id"), primary_key=True
    ),
)


class Business(TimestampMixin, SoftDeleteMixin, Base):
    """A business offering incentives.

    Locations and incentives reference the business through ``business_id``
    and are loaded through their repositories, so there is no object cycle
    between a business and its children.
    """

    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    website = Column(String(255), nullable=True)
    business_type_id = Column(Integer, ForeignKey("business_types.id"), nullable=False)
    submitted_by_user_id = Column(Integer, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    business_type = relationship("BusinessType", lazy="joined")

    __table_args__ = (Index("ix_business_deleted_at", "deleted_at"),)

    def __repr__(self) -> str:
        return f"<Business(id={self.id}, name='{self.name}')>"


class BusinessLocation(TimestampMixin, SoftDeleteMixin, Base):
    """A physical location of a business."""

    __tablename__ = "business_locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False)
    address_id = Column(Integer, ForeignKey("addresses.id"), nullable=True)
    location_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    hours_of_operation = Column(String(255), nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    address = relationship("Address", lazy="joined")

    __table_args__ = (Index("ix_business_location_business", "business_id"),)

    def __repr__(self) -> str:
        return f"<BusinessLocation(id={self.id}, business_id={self.business_id})>"


class Incentive(TimestampMixin, SoftDeleteMixin, Base):
    """A discount offered by a business."""

    __tablename__ = "incentives"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=True)
    discount_percentage = Column(Numeric(5, 2), nullable=True)
    terms_and_conditions = Column(Text, nullable=True)
    verification_required = Column(String(255), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    submitted_by_user_id = Column(Integer, nullable=True)

    incentive_types = relationship(
        "IncentiveType",
        secondary=business_incentive_types,
        lazy="selectin",
        order_by="IncentiveType.display_order",
    )

    __table_args__ = (
        Index("ix_incentive_business_active", "business_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Incentive(id={self.id}, title='{self.title}')>"


class School(TimestampMixin, SoftDeleteMixin, Base):
    """A school matched to users through its email domain."""

    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    domain = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=SchoolStatus.ACTIVE.value)

    # Domains are unique among live schools only
    __table_args__ = (
        Index(
            "uq_school_domain_live",
            "domain",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, domain='{self.domain}')>"


class SchoolLocation(TimestampMixin, SoftDeleteMixin, Base):
    """A campus location within a school."""

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    school_id = Column(Integer, ForeignKey("schools.id"), nullable=False)
    parent_location_id = Column(Integer, ForeignKey("locations.id"), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    address = Column(String(255), nullable=True)
    latitude = Column(Numeric(10, 7), nullable=True)
    longitude = Column(Numeric(10, 7), nullable=True)
    status = Column(String(20), nullable=False, default=LocationStatus.ACTIVE.value)

    __table_args__ = (Index("ix_location_school", "school_id"),)

    def __repr__(self) -> str:
        return f"<SchoolLocation(id={self.id}, name='{self.name}')>"
