"""
Pure functions for evaluating incentives.

Validity, discount formatting and the validity display string are computed
from an incentive record and an explicit ``today``. Nothing here reads the
clock or touches the database.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Tuple

NO_DISCOUNT_TEXT = "See details"

_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class IncentiveTypeSummary:
    """Id and name of an incentive type."""

    id: Optional[int]
    name: str


@dataclass(frozen=True)
class IncentiveSummary:
    """Serializable view of an incentive without its business back-reference."""

    id: Optional[int]
    title: str
    description: str
    discount_amount: Optional[Decimal]
    discount_percentage: Optional[Decimal]
    verification_required: Optional[str]
    start_date: Optional[date]
    end_date: Optional[date]
    formatted_discount: str
    currently_valid: bool
    validity_display: str
    incentive_types: Tuple[IncentiveTypeSummary, ...] = field(default_factory=tuple)


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_display_date(value: date) -> str:
    """Format a date as 'Dec 30, 2026' independent of the process locale."""
    return f"{_MONTH_ABBREVIATIONS[value.month - 1]} {value.day}, {value.year}"


def is_currently_valid(incentive, today: date) -> bool:
    """
    Check whether an incentive is valid on ``today``.

    Valid means started (or no start date), not yet past its end date (or no
    end date), and flagged active. Both date bounds are inclusive.
    """
    after_start = incentive.start_date is None or today >= incentive.start_date
    before_end = incentive.end_date is None or today <= incentive.end_date
    return after_start and before_end and incentive.is_active is True


def format_discount(incentive) -> str:
    """
    Render the discount for display.

    A positive percentage wins ("10%", "12.5%"); otherwise a positive amount
    is shown as "$5.00 off"; otherwise the generic fallback text.
    """
    percentage = _as_decimal(incentive.discount_percentage)
    if percentage is not None and percentage > 0:
        return f"{format(percentage.normalize(), 'f')}%"

    amount = _as_decimal(incentive.discount_amount)
    if amount is not None and amount > 0:
        return f"${amount.quantize(_CENTS, rounding=ROUND_HALF_UP)} off"

    return NO_DISCOUNT_TEXT


def compute_validity_display(incentive, today: date) -> str:
    """
    Build the short validity string shown next to an incentive.

    - Start date in the future: "Starts Jul 1, 2025"
    - Otherwise, any end date: "Valid until Dec 30, 2026"
    - No dates: ""

    The end date is shown even after it has passed; callers use
    ``currently_valid`` to decide whether the offer still applies.
    """
    start = incentive.start_date
    end = incentive.end_date

    if start is not None and start > today:
        return f"Starts {format_display_date(start)}"

    if end is not None:
        return f"Valid until {format_display_date(end)}"

    return ""


def to_summary(incentive, today: date) -> IncentiveSummary:
    """Project an incentive record onto an IncentiveSummary for ``today``."""
    types = tuple(
        IncentiveTypeSummary(id=incentive_type.id, name=incentive_type.name)
        for incentive_type in (incentive.incentive_types or ())
    )
    return IncentiveSummary(
        id=incentive.id,
        title=incentive.title,
        description=incentive.description,
        discount_amount=_as_decimal(incentive.discount_amount),
        discount_percentage=_as_decimal(incentive.discount_percentage),
        verification_required=incentive.verification_required,
        start_date=incentive.start_date,
        end_date=incentive.end_date,
        formatted_discount=format_discount(incentive),
        currently_valid=is_currently_valid(incentive, today),
        validity_display=compute_validity_display(incentive, today),
        incentive_types=types,
    )
