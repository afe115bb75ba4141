"""Enums for the Patriot Thanks application."""

from enum import Enum


class SchoolStatus(str, Enum):
    """Status of a school."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class LocationStatus(str, Enum):
    """Status of a school location."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"
    COMING_SOON = "COMING_SOON"
