"""Unit tests for database models."""

from datetime import datetime, timezone

import pytest

from patriot_thanks.db.models import Address, Business, School, UsState


@pytest.mark.unit
class TestAddressModel:
    """Test the Address model."""

    def test_full_address(self):
        address = Address(
            street_address="123 Main St",
            address_line_2="Suite 4",
            city="Cedar Rapids",
            zip_code="52401",
            state=UsState(code="IA", name="Iowa"),
        )
        assert address.full_address == "123 Main St, Suite 4, Cedar Rapids, IA 52401"

    def test_full_address_without_second_line(self):
        address = Address(
            street_address="9 Elm St",
            city="Iowa City",
            zip_code="52240",
            state=UsState(code="IA", name="Iowa"),
        )
        assert address.full_address == "9 Elm St, Iowa City, IA 52240"


@pytest.mark.unit
class TestSoftDeleteMixin:
    """Test the deleted_at flag on soft-deletable models."""

    def test_new_business_is_not_deleted(self):
        business = Business(name="Joe's Diner", business_type_id=1)
        assert business.is_deleted is False

    def test_stamped_school_is_deleted(self):
        school = School(name="Kirkwood", domain="kirkwood.edu")
        school.deleted_at = datetime.now(timezone.utc)
        assert school.is_deleted is True

    def test_repr(self):
        assert "kirkwood.edu" in repr(School(name="Kirkwood", domain="kirkwood.edu"))
