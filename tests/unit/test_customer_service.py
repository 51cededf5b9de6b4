"""CustomerService tests against an in-memory database."""

from unittest.mock import MagicMock

import pytest

from conftest import insert_booking, utc
from repositories.booking_repo import BookingRepository
from services.customer_service import CustomerService
from utils.error_handling import DataUnavailableError, NotFoundError, ValidationError


@pytest.fixture
def repository(engine):
    return BookingRepository(engine)


@pytest.fixture
def service(repository):
    return CustomerService(repository=repository)


@pytest.fixture
def seeded(engine):
    insert_booking(engine, guest_email="a@x.com", total_amount=100, created_at=utc(2024, 1, 1))
    insert_booking(engine, guest_email="b@x.com", total_amount=50, created_at=utc(2024, 2, 1))
    latest = insert_booking(
        engine,
        guest_email="a@x.com",
        guest_phone="+221770000001",
        total_amount=200,
        created_at=utc(2024, 3, 1),
    )
    insert_booking(engine, guest_email=None, total_amount=999, created_at=utc(2024, 3, 5))
    return latest


class TestListCustomers:
    def test_aggregates_bookings(self, seeded, service):
        page = service.list_customers(1, 20)

        assert page.count == 2
        assert [c.customer_email for c in page.data] == ["a@x.com", "b@x.com"]
        first = page.data[0]
        assert (first.booking_count, first.total_spent) == (2, 300)
        assert first.last_booking_date == utc(2024, 3, 1)
        assert first.customer_phone == "+221770000001"

    def test_search_is_pushed_down(self, seeded, service):
        page = service.list_customers(1, 20, search="B@X")
        assert [c.customer_email for c in page.data] == ["b@x.com"]

    def test_page_size_one(self, seeded, service):
        second = service.list_customers(2, 1)
        assert [c.customer_email for c in second.data] == ["b@x.com"]
        assert second.total_pages == 2

    def test_invalid_page(self, seeded, service):
        with pytest.raises(ValidationError):
            service.list_customers(0, 20)

    def test_repository_failure_surfaces_as_unavailable(self):
        repository = MagicMock()
        repository.list_all.side_effect = DataUnavailableError()
        with pytest.raises(DataUnavailableError):
            CustomerService(repository=repository).list_customers()


class TestCustomerDetail:
    def test_get_customer(self, seeded, service):
        customer = service.get_customer("a@x.com")
        assert customer.booking_count == 2
        assert customer.customer_name == "a"

    def test_unknown_customer(self, service):
        with pytest.raises(NotFoundError):
            service.get_customer("nobody@x.com")


class TestCustomerMetadata:
    def test_notes_are_written_to_latest_booking(self, seeded, service, repository):
        booking = service.update_notes("a@x.com", "Prefers aisle seats")

        assert booking.id == seeded
        assert repository.get(seeded)["metadata"]["customer_notes"] == "Prefers aisle seats"
        assert service.get_customer("a@x.com").notes == "Prefers aisle seats"

    def test_tags_are_idempotent_and_removable(self, seeded, service):
        service.add_tag("a@x.com", "vip")
        service.add_tag("a@x.com", "vip")
        service.add_tag("a@x.com", "umra")
        assert service.get_customer("a@x.com").tags == ["vip", "umra"]

        service.remove_tag("a@x.com", "vip")
        assert service.get_customer("a@x.com").tags == ["umra"]

    def test_remove_tag_reaches_older_bookings(self, engine, service, repository):
        first = insert_booking(engine, guest_email="c@x.com", created_at=utc(2024, 1, 1))
        service.add_tag("c@x.com", "vip")
        second = insert_booking(engine, guest_email="c@x.com", created_at=utc(2024, 2, 1))

        booking = service.remove_tag("c@x.com", "vip")

        assert booking.id == second
        assert service.get_customer("c@x.com").tags == []
        assert repository.get(first)["metadata"]["customer_tags"] == []

    def test_remove_tag_leaves_untagged_bookings_alone(self, engine, service, repository):
        plain = insert_booking(
            engine, guest_email="c@x.com", metadata={"customer_notes": "n"}, created_at=utc(2024, 1, 1)
        )
        insert_booking(engine, guest_email="c@x.com", created_at=utc(2024, 2, 1))

        service.remove_tag("c@x.com", "vip")

        assert repository.get(plain)["metadata"] == {"customer_notes": "n"}

    def test_blank_notes_do_not_bring_back_older_notes(self, engine, service, repository):
        first = insert_booking(engine, guest_email="c@x.com", created_at=utc(2024, 1, 1))
        service.update_notes("c@x.com", "Old note")
        insert_booking(engine, guest_email="c@x.com", created_at=utc(2024, 2, 1))

        service.update_notes("c@x.com", "")

        assert service.get_customer("c@x.com").notes is None
        assert "customer_notes" not in repository.get(first)["metadata"]

    def test_empty_tag_rejected(self, seeded, service):
        with pytest.raises(ValidationError):
            service.add_tag("a@x.com", "")

    def test_metadata_update_for_unknown_customer(self, service):
        with pytest.raises(NotFoundError):
            service.update_notes("nobody@x.com", "hello")


class TestCustomerStats:
    def test_stats(self, seeded, service):
        stats = service.get_stats(now=utc(2024, 3, 20))

        assert stats.total_customers == 2
        assert stats.recurring_customers == 1
        assert stats.average_order_value == pytest.approx(1349 / 4)
        assert stats.new_customers_this_month == 1
        assert stats.conversion_rate == 50

    def test_stats_without_bookings(self, service):
        stats = service.get_stats(now=utc(2024, 3, 20))
        assert stats.total_customers == 0
        assert stats.average_order_value == 0
        assert stats.conversion_rate == 0
