"""Tests for folding booking rows into paged customers."""

import random
from datetime import datetime, timezone

import pytest

from models.booking import Booking
from services.customer_aggregator import (
    aggregate_customers,
    customer_name_for,
    fold_customers,
    sort_by_recency,
)
from utils.error_handling import ValidationError


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _booking(email, amount, created_at, **extra):
    return {
        "id": f"{email}-{amount}-{created_at}",
        "booking_type": "flight",
        "status": "confirmed",
        "total_amount": amount,
        "guest_email": email,
        "created_at": created_at,
        **extra,
    }


@pytest.fixture
def sample_bookings():
    return [
        _booking("a@x.com", 100, _utc(2024, 1, 1)),
        _booking("b@x.com", 50, _utc(2024, 2, 1)),
        _booking("a@x.com", 200, _utc(2024, 3, 1)),
    ]


class TestAggregateCustomers:
    def test_groups_by_email_and_orders_by_last_booking(self, sample_bookings):
        page = aggregate_customers(sample_bookings, page=1, limit=20)

        assert page.count == 2
        assert page.total_pages == 1
        assert [c.customer_email for c in page.data] == ["a@x.com", "b@x.com"]

        first, second = page.data
        assert first.booking_count == 2
        assert first.total_spent == 300
        assert first.last_booking_date == _utc(2024, 3, 1)
        assert second.booking_count == 1
        assert second.total_spent == 50

    def test_bookings_without_email_are_ignored(self, sample_bookings):
        bookings = sample_bookings + [
            _booking(None, 999, _utc(2024, 4, 1)),
            _booking("", 999, _utc(2024, 4, 2)),
        ]
        page = aggregate_customers(bookings)

        assert page.count == 2
        assert sum(c.total_spent for c in page.data) == 350

    @pytest.mark.parametrize(
        "amounts,expected",
        [([0], 0), ([0, 0], 0), ([-5, 0], -5), ([-5, 10], 5), ([100.5, -0.5, 0], 100)],
    )
    def test_total_spent_is_the_exact_sum(self, amounts, expected):
        bookings = [_booking("a@x.com", amount, _utc(2024, 1, i + 1)) for i, amount in enumerate(amounts)]

        (customer,) = aggregate_customers(bookings).data

        assert customer.booking_count == len(amounts)
        assert customer.total_spent == expected

    def test_empty_input(self):
        page = aggregate_customers([])
        assert page.data == []
        assert page.count == 0
        assert page.total_pages == 0

    def test_pages_partition_the_customers(self):
        bookings = [
            _booking(f"c{i}@x.com", i, _utc(2024, 1, i + 1)) for i in range(7)
        ]
        pages = [aggregate_customers(bookings, page=p, limit=3) for p in (1, 2, 3)]

        assert [len(p.data) for p in pages] == [3, 3, 1]
        assert all(p.count == 7 and p.total_pages == 3 for p in pages)
        full = aggregate_customers(bookings, page=1, limit=7).data
        assert [c for p in pages for c in p.data] == full
        assert aggregate_customers(bookings, page=4, limit=3).data == []

    def test_result_does_not_depend_on_input_order(self, sample_bookings):
        expected = aggregate_customers(sample_bookings)
        shuffled = list(sample_bookings)
        random.Random(7).shuffle(shuffled)
        result = aggregate_customers(shuffled)

        summary = lambda page: [  # noqa: E731
            (c.customer_email, c.booking_count, c.total_spent, c.last_booking_date)
            for c in page.data
        ]
        assert summary(result) == summary(expected)

    def test_search_matches_email_or_phone_case_insensitively(self, sample_bookings):
        bookings = sample_bookings + [
            _booking("c@y.com", 10, _utc(2024, 1, 5), guest_phone="+221770001122"),
        ]

        assert [c.customer_email for c in aggregate_customers(bookings, search="A@X").data] == [
            "a@x.com"
        ]
        assert [c.customer_email for c in aggregate_customers(bookings, search="77000").data] == [
            "c@y.com"
        ]
        assert aggregate_customers(bookings, search="nobody").count == 0

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 5)])
    def test_invalid_pagination_is_rejected(self, sample_bookings, page, limit):
        with pytest.raises(ValidationError):
            aggregate_customers(sample_bookings, page=page, limit=limit)

    def test_accepts_booking_models(self, sample_bookings):
        models = [Booking(**row) for row in sample_bookings]
        page = aggregate_customers(models)
        assert page.data[0].total_spent == 300

    def test_serializes_total_pages_in_camel_case(self, sample_bookings):
        body = aggregate_customers(sample_bookings).model_dump(mode="json", by_alias=True)
        assert body["totalPages"] == 1
        assert "total_pages" not in body


class TestFoldCustomers:
    def test_notes_and_tags_come_from_metadata(self):
        bookings = [
            _booking(
                "a@x.com",
                10,
                _utc(2024, 3, 1),
                metadata={"customer_notes": "VIP", "customer_tags": ["umra", "vip"]},
            ),
            _booking(
                "a@x.com",
                10,
                _utc(2024, 1, 1),
                metadata={"customer_notes": "old note", "customer_tags": ["vip", "family"]},
            ),
        ]
        (customer,) = fold_customers(bookings)

        assert customer.notes == "VIP"
        assert customer.tags == ["umra", "vip", "family"]

    def test_last_non_empty_phone_wins(self):
        bookings = [
            _booking("a@x.com", 10, _utc(2024, 3, 1), guest_phone="111"),
            _booking("a@x.com", 10, _utc(2024, 2, 1), guest_phone="222"),
            _booking("a@x.com", 10, _utc(2024, 1, 1), guest_phone=None),
        ]
        (customer,) = fold_customers(bookings)
        assert customer.customer_phone == "222"

    def test_undated_customers_sort_last(self):
        customers = fold_customers(
            [
                _booking("old@x.com", 1, None),
                _booking("new@x.com", 1, _utc(2024, 5, 1)),
                _booking("mid@x.com", 1, "2024-02-01T10:00:00+00:00"),
            ]
        )
        ordered = [c.customer_email for c in sort_by_recency(customers)]
        assert ordered == ["new@x.com", "mid@x.com", "old@x.com"]

    def test_zulu_timestamps_are_parsed(self):
        (customer,) = fold_customers([_booking("a@x.com", 1, "2024-02-01T10:00:00Z")])
        assert customer.last_booking_date == _utc(2024, 2, 1, 10)

    def test_naive_timestamps_are_treated_as_utc(self):
        (customer,) = fold_customers([_booking("a@x.com", 1, datetime(2024, 1, 1, 12))])
        assert customer.last_booking_date == _utc(2024, 1, 1, 12)


class TestCustomerName:
    def test_uses_first_passenger(self):
        booking = _booking(
            "a@x.com", 1, None, passenger_details={"passengers": [{"name": " Awa Diop "}]}
        )
        assert customer_name_for(booking) == "Awa Diop"

    def test_falls_back_to_email_local_part(self):
        assert customer_name_for(_booking("moussa@x.com", 1, None)) == "moussa"

    def test_falls_back_to_client(self):
        assert customer_name_for(_booking(None, 1, None)) == "Client"
