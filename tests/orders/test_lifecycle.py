from datetime import datetime, timedelta, timezone

import pytest

from agromarket.orders.domain.lifecycle import (
    build_status_update,
    can_cancel,
    ensure_not_finalized,
    is_finalized,
    validate_target_status,
)
from agromarket.orders.exceptions import InvalidStatusError, OrderAlreadyFinalizedError


@pytest.mark.parametrize("status, expected", [
    ("pending", True),
    ("confirmed", True),
    ("preparing", False),
    ("shipped", False),
    ("delivered", False),
    ("cancelled", False),
])
def test_can_cancel(status, expected):
    assert can_cancel(status) is expected


@pytest.mark.parametrize("status, expected", [
    ("pending", False),
    ("shipped", False),
    ("delivered", True),
    ("cancelled", True),
])
def test_is_finalized(status, expected):
    assert is_finalized(status) is expected


@pytest.mark.parametrize("target", ["pending", "cancelled", "lost", ""])
def test_invalid_targets_rejected(target):
    with pytest.raises(InvalidStatusError):
        validate_target_status(target)


def test_finalized_order_is_frozen():
    with pytest.raises(OrderAlreadyFinalizedError):
        ensure_not_finalized(1, "delivered")
    with pytest.raises(OrderAlreadyFinalizedError):
        build_status_update(1, "cancelled", "confirmed")


def test_delivery_stamps_timestamp():
    now = datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)
    values = build_status_update(1, "shipped", "delivered", now=now)
    assert values == {"status": "delivered", "updated_at": now, "delivered_at": now}


def test_backward_transition_allowed():
    values = build_status_update(1, "shipped", "confirmed")
    assert values["status"] == "confirmed"
    assert "delivered_at" not in values


def test_expected_delivery_normalized_to_utc():
    paris = timezone(timedelta(hours=2))
    values = build_status_update(1, "confirmed", "shipped", expected_delivery_at=datetime(2030, 6, 15, 9, 0, tzinfo=paris))
    assert values["expected_delivery_at"] == datetime(2030, 6, 15, 7, 0, tzinfo=timezone.utc)
    assert values["expected_delivery_at"].tzinfo == timezone.utc


def test_default_timestamp_is_timezone_aware():
    values = build_status_update(1, "shipped", "delivered")
    assert values["updated_at"].tzinfo is not None
    assert values["delivered_at"] == values["updated_at"]
