"""Tests for the StockAlert aggregate."""

import pytest
from merchandising.alerts.alert import StockAlert
from merchandising.alerts.events import StockAlertRead, StockAlertRecorded
from protean.exceptions import ValidationError


def _record(**overrides):
    defaults = {
        "product_id": "p-1",
        "product_title": "Linen Shirt",
        "alert_type": "low_stock",
        "message": "Linen Shirt is low on stock (2 left)",
        "remaining_stock": 2,
    }
    defaults.update(overrides)
    return StockAlert.record(**defaults)


class TestRecord:
    def test_record(self):
        alert = _record()
        assert alert.is_read is False
        assert alert.notified_at is not None
        assert isinstance(alert._events[0], StockAlertRecorded)
        assert alert._events[0].alert_id == alert.id

    def test_unknown_alert_type_is_rejected(self):
        with pytest.raises(ValidationError):
            _record(alert_type="restocked")


class TestMarkRead:
    def test_mark_read(self):
        alert = _record()
        alert._events.clear()

        alert.mark_read()

        assert alert.is_read is True
        assert alert.read_at is not None
        assert isinstance(alert._events[0], StockAlertRead)

    def test_mark_read_twice_is_a_no_op(self):
        alert = _record()
        alert.mark_read()
        alert._events.clear()

        alert.mark_read()

        assert alert._events == []
