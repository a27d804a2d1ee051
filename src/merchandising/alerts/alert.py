"""StockAlert aggregate — the operations inbox for stock transitions.

One alert per reported ``StockStatusChanged``. Alerts are append-only apart
from the read flag.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from merchandising.alerts.events import StockAlertRead, StockAlertRecorded
from merchandising.domain import merchandising
from merchandising.pricing.transitions import StockAlertType


@merchandising.aggregate
class StockAlert:
    product_id: Identifier(required=True)
    product_title: String(required=True, max_length=255)
    variant_id: Identifier()
    color_code: String(max_length=20)
    color_name: String(max_length=100)
    size: String(max_length=50)
    alert_type: String(required=True, choices=StockAlertType)
    message: String(required=True, max_length=500)
    remaining_stock: Integer(default=0)
    is_read: Boolean(default=False)
    notified_at: DateTime()
    read_at: DateTime()

    @classmethod
    def record(
        cls,
        product_id,
        product_title,
        alert_type,
        message,
        remaining_stock,
        variant_id=None,
        color_code=None,
        color_name=None,
        size=None,
        notified_at=None,
    ):
        alert = cls(
            product_id=product_id,
            product_title=product_title,
            variant_id=variant_id,
            color_code=color_code,
            color_name=color_name,
            size=size,
            alert_type=alert_type,
            message=message,
            remaining_stock=remaining_stock,
            notified_at=notified_at or datetime.now(UTC),
        )
        alert.raise_(
            StockAlertRecorded(
                alert_id=alert.id,
                product_id=product_id,
                variant_id=variant_id,
                alert_type=alert_type,
                remaining_stock=remaining_stock,
                message=message,
                notified_at=alert.notified_at,
            )
        )
        return alert

    def mark_read(self):
        """Flag the alert as read. Marking an already read alert is a no-op."""
        if self.is_read:
            return

        self.is_read = True
        self.read_at = datetime.now(UTC)
        self.raise_(StockAlertRead(alert_id=self.id, read_at=self.read_at))
