"""Domain events for the StockAlert aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from merchandising.domain import merchandising


@merchandising.event(part_of="StockAlert")
class StockAlertRecorded:
    """A stock transition was appended to the alert inbox."""

    __version__ = "v1"

    alert_id: Identifier(required=True)
    product_id: Identifier(required=True)
    variant_id: Identifier()
    alert_type: String(required=True)
    remaining_stock: Integer(required=True)
    message: String(required=True, max_length=500)
    notified_at: DateTime(required=True)


@merchandising.event(part_of="StockAlert")
class StockAlertRead:
    __version__ = "v1"

    alert_id: Identifier(required=True)
    read_at: DateTime(required=True)
