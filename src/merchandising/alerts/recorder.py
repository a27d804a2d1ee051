"""Alert recorder — appends reported stock transitions to the alert inbox.

Runs after the product change has been committed, so a failure here never
rolls the product back. Failures are wrapped in ``NotificationPublishFailure``
and propagated.
"""

import structlog
from protean import handle
from protean.utils.globals import current_domain

from merchandising.alerts.alert import StockAlert
from merchandising.domain import merchandising
from merchandising.pricing.errors import NotificationPublishFailure
from merchandising.product.events import StockStatusChanged

logger = structlog.get_logger(__name__)


@merchandising.event_handler(part_of=StockAlert, stream_category="merchandising::product")
class StockAlertRecorder:
    @handle(StockStatusChanged)
    def on_stock_status_changed(self, event: StockStatusChanged) -> None:
        try:
            alert = StockAlert.record(
                product_id=event.product_id,
                product_title=event.product_title,
                variant_id=event.variant_id,
                color_code=event.color_code,
                color_name=event.color_name,
                size=event.size,
                alert_type=event.alert_type,
                message=event.message,
                remaining_stock=event.remaining_stock,
                notified_at=event.changed_at,
            )
            current_domain.repository_for(StockAlert).add(alert)
        except Exception as exc:
            logger.error(
                "Stock alert could not be recorded",
                product_id=str(event.product_id),
                variant_id=str(event.variant_id) if event.variant_id else None,
                alert_type=event.alert_type,
                error=str(exc),
            )
            raise NotificationPublishFailure(
                f"Could not record {event.alert_type} alert for product {event.product_id}",
                notice=event,
            ) from exc

        logger.info(
            "Stock alert recorded",
            alert_id=str(alert.id),
            product_id=str(event.product_id),
            alert_type=event.alert_type,
        )
