"""Alert inbox management — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from merchandising.alerts.alert import StockAlert
from merchandising.domain import merchandising
from merchandising.utils.paging import iterate_all


@merchandising.command(part_of="StockAlert")
class MarkStockAlertRead:
    alert_id: Identifier(required=True)


@merchandising.command(part_of="StockAlert")
class MarkAllStockAlertsRead:
    product_id: Identifier()  # Optional: only this product's alerts


@merchandising.command_handler(part_of=StockAlert)
class ManageStockAlertsHandler:
    @handle(MarkStockAlertRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(StockAlert)
        alert = repo.get(command.alert_id)
        alert.mark_read()
        repo.add(alert)

    @handle(MarkAllStockAlertsRead)
    def mark_all_read(self, command):
        repo = current_domain.repository_for(StockAlert)
        filters = {"is_read": False}
        if command.product_id:
            filters["product_id"] = str(command.product_id)

        # Materialized up front: marking read moves alerts out of the is_read filter
        unread = list(iterate_all(repo, "notified_at", **filters))
        for alert in unread:
            alert.mark_read()
            repo.add(alert)
        return len(unread)
