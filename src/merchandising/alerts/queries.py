"""Read side of the alert inbox."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from merchandising.alerts.alert import StockAlert
from merchandising.utils.paging import fetch_page


@dataclass
class StockAlertPage:
    alerts: list
    total: int
    unread: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.page_size))


def list_stock_alerts(page: int = 1, page_size: int = 20, unread_only: bool = False) -> StockAlertPage:
    """Newest alerts first, optionally only the unread ones."""
    repo = current_domain.repository_for(StockAlert)
    filters = {"is_read": False} if unread_only else {}

    alerts, total = fetch_page(repo, "-notified_at", page=page, page_size=page_size, **filters)
    _, unread = fetch_page(repo, "-notified_at", page=1, page_size=1, is_read=False)

    return StockAlertPage(alerts=alerts, total=total, unread=unread, page=page, page_size=page_size)
