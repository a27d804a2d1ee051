"""Stock transition notifier.

Decides whether a change of stock status is worth telling operations about,
and renders the message. Delivery is someone else's job: the ``Product``
aggregate turns a notice into a ``StockStatusChanged`` event and the alert
recorder appends it to the stock alert store.
"""

from dataclasses import dataclass
from enum import Enum

from merchandising.pricing.stock import StockStatus


class StockAlertType(Enum):
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    BACK_IN_STOCK = "back_in_stock"
    PRE_ORDER = "pre_order"


_ALERT_TYPE_FOR_STATUS = {
    StockStatus.LOW_STOCK: StockAlertType.LOW_STOCK,
    StockStatus.OUT_OF_STOCK: StockAlertType.OUT_OF_STOCK,
    StockStatus.IN_STOCK: StockAlertType.BACK_IN_STOCK,
    StockStatus.PRE_ORDER: StockAlertType.PRE_ORDER,
}

# Statuses that are reported for a brand-new product or variant
_REPORTED_ON_CREATION = frozenset({StockStatus.OUT_OF_STOCK, StockStatus.LOW_STOCK})

_PRODUCT_TEMPLATES = {
    StockAlertType.OUT_OF_STOCK: "{title} is out of stock",
    StockAlertType.LOW_STOCK: "{title} is low on stock ({quantity} left)",
    StockAlertType.BACK_IN_STOCK: "{title} is back in stock",
    StockAlertType.PRE_ORDER: "{title} is available for pre-order",
}

_VARIANT_TEMPLATES = {
    StockAlertType.OUT_OF_STOCK: "{title} - {color_name} - {size} is out of stock",
    StockAlertType.LOW_STOCK: "{title} - {color_name} - {size} is low on stock ({quantity} left)",
    StockAlertType.BACK_IN_STOCK: "{title} - {color_name} - {size} is back in stock",
    StockAlertType.PRE_ORDER: "{title} - {color_name} - {size} is available for pre-order",
}


@dataclass(frozen=True)
class StockEntityRef:
    """Identifies the product, or one of its variants, whose stock changed."""

    product_id: str
    product_title: str
    quantity: int
    variant_id: str | None = None
    color_code: str | None = None
    color_name: str | None = None
    size: str | None = None

    @property
    def has_variant_context(self) -> bool:
        return self.variant_id is not None


@dataclass(frozen=True)
class StockNotice:
    ref: StockEntityRef
    alert_type: StockAlertType
    previous_status: StockStatus | None
    current_status: StockStatus
    message: str


def render_stock_message(ref: StockEntityRef, alert_type: StockAlertType) -> str:
    templates = _VARIANT_TEMPLATES if ref.has_variant_context else _PRODUCT_TEMPLATES
    return templates[alert_type].format(
        title=ref.product_title,
        color_name=ref.color_name,
        size=ref.size,
        quantity=ref.quantity,
    )


def _coerce(status) -> StockStatus | None:
    if status is None or isinstance(status, StockStatus):
        return status
    return StockStatus(status)


def on_stock_status_transition(ref: StockEntityRef, previous_status, current_status) -> StockNotice | None:
    """Return a notice when the transition should be reported, else ``None``.

    A missing ``previous_status`` means the entity was just created: only
    out-of-stock and low-stock starts are reported. Otherwise any change of
    status is reported and an unchanged status never is.
    """
    previous = _coerce(previous_status)
    current = _coerce(current_status)

    if previous is None:
        if current not in _REPORTED_ON_CREATION:
            return None
    elif previous == current:
        return None

    alert_type = _ALERT_TYPE_FOR_STATUS[current]
    return StockNotice(
        ref=ref,
        alert_type=alert_type,
        previous_status=previous,
        current_status=current,
        message=render_stock_message(ref, alert_type),
    )
