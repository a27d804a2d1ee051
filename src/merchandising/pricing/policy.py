"""Pricing policy — explicit configuration handed to every engine call."""

import os
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal

_ROUNDING_MODES = frozenset(
    {
        "ROUND_HALF_EVEN",
        "ROUND_HALF_UP",
        "ROUND_HALF_DOWN",
        "ROUND_UP",
        "ROUND_DOWN",
        "ROUND_CEILING",
        "ROUND_FLOOR",
        "ROUND_05UP",
    }
)


@dataclass(frozen=True)
class PricingPolicy:
    """Settings that govern price rounding, stock classification and the sweep."""

    default_low_stock_threshold: int = 10
    currency_places: int = 2
    rounding: str = ROUND_HALF_EVEN
    sweep_interval_minutes: int = 10

    def __post_init__(self):
        if self.default_low_stock_threshold < 1:
            raise ValueError("default_low_stock_threshold must be a positive integer")
        if self.currency_places < 0:
            raise ValueError("currency_places cannot be negative")
        if self.rounding not in _ROUNDING_MODES:
            raise ValueError(f"Unsupported rounding mode: {self.rounding}")
        if self.sweep_interval_minutes < 1:
            raise ValueError("sweep_interval_minutes must be a positive integer")

    @property
    def quantum(self) -> Decimal:
        """Smallest currency unit, e.g. ``Decimal("0.01")`` for two places."""
        return Decimal(1).scaleb(-self.currency_places)

    @classmethod
    def from_env(cls) -> "PricingPolicy":
        return cls(
            default_low_stock_threshold=int(os.getenv("PRICING_LOW_STOCK_THRESHOLD", "10")),
            currency_places=int(os.getenv("PRICING_CURRENCY_PLACES", "2")),
            rounding=os.getenv("PRICING_ROUNDING", ROUND_HALF_EVEN),
            sweep_interval_minutes=int(os.getenv("PRICING_SWEEP_INTERVAL_MINUTES", "10")),
        )


DEFAULT_POLICY = PricingPolicy()
