"""Protean Engine runner for the merchandising domain.

Starts the Engine workers that process events asynchronously (used with the
``production`` overlay, where event processing is async). Also runs the
pricing sweep every ``PRICING_SWEEP_INTERVAL_MINUTES`` on a background thread
unless disabled.

Usage:
    python src/server.py              # Engine + periodic pricing sweep
    python src/server.py --no-sweep   # Engine only (sweep driven by cron)
"""

import argparse
import threading

import structlog
from protean.server.engine import Engine

logger = structlog.get_logger(__name__)


def sweep_forever(domain, interval_minutes, stop):
    """Run the pricing sweep every ``interval_minutes`` until ``stop`` is set."""
    from merchandising.product import sweep

    while not stop.wait(interval_minutes * 60):
        try:
            with domain.domain_context():
                sweep.reevaluate_all_products()
        except Exception as exc:
            logger.error("Pricing sweep failed", error=str(exc))


def start_sweep(domain, interval_minutes):
    """Start the sweep thread; set the returned event to stop it."""
    stop = threading.Event()
    thread = threading.Thread(
        target=sweep_forever,
        args=(domain, interval_minutes, stop),
        name="pricing-sweep",
        daemon=True,
    )
    thread.start()
    logger.info("Pricing sweep started", interval_minutes=interval_minutes)
    return thread, stop


def run(with_sweep=True):
    from merchandising.domain import merchandising, pricing_policy

    merchandising.init()
    engine = Engine(merchandising)

    stop = None
    if with_sweep:
        _, stop = start_sweep(merchandising, pricing_policy.sweep_interval_minutes)

    try:
        # Blocks on the Engine's own event loop until shutdown
        engine.run()
    finally:
        if stop is not None:
            stop.set()


def main():
    parser = argparse.ArgumentParser(description="Storefront merchandising Engine runner")
    parser.add_argument(
        "--no-sweep",
        action="store_true",
        help="Do not run the periodic pricing sweep in this process",
    )
    args = parser.parse_args()

    run(with_sweep=not args.no_sweep)


if __name__ == "__main__":
    main()
