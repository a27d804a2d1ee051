"""Storefront merchandising management CLI.

Usage:
    python src/manage.py setup-db              # Create all tables
    python src/manage.py drop-db               # Drop all tables
    python src/manage.py reevaluate-pricing    # Run the price/stock-status sweep once
    python src/manage.py reevaluate-pricing --as-of 2026-07-01T00:00:00+00:00
"""

import argparse
import sys
from datetime import datetime


def _domain():
    from merchandising.domain import merchandising

    print("Initializing merchandising domain...")
    merchandising.init()
    return merchandising


def setup_database():
    """Create the merchandising database schema."""
    from merchandising.utils.db import setup_db

    domain = _domain()
    print("Creating merchandising database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the merchandising database schema."""
    from merchandising.utils.db import drop_db

    domain = _domain()
    print("Dropping merchandising database schema...")
    drop_db(domain)
    print("Done.")


def reevaluate_pricing(as_of=None):
    """Re-derive prices and stock statuses of every active product."""
    from merchandising.product.sweep import reevaluate_all_products

    domain = _domain()
    with domain.domain_context():
        result = reevaluate_all_products(as_of=as_of)

    print(f"Evaluated {result['evaluated']} products: {result['changed']} changed, {result['failed']} failed.")
    return result


def main():
    parser = argparse.ArgumentParser(description="Storefront merchandising management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    sweep_parser = subparsers.add_parser("reevaluate-pricing", help="Run the pricing sweep once")
    sweep_parser.add_argument(
        "--as-of",
        type=datetime.fromisoformat,
        help="Evaluate discounts as of this ISO-8601 timestamp (default: now)",
    )

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "reevaluate-pricing":
        result = reevaluate_pricing(args.as_of)
        if result["failed"]:
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
