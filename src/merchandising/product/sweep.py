"""ReevaluatePricing command + handler, and the periodic price and stock-status sweep.

``reevaluate_all_products`` is invoked by the server's background thread or
by cron every few minutes (see ``PricingPolicy.sweep_interval_minutes``) so
that time-boxed discounts start and expire without anyone editing the
product. Each product is re-evaluated through its own command, and so its
own UnitOfWork: one product failing, even at commit, does not stop the sweep
or undo the others.
"""

import uuid
from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from merchandising.domain import merchandising, pricing_policy
from merchandising.product.product import Product
from merchandising.utils.logging import add_context, clear_context
from merchandising.utils.paging import iterate_all

logger = structlog.get_logger(__name__)


@merchandising.command(part_of="Product")
class ReevaluatePricing:
    """Request to re-derive the prices and stock statuses of one product."""

    product_id: Identifier(required=True)
    as_of: DateTime()  # Optional: evaluate as of this time (defaults to now)


@merchandising.command_handler(part_of=Product)
class ReevaluatePricingHandler:
    @handle(ReevaluatePricing)
    def reevaluate_pricing(self, command: ReevaluatePricing):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        changes = product.reevaluate(now=command.as_of or datetime.now(UTC), policy=pricing_policy)
        if changes:
            repo.add(product)
        return changes


def reevaluate_all_products(as_of=None):
    """Re-evaluate every active product; return evaluated/changed/failed counts.

    Must not run inside an active UnitOfWork, or every product would share it.
    """
    as_of = as_of or datetime.now(UTC)
    repo = current_domain.repository_for(Product)

    add_context(sweep_id=str(uuid.uuid4()))
    evaluated = changed = failed = 0
    try:
        for product in iterate_all(repo, "created_at", is_active=True):
            evaluated += 1
            try:
                if current_domain.process(ReevaluatePricing(product_id=product.id, as_of=as_of), asynchronous=False):
                    changed += 1
            except Exception as e:
                failed += 1
                logger.error(
                    "Pricing re-evaluation failed",
                    product_id=str(product.id),
                    error=str(e),
                )

        logger.info(
            "Pricing re-evaluation completed",
            evaluated=evaluated,
            changed=changed,
            failed=failed,
            as_of=str(as_of),
        )
    finally:
        clear_context()

    return {"evaluated": evaluated, "changed": changed, "failed": failed}
