"""Application tests for the periodic pricing sweep."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from merchandising.product.creation import CreateProduct
from merchandising.product.product import Product
from merchandising.product.sweep import ReevaluatePricing, reevaluate_all_products
from protean import UnitOfWork
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain


def _create_sale(start, end, **overrides):
    defaults = {
        "title": "Canvas Tote",
        "base_price": 40.0,
        "stock": 30,
        "discount_percentage": 25,
        "discount_start_time": start,
        "discount_end_time": end,
    }
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


def _in_unit_of_work(uow, title):
    return any(getattr(item, "title", None) == title for items in uow._identity_map.values() for item in items.values())


class TestReevaluatePricingHandler:
    def test_starts_a_scheduled_discount(self):
        start = datetime.now(UTC) + timedelta(days=1)
        product_id = _create_sale(start, start + timedelta(days=2))

        changes = current_domain.process(
            ReevaluatePricing(product_id=product_id, as_of=start + timedelta(minutes=5)),
            asynchronous=False,
        )

        assert changes == 1
        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 30.0
        assert product.discount_active is True

    def test_nothing_to_change(self):
        start = datetime.now(UTC) + timedelta(days=1)
        product_id = _create_sale(start, start + timedelta(days=2))

        changes = current_domain.process(ReevaluatePricing(product_id=product_id), asynchronous=False)

        assert changes == 0

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(ReevaluatePricing(product_id="missing"), asynchronous=False)


class TestReevaluateAllProducts:
    def test_starts_scheduled_discounts(self):
        start = datetime.now(UTC) + timedelta(days=1)
        product_id = _create_sale(start, start + timedelta(days=2))

        result = reevaluate_all_products(as_of=start + timedelta(minutes=5))

        assert result == {"evaluated": 1, "changed": 1, "failed": 0}
        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 30.0
        assert product.discount_active is True

    def test_expires_discounts(self):
        now = datetime.now(UTC)
        product_id = _create_sale(now - timedelta(days=1), now + timedelta(hours=1))
        assert current_domain.repository_for(Product).get(product_id).price == 30.0

        reevaluate_all_products(as_of=now + timedelta(hours=2))

        product = current_domain.repository_for(Product).get(product_id)
        assert product.price == 40.0
        assert product.discount_active is False

    def test_second_sweep_changes_nothing(self):
        start = datetime.now(UTC) + timedelta(days=1)
        _create_sale(start, start + timedelta(days=2))
        reevaluate_all_products(as_of=start)

        assert reevaluate_all_products(as_of=start + timedelta(minutes=10))["changed"] == 0

    def test_counts_every_active_product(self):
        start = datetime.now(UTC) + timedelta(days=1)
        for i in range(3):
            _create_sale(start, start + timedelta(days=2), title=f"Tote {i}")

        result = reevaluate_all_products(as_of=start)

        assert result["evaluated"] == 3
        assert result["changed"] == 3

    def test_walks_past_the_first_page(self):
        start = datetime.now(UTC) + timedelta(days=1)
        for i in range(5):
            _create_sale(start, start + timedelta(days=2), title=f"Tote {i}")

        with patch("merchandising.utils.paging.PAGE_SIZE", 2):
            result = reevaluate_all_products(as_of=start)

        assert result == {"evaluated": 5, "changed": 5, "failed": 0}

    def test_one_failure_does_not_stop_the_sweep(self):
        start = datetime.now(UTC) + timedelta(days=1)
        _create_sale(start, start + timedelta(days=2), title="Tote A")
        _create_sale(start, start + timedelta(days=2), title="Tote B")

        original = Product.reevaluate
        calls = []

        def flaky(self, now=None, policy=None):
            calls.append(self.title)
            if self.title == "Tote A":
                raise RuntimeError("boom")
            return original(self, now=now, policy=policy)

        with patch.object(Product, "reevaluate", flaky):
            result = reevaluate_all_products(as_of=start)

        assert sorted(calls) == ["Tote A", "Tote B"]
        assert result == {"evaluated": 2, "changed": 1, "failed": 1}

    def test_failed_commit_leaves_other_products_committed(self):
        start = datetime.now(UTC) + timedelta(days=1)
        _create_sale(start, start + timedelta(days=2), title="Tote A")
        tote_b = _create_sale(start, start + timedelta(days=2), title="Tote B")

        original_commit = UnitOfWork.commit
        commits = []

        def commit(uow):
            if _in_unit_of_work(uow, "Tote A"):
                raise RuntimeError("connection reset during commit")
            commits.append(uow)
            return original_commit(uow)

        with patch.object(UnitOfWork, "commit", commit):
            result = reevaluate_all_products(as_of=start + timedelta(minutes=5))

        assert result == {"evaluated": 2, "changed": 1, "failed": 1}
        assert commits
        product = current_domain.repository_for(Product).get(tote_b)
        assert product.price == 30.0
        assert product.discount_active is True
