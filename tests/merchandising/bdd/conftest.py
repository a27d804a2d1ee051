"""Shared BDD fixtures and step definitions for the Merchandising domain."""

import pytest
from merchandising.pricing.errors import InvalidDiscountWindow, InvalidQuantity
from pytest_bdd import then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then("the action fails with an invalid discount window error")
def fails_with_invalid_discount_window(error):
    assert error["exc"] is not None, "Expected an error but none was raised"
    assert isinstance(error["exc"], InvalidDiscountWindow)


@then("the action fails with an invalid quantity error")
def fails_with_invalid_quantity(error):
    assert error["exc"] is not None, "Expected an error but none was raised"
    assert isinstance(error["exc"], InvalidQuantity)
