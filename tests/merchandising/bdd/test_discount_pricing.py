"""BDD tests for time-boxed discount pricing."""

from datetime import UTC, datetime

from merchandising.pricing.errors import InvalidDiscountWindow
from merchandising.product.product import Product
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/discount_pricing.feature")


def parse_moment(text):
    """Feature files use naive ISO timestamps; they are UTC."""
    return datetime.fromisoformat(text).replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse(
        'a product priced at {price:f} with a {pct:d}% discount running from "{start}" to "{end}"'
    ),
    target_fixture="product",
)
def discounted_product(price, pct, start, end):
    product = Product.create(
        title="Trail Jacket",
        base_price=price,
        stock=50,
        discount_percentage=pct,
        discount_start_time=parse_moment(start),
        discount_end_time=parse_moment(end),
        now=parse_moment(start),
    )
    product._events.clear()
    return product


@given(parsers.cfparse('a "{color}" "{size}" variant with no discount of its own'), target_fixture="variant")
def inheriting_variant(product, color, size):
    return product.add_variant(color_code="#000080", color_name=color, size=size, stock=10)


@given(parsers.cfparse('a "{color}" "{size}" variant with an explicit {pct:d}% discount'), target_fixture="variant")
def overriding_variant(product, color, size, pct):
    return product.add_variant(
        color_code="#000080",
        color_name=color,
        size=size,
        stock=10,
        discount_percentage=pct,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('prices are evaluated at "{moment}"'))
def evaluate_prices(product, moment):
    product.reevaluate(now=parse_moment(moment))


@when(parsers.cfparse('the product discount is changed to {pct:d}% starting "{start}" with no end'))
def change_discount_without_end(product, pct, start, error):
    try:
        product.update_pricing(product.base_price, pct, parse_moment(start), None)
    except InvalidDiscountWindow as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the product price is {price:f}"))
def product_price_is(product, price):
    assert product.price == price


@then("the product discount is active")
def product_discount_active(product):
    assert product.discount_active is True


@then("the product discount is inactive")
def product_discount_inactive(product):
    assert product.discount_active is False


@then(parsers.cfparse("the variant price is {price:f}"))
def variant_price_is(variant, price):
    assert variant.price == price


@then("the variant discount is inactive")
def variant_discount_inactive(variant):
    assert variant.discount_active is False
