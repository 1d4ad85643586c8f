"""Shared BDD fixtures and step definitions for order fulfillment."""

import json

import pytest
from marketplace.catalogue.ledger import stock_ledger
from marketplace.ordering.composer import PlaceOrder
from marketplace.ordering.fulfillment import AcceptOrderItem, RejectOrderItem
from marketplace.ordering.order import Order
from marketplace.shared.exceptions import ForbiddenError, InvalidStateError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def world():
    """Names to ids, plus the last captured error."""
    return {"providers": {}, "products": {}, "order_id": None, "error": None}


def _order(world):
    return current_domain.repository_for(Order).get(world["order_id"])


def _item_id(world, name):
    provider_id = world["providers"][name]
    return next(str(i.id) for i in _order(world).items if str(i.provider_id) == provider_id)


def _decide(world, actor, owner, reason=None):
    command_kwargs = {
        "order_id": world["order_id"],
        "item_id": _item_id(world, owner),
        "provider_id": world["providers"][actor],
    }
    command = RejectOrderItem(reason=reason, **command_kwargs) if reason else AcceptOrderItem(**command_kwargs)
    try:
        current_domain.process(command, asynchronous=False)
    except (ForbiddenError, InvalidStateError) as exc:
        world["error"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('provider "{name}" sells a record at {price:f} with {stock:d} in stock'))
def _(world, make_provider, make_product, name, price, stock):
    provider_id = make_provider(business_name=f"Provider {name}")
    world["providers"][name] = provider_id
    world["products"][name] = make_product(provider_id, price=price, stock_quantity=stock)


@given(parsers.parse('a buyer orders {qty_a:d} of "{a}"\'s record and {qty_b:d} of "{b}"\'s record'))
def _(world, make_buyer, qty_a, a, qty_b, b):
    world["order_id"] = current_domain.process(
        PlaceOrder(
            buyer_id=make_buyer(),
            items=json.dumps(
                [
                    {"product_id": world["products"][a], "quantity": qty_a},
                    {"product_id": world["products"][b], "quantity": qty_b},
                ]
            ),
            payment_method="CARD",
            address="12 Groove Street",
            city="Portland",
            postal_code="97201",
            country="US",
        ),
        asynchronous=False,
    )


@given(parsers.parse('provider "{name}" has accepted its item'))
def _(world, name):
    _decide(world, name, name)
    assert world["error"] is None


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.parse('provider "{name}" accepts its item'))
def _(world, name):
    _decide(world, name, name)


@when(parsers.parse('provider "{actor}" accepts the item from "{owner}"'))
def _(world, actor, owner):
    _decide(world, actor, owner)


@when(parsers.parse('provider "{name}" rejects its item because "{reason}"'))
def _(world, name, reason):
    _decide(world, name, name, reason=reason)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse("the order total is {total:f}"))
def _(world, total):
    assert _order(world).total == total


@then(parsers.parse('the item from "{name}" is {status}'))
def _(world, name, status):
    assert _order(world).item(_item_id(world, name)).status == status


@then(parsers.parse('"{name}" still has {stock:d} in stock'))
def _(world, name, stock):
    assert stock_ledger.stock_of(world["products"][name]) == stock


@then(parsers.parse("the fulfillment status is {status}"))
def _(world, status):
    assert _order(world).fulfillment_status.value == status


@then("the request is forbidden")
def _(world):
    assert isinstance(world["error"], ForbiddenError)


@then("the request conflicts with the item state")
def _(world):
    assert isinstance(world["error"], InvalidStateError)
