"""Domain events for buyer and provider accounts."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Buyer")
class BuyerRegistered:
    """A buyer account was opened."""

    __version__ = 1

    buyer_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Provider")
class ProviderRegistered:
    """A seller signed up and awaits verification."""

    __version__ = 1

    provider_id = Identifier(required=True)
    business_name = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Provider")
class ProviderVerified:
    __version__ = 1

    provider_id = Identifier(required=True)
    verified_at = DateTime(required=True)


@marketplace.event(part_of="Provider")
class ProviderSuspended:
    __version__ = 1

    provider_id = Identifier(required=True)
    reason = String(required=True)
    suspended_at = DateTime(required=True)
