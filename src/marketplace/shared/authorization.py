"""Authorization predicates.

Identity is resolved by the caller; handlers receive the acting user's
role and provider id and call these checks at the top of each operation.
The ``is_*``/``has_*`` functions are pure predicates, the ``require_*``
functions raise ``ForbiddenError``.
"""

from enum import Enum

from protean.utils.globals import current_domain

from marketplace.shared.exceptions import ForbiddenError


class Role(Enum):
    BUYER = "Buyer"
    PROVIDER = "Provider"
    ADMIN = "Admin"


def has_role(actor_role, *roles) -> bool:
    allowed = {r.value if isinstance(r, Role) else r for r in roles}
    value = actor_role.value if isinstance(actor_role, Role) else actor_role
    return value in allowed


def is_owner(provider_id, record) -> bool:
    """True when ``record`` (a product or order item) belongs to ``provider_id``."""
    if not provider_id or record is None:
        return False
    return str(record.provider_id) == str(provider_id)


def require_role(actor_role, *roles):
    if not has_role(actor_role, *roles):
        names = ", ".join(r.value if isinstance(r, Role) else r for r in roles)
        raise ForbiddenError({"role": [f"Operation requires one of: {names}"]})


def require_owner(provider_id, record, label="product"):
    if not is_owner(provider_id, record):
        raise ForbiddenError({"provider_id": [f"Provider {provider_id} does not own {label} {record.id}"]})


def require_verified_provider(provider_id):
    """Load the provider and insist it is verified.

    Unknown providers propagate protean's ``ObjectNotFoundError``.
    """
    from marketplace.accounts.account import Provider

    if not provider_id:
        raise ForbiddenError({"provider_id": ["A provider identity is required"]})

    provider = current_domain.repository_for(Provider).get(provider_id)
    if not provider.is_verified:
        raise ForbiddenError(
            {"provider_id": [f"Provider {provider_id} is not verified ({provider.verification_status})"]}
        )
    return provider
