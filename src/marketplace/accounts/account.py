"""Buyer and Provider aggregates.

These are thin records owned by the identity collaborator; the core only
needs to resolve a buyer before composing an order and to know whether a
provider is verified before letting it touch inventory or order items.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from marketplace.accounts.events import (
    BuyerRegistered,
    ProviderRegistered,
    ProviderSuspended,
    ProviderVerified,
)
from marketplace.domain import marketplace


class VerificationStatus(Enum):
    PENDING = "Pending"
    VERIFIED = "Verified"
    SUSPENDED = "Suspended"


_VALID_TRANSITIONS = {
    VerificationStatus.PENDING: {VerificationStatus.VERIFIED, VerificationStatus.SUSPENDED},
    VerificationStatus.VERIFIED: {VerificationStatus.SUSPENDED},
    VerificationStatus.SUSPENDED: {VerificationStatus.VERIFIED},
}


@marketplace.aggregate
class Buyer:
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)
    is_active = Boolean(default=True)
    created_at = DateTime()

    @classmethod
    def register(cls, name, email):
        now = datetime.now(UTC)
        buyer = cls(name=name, email=email.strip().lower(), created_at=now)
        buyer.raise_(
            BuyerRegistered(
                buyer_id=str(buyer.id),
                name=name,
                email=buyer.email,
                registered_at=now,
            )
        )
        return buyer


@marketplace.aggregate
class Provider:
    """A seller that owns products. Only verified providers may trade."""

    business_name = String(required=True, max_length=200)
    email = String(required=True, max_length=254)
    verification_status = String(
        choices=VerificationStatus,
        default=VerificationStatus.PENDING.value,
    )
    suspension_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, business_name, email):
        now = datetime.now(UTC)
        provider = cls(
            business_name=business_name,
            email=email.strip().lower(),
            created_at=now,
            updated_at=now,
        )
        provider.raise_(
            ProviderRegistered(
                provider_id=str(provider.id),
                business_name=business_name,
                email=provider.email,
                registered_at=now,
            )
        )
        return provider

    @property
    def is_verified(self):
        return self.verification_status == VerificationStatus.VERIFIED.value

    def _assert_can_transition(self, target_status):
        current = VerificationStatus(self.verification_status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError(
                {"verification_status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def verify(self):
        self._assert_can_transition(VerificationStatus.VERIFIED)
        now = datetime.now(UTC)
        self.verification_status = VerificationStatus.VERIFIED.value
        self.suspension_reason = None
        self.updated_at = now
        self.raise_(ProviderVerified(provider_id=str(self.id), verified_at=now))

    def suspend(self, reason):
        if not reason or not reason.strip():
            raise ValidationError({"reason": ["Suspension reason is required"]})
        self._assert_can_transition(VerificationStatus.SUSPENDED)
        now = datetime.now(UTC)
        self.verification_status = VerificationStatus.SUSPENDED.value
        self.suspension_reason = reason
        self.updated_at = now
        self.raise_(ProviderSuspended(provider_id=str(self.id), reason=reason, suspended_at=now))
