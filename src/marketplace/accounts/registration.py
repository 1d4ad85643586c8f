"""Account registration and provider verification: commands and handlers."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.accounts.account import Buyer, Provider
from marketplace.domain import marketplace


@marketplace.command(part_of="Buyer")
class RegisterBuyer:
    name = String(required=True, max_length=150)
    email = String(required=True, max_length=254)


@marketplace.command(part_of="Provider")
class RegisterProvider:
    business_name = String(required=True, max_length=200)
    email = String(required=True, max_length=254)


@marketplace.command(part_of="Provider")
class VerifyProvider:
    provider_id = Identifier(required=True)


@marketplace.command(part_of="Provider")
class SuspendProvider:
    provider_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@marketplace.command_handler(part_of=Buyer)
class BuyerRegistrationHandler:
    @handle(RegisterBuyer)
    def register_buyer(self, command):
        buyer = Buyer.register(name=command.name, email=command.email)
        current_domain.repository_for(Buyer).add(buyer)
        return str(buyer.id)


@marketplace.command_handler(part_of=Provider)
class ProviderAccountHandler:
    @handle(RegisterProvider)
    def register_provider(self, command):
        provider = Provider.register(business_name=command.business_name, email=command.email)
        current_domain.repository_for(Provider).add(provider)
        return str(provider.id)

    @handle(VerifyProvider)
    def verify_provider(self, command):
        repo = current_domain.repository_for(Provider)
        provider = repo.get(command.provider_id)
        provider.verify()
        repo.add(provider)

    @handle(SuspendProvider)
    def suspend_provider(self, command):
        repo = current_domain.repository_for(Provider)
        provider = repo.get(command.provider_id)
        provider.suspend(command.reason)
        repo.add(provider)
