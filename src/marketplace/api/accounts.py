"""FastAPI endpoints for buyer and provider accounts."""

from fastapi import APIRouter

from marketplace.accounts.registration import RegisterBuyer, RegisterProvider, SuspendProvider, VerifyProvider
from marketplace.api.schemas import (
    BuyerIdResponse,
    ProviderIdResponse,
    RegisterBuyerRequest,
    RegisterProviderRequest,
    StatusResponse,
    SuspendProviderRequest,
)
from marketplace.shared.commands import process

account_router = APIRouter(prefix="/accounts", tags=["accounts"])


@account_router.post("/buyers", status_code=201, response_model=BuyerIdResponse)
async def register_buyer(body: RegisterBuyerRequest) -> BuyerIdResponse:
    buyer_id = process(RegisterBuyer(name=body.name, email=body.email))
    return BuyerIdResponse(buyer_id=buyer_id)


@account_router.post("/providers", status_code=201, response_model=ProviderIdResponse)
async def register_provider(body: RegisterProviderRequest) -> ProviderIdResponse:
    command = RegisterProvider(business_name=body.business_name, email=body.email)
    provider_id = process(command)
    return ProviderIdResponse(provider_id=provider_id)


@account_router.put("/providers/{provider_id}/verify", response_model=StatusResponse)
async def verify_provider(provider_id: str) -> StatusResponse:
    process(VerifyProvider(provider_id=provider_id))
    return StatusResponse()


@account_router.put("/providers/{provider_id}/suspend", response_model=StatusResponse)
async def suspend_provider(provider_id: str, body: SuspendProviderRequest) -> StatusResponse:
    process(SuspendProvider(provider_id=provider_id, reason=body.reason))
    return StatusResponse()
