"""Self-service account endpoints."""

from fastapi import APIRouter, Depends, Response

from user_service.api.auth import Principal, get_principal
from user_service.api.deps import get_account_service, get_correlation_id
from user_service.api.schemas import (
    AccountResponse,
    AddressResponse,
    MessageResponse,
    PasswordChangeRequest,
    PaymentMethodResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    WishlistItemResponse,
)
from user_service.services import AccountProfile, AccountService

router = APIRouter(prefix="/users", tags=["users"])


def profile_response(profile: AccountProfile) -> ProfileResponse:
    base = AccountResponse.model_validate(profile.account).model_dump()
    return ProfileResponse(
        **base,
        addresses=[AddressResponse.model_validate(a) for a in profile.addresses],
        payment_methods=[PaymentMethodResponse.model_validate(p) for p in profile.payment_methods],
        wishlist=[WishlistItemResponse.model_validate(w) for w in profile.wishlist],
    )


@router.post("", response_model=AccountResponse, status_code=201)
def register(
    data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Register a new customer account."""
    account = service.register(data.supplied(), correlation_id=correlation_id)
    return AccountResponse.model_validate(account)


@router.get("/me", response_model=ProfileResponse)
def get_me(
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_account_service),
):
    """Get the caller's profile with addresses, payment methods and wishlist."""
    return profile_response(service.get_profile(principal.user_id))


@router.patch("/me", response_model=AccountResponse)
def update_me(
    data: ProfileUpdateRequest,
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_account_service),
    correlation_id: str = Depends(get_correlation_id),
):
    account = service.update_profile(principal.user_id, data.supplied(), correlation_id=correlation_id)
    return AccountResponse.model_validate(account)


@router.delete("/me", status_code=204)
def delete_me(
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_account_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Delete the caller's account and everything it owns."""
    service.delete_account(principal.user_id, actor_id=principal.user_id, correlation_id=correlation_id)
    return Response(status_code=204)


@router.post("/me/password", response_model=MessageResponse)
def change_password(
    data: PasswordChangeRequest,
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_account_service),
):
    service.change_password(principal.user_id, data.current_password, data.new_password)
    return MessageResponse(message="Password updated successfully")


@router.post("/me/deactivate", response_model=AccountResponse)
def deactivate_me(
    principal: Principal = Depends(get_principal),
    service: AccountService = Depends(get_account_service),
    correlation_id: str = Depends(get_correlation_id),
):
    account = service.deactivate(principal.user_id, correlation_id=correlation_id)
    return AccountResponse.model_validate(account)
