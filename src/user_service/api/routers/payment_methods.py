"""Payment method endpoints for the caller's account."""

from fastapi import APIRouter, Depends, Response

from user_service.api.auth import Principal, get_principal
from user_service.api.deps import get_correlation_id, get_payment_method_service
from user_service.api.schemas import (
    CollectionResponse,
    PaymentMethodRequest,
    PaymentMethodResponse,
)
from user_service.services import EntryService

router = APIRouter(prefix="/users/me/payment-methods", tags=["payment-methods"])


@router.get("", response_model=CollectionResponse[PaymentMethodResponse])
def list_payment_methods(
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_payment_method_service),
):
    """List payment methods in insertion order."""
    items = [PaymentMethodResponse.model_validate(e) for e in service.list_entries(principal.user_id)]
    return CollectionResponse[PaymentMethodResponse](items=items, count=len(items))


@router.post("", response_model=PaymentMethodResponse, status_code=201)
def add_payment_method(
    data: PaymentMethodRequest,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_payment_method_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """
    Add a payment method.

    A raw card number is reduced to its last four digits; setting
    ``isDefault`` clears the flag on every other payment method.
    """
    entry = service.add_entry(principal.user_id, data.supplied(), correlation_id=correlation_id)
    return PaymentMethodResponse.model_validate(entry)


@router.get("/{entry_id}", response_model=PaymentMethodResponse)
def get_payment_method(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_payment_method_service),
):
    return PaymentMethodResponse.model_validate(service.get_entry(principal.user_id, entry_id))


@router.patch("/{entry_id}", response_model=PaymentMethodResponse)
def update_payment_method(
    entry_id: str,
    data: PaymentMethodRequest,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_payment_method_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Partially update one payment method."""
    entry = service.update_entry(principal.user_id, entry_id, data.supplied(), correlation_id=correlation_id)
    return PaymentMethodResponse.model_validate(entry)


@router.put("/{entry_id}/default", response_model=PaymentMethodResponse)
def set_default_payment_method(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_payment_method_service),
    correlation_id: str = Depends(get_correlation_id),
):
    entry = service.set_default(principal.user_id, entry_id, correlation_id=correlation_id)
    return PaymentMethodResponse.model_validate(entry)


@router.delete("/{entry_id}", status_code=204)
def remove_payment_method(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_payment_method_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Remove a payment method. No other method becomes the default."""
    service.remove_entry(principal.user_id, entry_id, correlation_id=correlation_id)
    return Response(status_code=204)
