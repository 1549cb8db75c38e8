"""Address endpoints for the caller's account."""

from fastapi import APIRouter, Depends, Response

from user_service.api.auth import Principal, get_principal
from user_service.api.deps import get_address_service, get_correlation_id
from user_service.api.schemas import AddressRequest, AddressResponse, CollectionResponse
from user_service.services import EntryService

router = APIRouter(prefix="/users/me/addresses", tags=["addresses"])


@router.get("", response_model=CollectionResponse[AddressResponse])
def list_addresses(
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_address_service),
):
    items = [AddressResponse.model_validate(e) for e in service.list_entries(principal.user_id)]
    return CollectionResponse[AddressResponse](items=items, count=len(items))


@router.post("", response_model=AddressResponse, status_code=201)
def add_address(
    data: AddressRequest,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_address_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Add an address; a default address replaces the previous default."""
    entry = service.add_entry(principal.user_id, data.supplied(), correlation_id=correlation_id)
    return AddressResponse.model_validate(entry)


@router.get("/{entry_id}", response_model=AddressResponse)
def get_address(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_address_service),
):
    return AddressResponse.model_validate(service.get_entry(principal.user_id, entry_id))


@router.patch("/{entry_id}", response_model=AddressResponse)
def update_address(
    entry_id: str,
    data: AddressRequest,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_address_service),
    correlation_id: str = Depends(get_correlation_id),
):
    entry = service.update_entry(principal.user_id, entry_id, data.supplied(), correlation_id=correlation_id)
    return AddressResponse.model_validate(entry)


@router.put("/{entry_id}/default", response_model=AddressResponse)
def set_default_address(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_address_service),
    correlation_id: str = Depends(get_correlation_id),
):
    entry = service.set_default(principal.user_id, entry_id, correlation_id=correlation_id)
    return AddressResponse.model_validate(entry)


@router.delete("/{entry_id}", status_code=204)
def remove_address(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_address_service),
    correlation_id: str = Depends(get_correlation_id),
):
    service.remove_entry(principal.user_id, entry_id, correlation_id=correlation_id)
    return Response(status_code=204)
