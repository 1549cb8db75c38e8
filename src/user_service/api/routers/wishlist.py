"""Wishlist endpoints for the caller's account."""

from fastapi import APIRouter, Depends, Response

from user_service.api.auth import Principal, get_principal
from user_service.api.deps import get_correlation_id, get_wishlist_service
from user_service.api.schemas import CollectionResponse, WishlistItemRequest, WishlistItemResponse
from user_service.services import EntryService

router = APIRouter(prefix="/users/me/wishlist", tags=["wishlist"])


@router.get("", response_model=CollectionResponse[WishlistItemResponse])
def list_wishlist(
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_wishlist_service),
):
    items = [WishlistItemResponse.model_validate(e) for e in service.list_entries(principal.user_id)]
    return CollectionResponse[WishlistItemResponse](items=items, count=len(items))


@router.post("", response_model=WishlistItemResponse, status_code=201)
def add_wishlist_item(
    data: WishlistItemRequest,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_wishlist_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Save a product; 409 when the product is already in the wishlist."""
    entry = service.add_entry(principal.user_id, data.supplied(), correlation_id=correlation_id)
    return WishlistItemResponse.model_validate(entry)


@router.get("/{entry_id}", response_model=WishlistItemResponse)
def get_wishlist_item(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_wishlist_service),
):
    return WishlistItemResponse.model_validate(service.get_entry(principal.user_id, entry_id))


@router.patch("/{entry_id}", response_model=WishlistItemResponse)
def update_wishlist_item(
    entry_id: str,
    data: WishlistItemRequest,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_wishlist_service),
    correlation_id: str = Depends(get_correlation_id),
):
    entry = service.update_entry(principal.user_id, entry_id, data.supplied(), correlation_id=correlation_id)
    return WishlistItemResponse.model_validate(entry)


@router.delete("/{entry_id}", status_code=204)
def remove_wishlist_item(
    entry_id: str,
    principal: Principal = Depends(get_principal),
    service: EntryService = Depends(get_wishlist_service),
    correlation_id: str = Depends(get_correlation_id),
):
    service.remove_entry(principal.user_id, entry_id, correlation_id=correlation_id)
    return Response(status_code=204)
