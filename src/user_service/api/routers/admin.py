"""Admin account management endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, Response

from user_service.api.auth import Principal, require_admin
from user_service.api.deps import get_account_service, get_correlation_id
from user_service.api.routers.users import profile_response
from user_service.api.schemas import (
    AccountListResponse,
    AccountResponse,
    AccountStatsResponse,
    AdminCreateRequest,
    AdminUpdateRequest,
    MessageResponse,
    PasswordResetRequest,
    ProfileResponse,
    RecentUserResponse,
)
from user_service.domain.models import Account, Role
from user_service.services import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin"])


def recent_user_response(account: Account) -> RecentUserResponse:
    name = " ".join(n for n in (account.first_name, account.last_name) if n) or account.email
    return RecentUserResponse(
        account_id=account.account_id,
        name=name,
        email=account.email,
        role=Role.ADMIN.value if account.is_admin else Role.CUSTOMER.value,
        created_at=account.created_at,
    )


@router.get("", response_model=AccountListResponse)
def list_users(
    limit: int = Query(50),
    offset: int = Query(0),
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    """List accounts, oldest first."""
    accounts = service.list_accounts(limit=limit, offset=offset)
    items = [AccountResponse.model_validate(a) for a in accounts]
    return AccountListResponse(items=items, count=len(items), limit=limit, offset=offset)


@router.post("", response_model=AccountResponse, status_code=201)
def create_user(
    data: AdminCreateRequest,
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Create an account with chosen roles and tier."""
    account = service.admin_create(data.supplied(), admin_id=admin.user_id, correlation_id=correlation_id)
    return AccountResponse.model_validate(account)


@router.get("/stats", response_model=AccountStatsResponse)
def user_stats(
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    logger.info("Admin %s fetching account statistics", admin.user_id)
    return AccountStatsResponse.model_validate(service.user_stats())


@router.get("/list/recent", response_model=list[RecentUserResponse])
def recent_users(
    limit: int = Query(5),
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    """Newest active accounts for the dashboard."""
    return [recent_user_response(a) for a in service.recent_accounts(limit)]


@router.get("/by-email", response_model=AccountResponse)
def find_user_by_email(
    email: str = Query(""),
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    logger.info("Admin %s looking up account by email", admin.user_id)
    return AccountResponse.model_validate(service.find_by_email(email))


@router.get("/{account_id}", response_model=ProfileResponse)
def get_user(
    account_id: str,
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    return profile_response(service.get_profile(account_id))


@router.patch("/{account_id}", response_model=AccountResponse)
def update_user(
    account_id: str,
    data: AdminUpdateRequest,
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
    correlation_id: str = Depends(get_correlation_id),
):
    """Update names, roles, tier or status flags of any account."""
    account = service.admin_update(
        account_id,
        data.supplied(),
        admin_id=admin.user_id,
        correlation_id=correlation_id,
    )
    return AccountResponse.model_validate(account)


@router.post("/{account_id}/password", response_model=MessageResponse)
def reset_password(
    account_id: str,
    data: PasswordResetRequest,
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    service.reset_password(account_id, data.new_password, admin_id=admin.user_id)
    return MessageResponse(message="Password reset successfully")


@router.delete("/{account_id}", status_code=204)
def delete_user(
    account_id: str,
    admin: Principal = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
    correlation_id: str = Depends(get_correlation_id),
):
    service.delete_account(account_id, actor_id=admin.user_id, correlation_id=correlation_id)
    return Response(status_code=204)
