"""
User management API endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
import logging

from backend.api.dependencies import get_users_service
from backend.api.schemas import (
    CreateUserRequest,
    UpdateUserRequest,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    PaginationMeta,
    MessageResponse,
    VerificationResponse,
    VerificationData,
    Role,
    Status,
)
from backend.core.errors import NotFoundError
from backend.core.users import UsersService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserEnvelope, status_code=201)
def create_user(
    request: CreateUserRequest,
    service: UsersService = Depends(get_users_service)
):
    """
    Create a user.

    The email is hashed with SHA-384 and the digest signed with the server's
    Ed25519 key; digest, signature and public key are stored with the user.

    **Errors:** 409 if the email already exists.
    """
    user = service.create(request.email, role=request.role, status=request.status)
    return UserEnvelope(data=UserResponse.from_user(user))


@router.get("", response_model=UserListResponse)
def list_users(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    role: Optional[Role] = Query(None, description="Filter by role"),
    status: Optional[Status] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Case-insensitive search in email"),
    service: UsersService = Depends(get_users_service)
):
    """
    List users with pagination and filters, newest first.
    """
    users, total = service.get_many(page=page, limit=limit, role=role, status=status, search=search)

    return UserListResponse(
        data=[UserResponse.from_user(user) for user in users],
        pagination=PaginationMeta.build(page=page, limit=limit, total=total),
    )


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(
    user_id: str,
    service: UsersService = Depends(get_users_service)
):
    """Get a single user."""
    user = service.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return UserEnvelope(data=UserResponse.from_user(user))


@router.get("/{user_id}/verify", response_model=VerificationResponse)
def verify_user(
    user_id: str,
    service: UsersService = Depends(get_users_service)
):
    """
    Re-check a stored user's identity on the server.

    Recomputes SHA-384 of the email, compares it with the stored digest and
    verifies the stored signature under the stored public key.
    """
    verified = service.verify_user_signature(user_id)
    if verified is None:
        raise NotFoundError("User not found")
    return VerificationResponse(data=VerificationData(id=user_id, verified=verified))


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: str,
    request: UpdateUserRequest,
    service: UsersService = Depends(get_users_service)
):
    """
    Update role and/or status.

    The email and its signed identity cannot be changed.
    """
    user = service.update(user_id, role=request.role, status=request.status)
    if not user:
        raise NotFoundError("User not found")
    return UserEnvelope(data=UserResponse.from_user(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    service: UsersService = Depends(get_users_service)
):
    """Delete a user."""
    if not service.delete(user_id):
        raise NotFoundError("User not found")
    return MessageResponse(message="User deleted successfully")
