"""
FastAPI dependencies shared by the route modules.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from backend.core.config import get_settings
from backend.core.database import get_db
from backend.core.database.repository import UserRepository
from backend.core.identity import NotInitializedError, SigningContext
from backend.core.users import ExportService, UsersService


def get_signing_context(request: Request) -> SigningContext:
    """
    Signing context created at startup and stored on app.state.

    Raises:
        NotInitializedError: If startup did not create one
    """
    context = getattr(request.app.state, "signing_context", None)
    if context is None:
        raise NotInitializedError("Signing context not initialized")
    return context


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_users_service(
    repository: UserRepository = Depends(get_user_repository),
    signing_context: SigningContext = Depends(get_signing_context),
) -> UsersService:
    return UsersService(repository, signing_context, max_days=get_settings().stats_max_days)


def get_stats_service(repository: UserRepository = Depends(get_user_repository)) -> UsersService:
    # Read-only; works without a signing context
    return UsersService(repository, max_days=get_settings().stats_max_days)


def get_export_service(repository: UserRepository = Depends(get_user_repository)) -> ExportService:
    return ExportService(repository, max_records=get_settings().export_max_records)
