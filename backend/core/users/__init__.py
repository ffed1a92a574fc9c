"""
User Management

Service layer for admin-panel users: signed creation, updates, statistics
and the protobuf export.
"""
from backend.core.users.service import UsersService, UserStatsSummary, format_created_at
from backend.core.users.export import ExportService, user_to_entry

__all__ = [
    "UsersService",
    "UserStatsSummary",
    "format_created_at",
    "ExportService",
    "user_to_entry",
]
