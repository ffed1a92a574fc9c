"""Database module"""
from .models import Base, User, USER_ROLES, USER_STATUSES
from .connection import get_db, init_db, create_tables, get_engine

__all__ = [
    'Base',
    'User',
    'USER_ROLES',
    'USER_STATUSES',
    'get_db',
    'init_db',
    'create_tables',
    'get_engine',
]
