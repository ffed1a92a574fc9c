"""
API Routes
"""
from backend.api.routes import users, export, stats

__all__ = ["users", "export", "stats"]
