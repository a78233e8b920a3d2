# Models package - Import all models for Alembic discovery
from app.models.user import User
from app.models.page import Page

__all__ = [
    'User',
    'Page',
]
