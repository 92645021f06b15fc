"""API package initialization"""
from .handlers import create_app
from .filters import is_admin

__all__ = ['create_app', 'is_admin']
