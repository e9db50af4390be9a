"""
Database init - Exports for routes
"""

from .base import Base, TimestampMixin
from esttetica.database import engine, SessionLocal, get_db

__all__ = ["Base", "TimestampMixin", "engine", "SessionLocal", "get_db"]
