"""
Common mixins for ORM models
"""
from sqlalchemy import Column, DateTime
from sqlalchemy.sql import func


class TimestampMixin:
    """Mixin for append-only records: only the creation instant is tracked"""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
