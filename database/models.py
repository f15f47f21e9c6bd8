"""
============================================================================
URL KEEP-ALIVE - DATABASE MODELS
============================================================================
SQLAlchemy ORM model for the target store: one row per monitored URL.
============================================================================
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Index, Integer, String, func
from sqlalchemy.orm import declarative_base

from config.constants import Limits


# ============================================================================
# BASE MODEL CONFIGURATION
# ============================================================================

Base = declarative_base()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Mixin to add created_at and updated_at timestamps to models.
    """
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        onupdate=_utc_now,
        server_default=func.now(),
    )


# ============================================================================
# TARGET
# ============================================================================

class Target(Base, TimestampMixin):
    """
    A monitored URL and its keep-alive state.

    ``request_count`` counts successful pings since the last start,
    ``total_requests`` counts every attempt made while active, and
    ``start_time`` holds epoch milliseconds of the last start.
    """
    __tablename__ = "targets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    url = Column(String(Limits.MAX_URL_LENGTH), nullable=False, unique=True, index=True)

    active = Column(Boolean, default=False, nullable=False)
    request_count = Column(Integer, default=0, nullable=False)
    total_requests = Column(Integer, default=0, nullable=False)
    start_time = Column(BigInteger, nullable=True)

    __table_args__ = (
        Index("idx_target_active", "active"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "active": bool(self.active),
            "requestCount": self.request_count or 0,
            "totalRequests": self.total_requests or 0,
            "startTime": self.start_time,
        }

    def __repr__(self) -> str:
        return (
            f"<Target(url={self.url!r}, active={self.active}, "
            f"request_count={self.request_count}, total_requests={self.total_requests})>"
        )
