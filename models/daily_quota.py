# models/daily_quota.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from .base import Base


class DailyQuota(Base):
    __tablename__ = "daily_quotas"

    user_id = Column(String(64), primary_key=True)
    # Calendar day (YYYY-MM-DD) in `timezone`
    date_key = Column(String(10), nullable=False)
    # Zone the day is counted in; a profile zone change applies from the next reset
    timezone = Column(String(64), nullable=True)
    likes_used = Column(Integer, nullable=False, default=0)
    superlikes_used = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return (
            f"<DailyQuota {self.user_id} {self.date_key} "
            f"likes={self.likes_used} superlikes={self.superlikes_used}>"
        )
