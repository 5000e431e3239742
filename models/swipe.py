# models/swipe.py
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func

from .base import Base


class Swipe(Base):
    __tablename__ = "swipes"
    __table_args__ = (
        # One active record per ordered pair; repeat actions overwrite it
        UniqueConstraint("actor_id", "target_id", name="uq_swipes_actor_target"),
        Index("ix_swipes_target_actor", "target_id", "actor_id"),
    )

    id = Column(String(32), primary_key=True)
    actor_id = Column(String(64), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False)
    target_id = Column(String(64), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False)
    action = Column(String(16), nullable=False)
    consumed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Swipe {self.actor_id}→{self.target_id} {self.action}>"
