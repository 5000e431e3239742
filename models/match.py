# models/match.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func

from .base import Base


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        # user1_id < user2_id, so the pair key is order-independent
        UniqueConstraint("user1_id", "user2_id", name="uq_matches_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_matches_sorted_pair"),
    )

    id = Column(String(32), primary_key=True)
    user1_id = Column(String(64), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False, index=True)
    user2_id = Column(String(64), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False, index=True)
    compatibility_score = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def other_user_id(self, user_id: str) -> str:
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def __repr__(self):
        return f"<Match {self.user1_id}↔{self.user2_id}>"
