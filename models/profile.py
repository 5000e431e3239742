# models/profile.py
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func

from .base import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Opaque id issued by the auth service
    user_id = Column(String(64), primary_key=True)
    first_name = Column(String(100), nullable=True)
    about = Column(Text, nullable=True)

    age = Column(Integer, nullable=False)
    gender = Column(String(16), nullable=True)
    looking_for = Column(String(16), nullable=True)
    age_min = Column(Integer, nullable=True)
    age_max = Column(Integer, nullable=True)
    timezone = Column(String(64), nullable=True)

    attachment_style = Column(String(16), nullable=True)
    personality_type = Column(String(4), nullable=True)
    love_languages = Column(JSON, nullable=False, default=list)
    values = Column(JSON, nullable=False, default=list)
    big_five = Column(JSON, nullable=True)

    conflict_style = Column(String(16), nullable=True)
    communication_frequency = Column(String(16), nullable=True)
    affection_level = Column(String(24), nullable=True)
    financial_attitude = Column(String(16), nullable=True)
    relationship_goal = Column(String(16), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<Profile user_id={self.user_id} type={self.personality_type}>"
