# schemas/match.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .profile import ProfileData


class MatchRead(BaseModel):
    match_id: str = Field(..., description="Also the chat conversation key")
    user: ProfileData
    compatibility_score: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
        validate_by_name = True
