# schemas/swipe.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SwipeAction(str, Enum):
    LIKE = "like"
    PASS = "pass"
    SUPERLIKE = "superlike"

    @property
    def is_interest(self) -> bool:
        return self in (SwipeAction.LIKE, SwipeAction.SUPERLIKE)


class SwipeRequest(BaseModel):
    action: SwipeAction


class SwipeResult(BaseModel):
    is_match: bool = False
    match_id: Optional[str] = Field(None, description="Conversation key for chat once matched")
    quota_exhausted: bool = False

    class Config:
        from_attributes = True
        validate_by_name = True
