# schemas/quota.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class QuotaKind(str, Enum):
    LIKE = "like"
    SUPERLIKE = "superlike"


class ConsumeResult(str, Enum):
    OK = "ok"
    EXHAUSTED = "exhausted"


class QuotaStatus(BaseModel):
    date_key: str = Field(..., description="Calendar day in the user's reference timezone")
    likes_remaining: Optional[int] = Field(None, description="null for unlimited-tier users")
    superlikes_remaining: Optional[int] = Field(None, description="null for unlimited-tier users")
    unlimited: bool = False

    def remaining(self, kind: QuotaKind) -> Optional[int]:
        return self.likes_remaining if kind == QuotaKind.LIKE else self.superlikes_remaining


class ConsumeRequest(BaseModel):
    kind: QuotaKind


class ConsumeResponse(BaseModel):
    result: ConsumeResult
    quota: QuotaStatus
