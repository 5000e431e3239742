# schemas/compatibility.py
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class Dimension(str, Enum):
    ATTACHMENT = "attachment"
    PERSONALITY = "personality"
    LOVE_LANGUAGE = "love_language"
    VALUES = "values"
    BIG_FIVE = "big_five"
    LIFESTYLE = "lifestyle"


class CompatibilityResult(BaseModel):
    total: Optional[int] = Field(
        None, ge=0, le=100, description="0-100, or null when there is not enough data to score"
    )
    breakdown: Dict[Dimension, int] = Field(
        default_factory=dict, description="Sub-scores for the dimensions both profiles filled in"
    )

    @property
    def has_score(self) -> bool:
        return self.total is not None

    class Config:
        frozen = True
