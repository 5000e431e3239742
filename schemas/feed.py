# schemas/feed.py
from pydantic import BaseModel

from .compatibility import CompatibilityResult
from .profile import ProfileData


class FeedCandidate(BaseModel):
    profile: ProfileData
    compatibility: CompatibilityResult

    class Config:
        from_attributes = True
