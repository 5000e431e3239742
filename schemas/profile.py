# schemas/profile.py
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator


class Gender(str, Enum):
    MAN = "man"
    WOMAN = "woman"
    NONBINARY = "nonbinary"


class LookingFor(str, Enum):
    MEN = "men"
    WOMEN = "women"
    EVERYONE = "everyone"


class AttachmentStyle(str, Enum):
    SECURE = "secure"
    ANXIOUS = "anxious"
    AVOIDANT = "avoidant"
    DISORGANIZED = "disorganized"


class PersonalityType(str, Enum):
    INTJ = "INTJ"
    INTP = "INTP"
    ENTJ = "ENTJ"
    ENTP = "ENTP"
    INFJ = "INFJ"
    INFP = "INFP"
    ENFJ = "ENFJ"
    ENFP = "ENFP"
    ISTJ = "ISTJ"
    ISFJ = "ISFJ"
    ESTJ = "ESTJ"
    ESFJ = "ESFJ"
    ISTP = "ISTP"
    ISFP = "ISFP"
    ESTP = "ESTP"
    ESFP = "ESFP"


class LoveLanguage(str, Enum):
    WORDS = "words"
    ACTS = "acts"
    GIFTS = "gifts"
    TIME = "time"
    TOUCH = "touch"


class ConflictStyle(str, Enum):
    AVOID = "avoid"
    COMPETE = "compete"
    ACCOMMODATE = "accommodate"
    COMPROMISE = "compromise"
    COLLABORATE = "collaborate"


class CommunicationFrequency(str, Enum):
    CONSTANT = "constant"
    FREQUENT = "frequent"
    MODERATE = "moderate"
    MINIMAL = "minimal"


class AffectionLevel(str, Enum):
    VERY_AFFECTIONATE = "very_affectionate"
    MODERATE = "moderate"
    RESERVED = "reserved"
    MINIMAL = "minimal"


class FinancialAttitude(str, Enum):
    SAVER = "saver"
    BALANCED = "balanced"
    SPENDER = "spender"


class RelationshipGoal(str, Enum):
    CASUAL = "casual"
    SERIOUS = "serious"
    MARRIAGE = "marriage"
    UNSURE = "unsure"


class BigFiveScores(BaseModel):
    """OCEAN traits on a 0-100 scale; traits that were not measured stay at 50."""

    openness: float = Field(50, ge=0, le=100)
    conscientiousness: float = Field(50, ge=0, le=100)
    extraversion: float = Field(50, ge=0, le=100)
    agreeableness: float = Field(50, ge=0, le=100)
    neuroticism: float = Field(50, ge=0, le=100)

    def as_vector(self) -> Tuple[float, float, float, float, float]:
        return (
            self.openness,
            self.conscientiousness,
            self.extraversion,
            self.agreeableness,
            self.neuroticism,
        )

    class Config:
        from_attributes = True


class ProfileBase(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100, description="Display name")
    about: Optional[str] = Field(None, description="Free-text bio")

    age: int = Field(..., ge=18, le=120)
    gender: Optional[Gender] = None
    looking_for: Optional[LookingFor] = None
    age_min: Optional[int] = Field(None, ge=18, le=120, description="Lower bound of the seeking age range")
    age_max: Optional[int] = Field(None, ge=18, le=120, description="Upper bound of the seeking age range")
    timezone: Optional[str] = Field(None, max_length=64, description="IANA zone for the daily quota")

    attachment_style: Optional[AttachmentStyle] = None
    personality_type: Optional[PersonalityType] = None
    love_languages: List[LoveLanguage] = Field(default_factory=list, description="Ranked, primary first")
    values: List[str] = Field(default_factory=list)
    big_five: Optional[BigFiveScores] = None

    conflict_style: Optional[ConflictStyle] = None
    communication_frequency: Optional[CommunicationFrequency] = None
    affection_level: Optional[AffectionLevel] = None
    financial_attitude: Optional[FinancialAttitude] = None
    relationship_goal: Optional[RelationshipGoal] = None

    @field_validator("love_languages")
    @classmethod
    def _unique_love_languages(cls, value: List[LoveLanguage]) -> List[LoveLanguage]:
        if len(set(value)) != len(value):
            raise ValueError("love_languages must not repeat a language")
        return value

    @field_validator("values")
    @classmethod
    def _normalize_values(cls, value: List[str]) -> List[str]:
        # Tags are compared case-insensitively; keep first occurrence order
        seen = []
        for tag in value:
            tag = tag.strip().casefold()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    @model_validator(mode="after")
    def _check_age_range(self):
        if self.age_min is not None and self.age_max is not None and self.age_min > self.age_max:
            raise ValueError("age_min must not exceed age_max")
        return self

    class Config:
        from_attributes = True
        validate_by_name = True


class ProfileUpsert(ProfileBase):
    pass


class ProfileData(ProfileBase):
    """A stored profile as the scorer and feed builder see it."""

    user_id: str = Field(..., min_length=1, max_length=64)


class ProfileRead(ProfileData):
    created_at: datetime
    updated_at: datetime
