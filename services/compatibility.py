"""
Compatibility scoring between two profiles.

Every dimension yields an independent 0-100 sub-score. A dimension is only
scored when both profiles carry the data for it; missing dimensions are left
out of the breakdown and the weights of the remaining ones are renormalised.
Everything here is pure: no I/O, no randomness, safe to call concurrently.
"""
import math
from itertools import combinations
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from schemas.compatibility import CompatibilityResult, Dimension
from schemas.profile import (
    AffectionLevel,
    AttachmentStyle,
    BigFiveScores,
    CommunicationFrequency,
    ConflictStyle,
    FinancialAttitude,
    LoveLanguage,
    PersonalityType,
    ProfileBase,
    RelationshipGoal,
)

DIMENSION_WEIGHTS: Dict[Dimension, float] = {
    Dimension.ATTACHMENT: 0.20,
    Dimension.PERSONALITY: 0.15,
    Dimension.LOVE_LANGUAGE: 0.15,
    Dimension.VALUES: 0.15,
    Dimension.BIG_FIVE: 0.15,
    Dimension.LIFESTYLE: 0.20,
}


def _pair(a, b) -> FrozenSet:
    return frozenset((a, b))


# ---------------------------------------------------------------- attachment

_A = AttachmentStyle
ATTACHMENT_SCORES: Dict[FrozenSet[AttachmentStyle], int] = {
    _pair(_A.SECURE, _A.SECURE): 95,
    _pair(_A.SECURE, _A.ANXIOUS): 80,
    _pair(_A.SECURE, _A.AVOIDANT): 75,
    _pair(_A.SECURE, _A.DISORGANIZED): 65,
    _pair(_A.ANXIOUS, _A.ANXIOUS): 50,
    _pair(_A.ANXIOUS, _A.AVOIDANT): 30,
    _pair(_A.ANXIOUS, _A.DISORGANIZED): 40,
    _pair(_A.AVOIDANT, _A.AVOIDANT): 55,
    _pair(_A.AVOIDANT, _A.DISORGANIZED): 40,
    _pair(_A.DISORGANIZED, _A.DISORGANIZED): 25,
}


# --------------------------------------------------------------- personality

PERSONALITY_BEST = 95
PERSONALITY_GOOD = 80
PERSONALITY_CHALLENGING = 40
PERSONALITY_NEUTRAL = 60

# Ideal partners per type, strongest first: two "best", then two "good"
IDEAL_PARTNERS: Dict[str, Tuple[str, str, str, str]] = {
    "INTJ": ("ENFP", "ENTP", "INFJ", "ENTJ"),
    "INTP": ("ENTJ", "ENFJ", "INFP", "ENTP"),
    "ENTJ": ("INTP", "INFP", "ENFP", "INTJ"),
    "ENTP": ("INFJ", "INTJ", "ENFJ", "INTP"),
    "INFJ": ("ENTP", "ENFP", "INTJ", "INFP"),
    "INFP": ("ENFJ", "ENTJ", "INFJ", "ENFP"),
    "ENFJ": ("INFP", "INTP", "ENFP", "INFJ"),
    "ENFP": ("INFJ", "INTJ", "ENFJ", "INFP"),
    "ISTJ": ("ESFP", "ESTP", "ISFJ", "ESTJ"),
    "ISFJ": ("ESFP", "ESTP", "ISTJ", "ESFJ"),
    "ESTJ": ("ISFP", "ISTP", "ESFJ", "ISTJ"),
    "ESFJ": ("ISFP", "ISTP", "ESTJ", "ISFJ"),
    "ISTP": ("ESFJ", "ESTJ", "ISFP", "ESTP"),
    "ISFP": ("ESFJ", "ESTJ", "ISTP", "ESFP"),
    "ESTP": ("ISFJ", "ISTJ", "ESFP", "ISTP"),
    "ESFP": ("ISFJ", "ISTJ", "ESTP", "ISFP"),
}


def _build_personality_table() -> Dict[FrozenSet[str], int]:
    table: Dict[FrozenSet[str], int] = {}
    codes = [t.value for t in PersonalityType]

    # Opposite perceiving and judging letters (NT vs SF, NF vs ST)
    for a, b in combinations(codes, 2):
        if a[1] != b[1] and a[2] != b[2]:
            table[_pair(a, b)] = PERSONALITY_CHALLENGING

    for code, partners in IDEAL_PARTNERS.items():
        for rank, partner in enumerate(partners):
            tier = PERSONALITY_BEST if rank < 2 else PERSONALITY_GOOD
            key = _pair(code, partner)
            # Either side listing the pair is enough; the stronger tier wins
            table[key] = max(tier, table.get(key, 0))
    return table


PERSONALITY_SCORES: Dict[FrozenSet[str], int] = _build_personality_table()


# ----------------------------------------------------------------- lifestyle

_C = ConflictStyle
_G = RelationshipGoal

CONFLICT_ADJACENT = {
    _pair(_C.COLLABORATE, _C.COMPROMISE),
    _pair(_C.COLLABORATE, _C.ACCOMMODATE),
    _pair(_C.COMPROMISE, _C.ACCOMMODATE),
    _pair(_C.COLLABORATE, _C.AVOID),
}

GOAL_ADJACENT = {
    _pair(_G.SERIOUS, _G.MARRIAGE),
    _pair(_G.CASUAL, _G.UNSURE),
    _pair(_G.SERIOUS, _G.UNSURE),
}

# Ordinal scales: neighbours on the scale are adjacent
COMMUNICATION_SCALE: List[CommunicationFrequency] = list(CommunicationFrequency)
AFFECTION_SCALE: List[AffectionLevel] = list(AffectionLevel)
FINANCIAL_SCALE: List[FinancialAttitude] = list(FinancialAttitude)

FULL_CREDIT = 1.0
PARTIAL_CREDIT = 0.5


def _set_credit(a, b, adjacent: Iterable[FrozenSet]) -> float:
    if a == b:
        return FULL_CREDIT
    if _pair(a, b) in adjacent:
        return PARTIAL_CREDIT
    return 0.0


def _scale_credit(a, b, scale: Sequence) -> float:
    distance = abs(scale.index(a) - scale.index(b))
    if distance == 0:
        return FULL_CREDIT
    if distance == 1:
        return PARTIAL_CREDIT
    return 0.0


# ---------------------------------------------------------------- sub-scores

def attachment_score(a: Optional[AttachmentStyle], b: Optional[AttachmentStyle]) -> Optional[int]:
    if a is None or b is None:
        return None
    return ATTACHMENT_SCORES[_pair(AttachmentStyle(a), AttachmentStyle(b))]


def personality_score(a: Optional[PersonalityType], b: Optional[PersonalityType]) -> Optional[int]:
    if a is None or b is None:
        return None
    key = _pair(PersonalityType(a).value, PersonalityType(b).value)
    return PERSONALITY_SCORES.get(key, PERSONALITY_NEUTRAL)


def love_language_score(a: Sequence[LoveLanguage], b: Sequence[LoveLanguage]) -> Optional[int]:
    """Both primaries equal scores 100; otherwise each primary found in the other's list adds 30 to a base of 30."""
    if not a or not b:
        return None
    if a[0] == b[0]:
        return 100
    score = 30
    if a[0] in b:
        score += 30
    if b[0] in a:
        score += 30
    return score


def values_score(a: Iterable[str], b: Iterable[str]) -> Optional[int]:
    set_a, set_b = set(a), set(b)
    if not set_a or not set_b:
        return None
    return _round_half_up(100 * len(set_a & set_b) / len(set_a | set_b))


BIG_FIVE_MAX_DISTANCE = 100 * math.sqrt(5)


def big_five_score(a: Optional[BigFiveScores], b: Optional[BigFiveScores]) -> Optional[int]:
    if a is None or b is None:
        return None
    distance = math.dist(a.as_vector(), b.as_vector())
    return _round_half_up(100 * (1 - distance / BIG_FIVE_MAX_DISTANCE))


def lifestyle_score(a: ProfileBase, b: ProfileBase) -> Optional[int]:
    credits: List[float] = []

    if a.conflict_style is not None and b.conflict_style is not None:
        credits.append(_set_credit(a.conflict_style, b.conflict_style, CONFLICT_ADJACENT))
    if a.communication_frequency is not None and b.communication_frequency is not None:
        credits.append(_scale_credit(a.communication_frequency, b.communication_frequency, COMMUNICATION_SCALE))
    if a.affection_level is not None and b.affection_level is not None:
        credits.append(_scale_credit(a.affection_level, b.affection_level, AFFECTION_SCALE))
    if a.financial_attitude is not None and b.financial_attitude is not None:
        credits.append(_scale_credit(a.financial_attitude, b.financial_attitude, FINANCIAL_SCALE))
    if a.relationship_goal is not None and b.relationship_goal is not None:
        credits.append(_set_credit(a.relationship_goal, b.relationship_goal, GOAL_ADJACENT))

    if not credits:
        return None
    return _round_half_up(100 * sum(credits) / len(credits))


# --------------------------------------------------------------------- total

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def score(profile_a: ProfileBase, profile_b: ProfileBase) -> CompatibilityResult:
    """
    Compatibility of two profiles.

    Returns CompatibilityResult with total=None when the pair shares no
    scorable dimension; callers must show "no score" rather than a number.
    score(a, b) == score(b, a) for every pair.
    """
    sub_scores = {
        Dimension.ATTACHMENT: attachment_score(profile_a.attachment_style, profile_b.attachment_style),
        Dimension.PERSONALITY: personality_score(profile_a.personality_type, profile_b.personality_type),
        Dimension.LOVE_LANGUAGE: love_language_score(profile_a.love_languages, profile_b.love_languages),
        Dimension.VALUES: values_score(profile_a.values, profile_b.values),
        Dimension.BIG_FIVE: big_five_score(profile_a.big_five, profile_b.big_five),
        Dimension.LIFESTYLE: lifestyle_score(profile_a, profile_b),
    }
    breakdown = {dim: _clamp(value) for dim, value in sub_scores.items() if value is not None}
    if not breakdown:
        return CompatibilityResult(total=None, breakdown={})

    # Fixed dimension order keeps the float sum identical for (a, b) and (b, a)
    weight_sum = sum(DIMENSION_WEIGHTS[dim] for dim in breakdown)
    weighted = sum(DIMENSION_WEIGHTS[dim] * value for dim, value in breakdown.items())
    total = _clamp(_round_half_up(weighted / weight_sum))
    return CompatibilityResult(total=total, breakdown=breakdown)
