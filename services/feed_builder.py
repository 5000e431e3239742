import logging
from typing import Collection, Iterable, List

from schemas.feed import FeedCandidate
from schemas.profile import Gender, LookingFor, ProfileData
from services.compatibility import score

logger = logging.getLogger(__name__)

SEEKING_GENDER = {
    LookingFor.MEN: Gender.MAN,
    LookingFor.WOMEN: Gender.WOMAN,
}


def matches_preferences(user: ProfileData, candidate: ProfileData) -> bool:
    """Hard filter on the user's stated seeking preference (gender and age range)."""
    wanted = SEEKING_GENDER.get(user.looking_for) if user.looking_for else None
    # A candidate who has not stated a gender is not excluded
    if wanted is not None and candidate.gender is not None and candidate.gender != wanted:
        return False
    if user.age_min is not None and candidate.age < user.age_min:
        return False
    if user.age_max is not None and candidate.age > user.age_max:
        return False
    return True


def build_feed(
    user: ProfileData,
    candidate_pool: Iterable[ProfileData],
    seen_ids: Collection[str],
) -> List[FeedCandidate]:
    """
    Ranks the candidate pool for `user`.

    Drops the user themselves, everyone in seen_ids and candidates outside
    the seeking preference. Scored candidates come first, by total desc and
    user_id asc; candidates without a score follow in pool order.
    """
    excluded = set(seen_ids)
    excluded.add(user.user_id)

    scored: List[FeedCandidate] = []
    unscored: List[FeedCandidate] = []
    for candidate in candidate_pool:
        if candidate.user_id in excluded:
            continue
        if not matches_preferences(user, candidate):
            continue
        # The same id twice in the pool is shown once
        excluded.add(candidate.user_id)

        entry = FeedCandidate(profile=candidate, compatibility=score(user, candidate))
        if entry.compatibility.has_score:
            scored.append(entry)
        else:
            unscored.append(entry)

    scored.sort(key=lambda entry: (-entry.compatibility.total, entry.profile.user_id))
    logger.debug(
        "Feed for %s: %d scored, %d without score", user.user_id, len(scored), len(unscored)
    )
    return scored + unscored
