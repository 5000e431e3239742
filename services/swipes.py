"""
Swipe recording and match detection.

Per ordered pair (actor, target) there is one Swipe row, overwritten by
later actions. A Match is created once per unordered pair, guarded by the
unique constraint on the sorted (user1_id, user2_id) key. The actor's swipe
is committed before the reciprocal swipe is looked up, so of two concurrent
reciprocal likes at least one sees the other, and the constraint lets only
one of them insert the Match.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Set, Tuple

from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ProfileNotFoundError, SelfSwipeError, StorageUnavailableError
from models.match import Match
from models.profile import Profile
from models.swipe import Swipe
from schemas.compatibility import CompatibilityResult
from schemas.profile import ProfileData
from schemas.quota import QuotaKind
from schemas.swipe import SwipeAction, SwipeResult
from services import match_events, profiles, quota
from services.compatibility import score

logger = logging.getLogger(__name__)

INTEREST_ACTIONS = (SwipeAction.LIKE.value, SwipeAction.SUPERLIKE.value)


def pair_key(user_a: str, user_b: str) -> Tuple[str, str]:
    """Order-independent key of a pair of users."""
    first, second = sorted((user_a, user_b))
    return first, second


async def _find_swipe(db: AsyncSession, actor_id: str, target_id: str) -> Optional[Swipe]:
    res = await db.execute(
        select(Swipe)
        .where(Swipe.actor_id == actor_id, Swipe.target_id == target_id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def _find_match(db: AsyncSession, user_a: str, user_b: str) -> Optional[Match]:
    user1_id, user2_id = pair_key(user_a, user_b)
    res = await db.execute(
        select(Match).where(Match.user1_id == user1_id, Match.user2_id == user2_id)
    )
    return res.scalar_one_or_none()


async def _has_interest(db: AsyncSession, actor_id: str, target_id: str) -> bool:
    res = await db.execute(
        select(Swipe.id).where(
            Swipe.actor_id == actor_id,
            Swipe.target_id == target_id,
            Swipe.action.in_(INTEREST_ACTIONS),
        )
    )
    return res.first() is not None


async def _pair_compatibility(db: AsyncSession, user_a: str, user_b: str) -> CompatibilityResult:
    res = await db.execute(select(Profile).where(Profile.user_id.in_((user_a, user_b))))
    loaded = {p.user_id: profiles.to_profile_data(p) for p in res.scalars().all()}
    first, second = loaded.get(user_a), loaded.get(user_b)
    if first is None or second is None:
        # The match still goes ahead, just without a score
        return CompatibilityResult(total=None)
    return score(first, second)


async def _write_swipe(
    db: AsyncSession,
    actor_id: str,
    target_id: str,
    action: SwipeAction,
    *,
    is_unlimited_tier: bool,
    now: datetime,
) -> bool:
    """
    Charges the quota and stores the swipe in one transaction.
    Returns False, with nothing written, when the quota is exhausted.
    """
    swipe = await _find_swipe(db, actor_id, target_id)

    # A resent request for the same action is not charged twice
    repeated = swipe is not None and swipe.action == action.value
    if action.is_interest and not repeated and not is_unlimited_tier:
        kind = QuotaKind(action.value)
        state = await quota.ensure_current(db, actor_id, now)
        if not await quota.reserve(db, actor_id, kind, state.date_key):
            await db.rollback()
            logger.info("Swipe %s→%s rejected: %s quota exhausted", actor_id, target_id, kind.value)
            return False

    if swipe is None:
        db.add(Swipe(
            actor_id=actor_id,
            target_id=target_id,
            action=action.value,
            created_at=now,
            updated_at=now,
        ))
    else:
        swipe.action = action.value
        swipe.updated_at = now
    await db.commit()
    return True


async def get_or_create_match(
    db: AsyncSession, user_a: str, user_b: str, *, now: Optional[datetime] = None
) -> Tuple[Match, bool]:
    """
    Returns the pair's Match and whether this call created it.
    Both swipes are marked consumed in the same transaction as the insert.
    """
    existing = await _find_match(db, user_a, user_b)
    if existing is not None:
        return existing, False

    user1_id, user2_id = pair_key(user_a, user_b)
    compatibility = await _pair_compatibility(db, user1_id, user2_id)
    match = Match(
        user1_id=user1_id,
        user2_id=user2_id,
        compatibility_score=compatibility.total,
        created_at=now or datetime.now(timezone.utc),
    )
    db.add(match)
    try:
        await db.flush()
        await db.execute(
            update(Swipe)
            .where(or_(
                and_(Swipe.actor_id == user1_id, Swipe.target_id == user2_id),
                and_(Swipe.actor_id == user2_id, Swipe.target_id == user1_id),
            ))
            .values(consumed=True)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except IntegrityError:
        # The other side of the pair inserted the Match first
        await db.rollback()
        existing = await _find_match(db, user1_id, user2_id)
        if existing is None:
            raise
        return existing, False

    logger.info("Match %s created for %s↔%s", match.id, user1_id, user2_id)
    return match, True


async def record_swipe(
    db: AsyncSession,
    actor_id: str,
    target_id: str,
    action: SwipeAction,
    *,
    is_unlimited_tier: bool = False,
    now: Optional[datetime] = None,
) -> SwipeResult:
    """
    Stores actor→target and reports whether the pair is now matched.

    Idempotent: repeating the call returns the same match_id and never
    creates a second Match. A pass never produces a match.
    """
    action = SwipeAction(action)
    if actor_id == target_id:
        raise SelfSwipeError(actor_id)
    now = now or datetime.now(timezone.utc)

    try:
        for user_id in (actor_id, target_id):
            if await db.get(Profile, user_id) is None:
                raise ProfileNotFoundError(user_id)

        try:
            written = await _write_swipe(
                db, actor_id, target_id, action, is_unlimited_tier=is_unlimited_tier, now=now
            )
        except IntegrityError:
            # Same actor→target inserted concurrently; the row exists now, overwrite it
            await db.rollback()
            logger.info("Concurrent swipe %s→%s, retrying as update", actor_id, target_id)
            written = await _write_swipe(
                db, actor_id, target_id, action, is_unlimited_tier=is_unlimited_tier, now=now
            )
        if not written:
            return SwipeResult(quota_exhausted=True)

        if not action.is_interest:
            return SwipeResult(is_match=False)
        if not await _has_interest(db, target_id, actor_id):
            return SwipeResult(is_match=False)

        match, created = await get_or_create_match(db, actor_id, target_id, now=now)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Swipe %s→%s failed: %s", actor_id, target_id, exc)
        raise StorageUnavailableError("Swipe storage unavailable") from exc

    if created:
        match_events.publish(match_events.MatchCreated(
            match_id=match.id,
            user1_id=match.user1_id,
            user2_id=match.user2_id,
            compatibility_score=match.compatibility_score,
            created_at=match.created_at,
        ))
    return SwipeResult(is_match=True, match_id=match.id)


# ------------------------------------------------------------------ read side

async def seen_ids(db: AsyncSession, user_id: str) -> Set[str]:
    """Everyone the user already swiped on or is matched with."""
    res = await db.execute(select(Swipe.target_id).where(Swipe.actor_id == user_id))
    ids = {row[0] for row in res.all()}
    res = await db.execute(
        select(Match.user1_id, Match.user2_id).where(
            or_(Match.user1_id == user_id, Match.user2_id == user_id)
        )
    )
    for user1_id, user2_id in res.all():
        ids.add(user2_id if user1_id == user_id else user1_id)
    return ids


async def list_matches(db: AsyncSession, user_id: str) -> List[Tuple[Match, ProfileData]]:
    """The user's matches with the other participant's profile, newest first."""
    res = await db.execute(
        select(Match)
        .where(or_(Match.user1_id == user_id, Match.user2_id == user_id))
        .order_by(Match.created_at.desc(), Match.id)
    )
    matches = res.scalars().all()
    if not matches:
        return []

    other_ids = {match.other_user_id(user_id) for match in matches}
    res = await db.execute(select(Profile).where(Profile.user_id.in_(list(other_ids))))
    others = {p.user_id: profiles.to_profile_data(p) for p in res.scalars().all()}

    out: List[Tuple[Match, ProfileData]] = []
    for match in matches:
        other = others.get(match.other_user_id(user_id))
        if other is None:
            continue
        out.append((match, other))
    return out


async def incoming_likes(db: AsyncSession, user_id: str) -> List[ProfileData]:
    """Profiles that liked the user and are still waiting for the user's answer."""
    answered = select(Swipe.target_id).where(Swipe.actor_id == user_id)
    res = await db.execute(
        select(Profile)
        .join(Swipe, Swipe.actor_id == Profile.user_id)
        .where(
            Swipe.target_id == user_id,
            Swipe.action.in_(INTEREST_ACTIONS),
            Swipe.actor_id != user_id,
            Swipe.actor_id.not_in(answered),
        )
        .order_by(Swipe.updated_at.desc(), Profile.user_id)
    )
    incoming = [profiles.to_profile_data(p) for p in res.scalars().all()]
    return [p for p in incoming if p is not None]
