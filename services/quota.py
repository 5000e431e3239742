"""
Daily like / superlike quota.

State lives in one DailyQuota row per user. The row is created the first
time a user is seen and reset lazily when the calendar day in the zone
pinned on the row moves forward; nothing runs on a timer. Every decrement
is a single conditional UPDATE, so concurrent requests for the same user
can never push usage past the limit.
"""
import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import StorageUnavailableError
from models.daily_quota import DailyQuota
from models.profile import Profile
from schemas.quota import ConsumeResult, QuotaKind, QuotaStatus

logger = logging.getLogger(__name__)


def _resolve_zone(name: Optional[str]) -> tzinfo:
    for candidate in (name, settings.QUOTA_TIMEZONE):
        if not candidate:
            continue
        if candidate.upper() == "UTC":
            return timezone.utc
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, falling back", candidate)
    return timezone.utc


def date_key_for(now: datetime, tz_name: Optional[str] = None) -> str:
    """Calendar day of `now` in the given zone, as YYYY-MM-DD. Naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(_resolve_zone(tz_name)).date().isoformat()


def daily_limit(kind: QuotaKind) -> int:
    return settings.DAILY_LIKE_LIMIT if kind == QuotaKind.LIKE else settings.DAILY_SUPERLIKE_LIMIT


def _used_column(kind: QuotaKind):
    return DailyQuota.likes_used if kind == QuotaKind.LIKE else DailyQuota.superlikes_used


async def _profile_zone(db: AsyncSession, user_id: str) -> Optional[str]:
    res = await db.execute(select(Profile.timezone).where(Profile.user_id == user_id))
    return res.scalar_one_or_none()


async def today_key(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> str:
    """Date key in the profile's current zone. Used where no quota row is kept."""
    now = now or datetime.now(timezone.utc)
    return date_key_for(now, await _profile_zone(db, user_id))


async def _load(db: AsyncSession, user_id: str) -> Optional[DailyQuota]:
    res = await db.execute(
        select(DailyQuota)
        .where(DailyQuota.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def ensure_current(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> DailyQuota:
    """
    Loads the user's quota row, creating it or rolling it over to a new day. Commits.

    The day is counted in the zone pinned on the row. The row only ever moves
    forward: a request whose clock reads an earlier day than the stored one
    (or a zone edit that would put the user back a day) gets the stored day.
    """
    now = now or datetime.now(timezone.utc)
    state = await _load(db, user_id)

    if state is None:
        zone = await _profile_zone(db, user_id)
        db.add(DailyQuota(
            user_id=user_id,
            date_key=date_key_for(now, zone),
            timezone=zone,
            likes_used=0,
            superlikes_used=0,
        ))
        try:
            await db.commit()
        except IntegrityError:
            # created by a concurrent request
            await db.rollback()
        state = await _load(db, user_id)

    current_key = date_key_for(now, state.timezone)
    if current_key > state.date_key:
        # A new profile zone takes over here, but never moves the key back
        zone = await _profile_zone(db, user_id)
        new_key = max(current_key, date_key_for(now, zone))
        # Only the request that still sees the stale day performs the reset
        await db.execute(
            update(DailyQuota)
            .where(DailyQuota.user_id == user_id, DailyQuota.date_key == state.date_key)
            .values(date_key=new_key, timezone=zone, likes_used=0, superlikes_used=0)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        logger.info("Quota for %s reset for %s", user_id, new_key)
        state = await _load(db, user_id)

    return state


async def reserve(db: AsyncSession, user_id: str, kind: QuotaKind, date_key: str) -> bool:
    """
    Takes one unit of `kind` inside the caller's transaction.
    Returns False when nothing is left. Does not commit.
    """
    column = _used_column(kind)
    res = await db.execute(
        update(DailyQuota)
        .where(
            DailyQuota.user_id == user_id,
            DailyQuota.date_key == date_key,
            column < daily_limit(kind),
        )
        .values({column: column + 1})
        .execution_options(synchronize_session=False)
    )
    return res.rowcount == 1


def _status(state: DailyQuota) -> QuotaStatus:
    return QuotaStatus(
        date_key=state.date_key,
        likes_remaining=max(0, settings.DAILY_LIKE_LIMIT - state.likes_used),
        superlikes_remaining=max(0, settings.DAILY_SUPERLIKE_LIMIT - state.superlikes_used),
    )


async def check_and_reset(
    db: AsyncSession,
    user_id: str,
    *,
    is_unlimited_tier: bool = False,
    now: Optional[datetime] = None,
) -> QuotaStatus:
    try:
        if is_unlimited_tier:
            return QuotaStatus(date_key=await today_key(db, user_id, now), unlimited=True)
        state = await ensure_current(db, user_id, now)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Quota check failed for %s: %s", user_id, exc)
        raise StorageUnavailableError("Quota storage unavailable") from exc
    return _status(state)


async def consume(
    db: AsyncSession,
    user_id: str,
    kind: QuotaKind,
    *,
    is_unlimited_tier: bool = False,
    now: Optional[datetime] = None,
) -> ConsumeResult:
    """Uses one like or superlike. Exhaustion is a result, not an exception."""
    kind = QuotaKind(kind)
    if is_unlimited_tier:
        return ConsumeResult.OK

    try:
        state = await ensure_current(db, user_id, now)
        taken = await reserve(db, user_id, kind, state.date_key)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Quota consume failed for %s: %s", user_id, exc)
        raise StorageUnavailableError("Quota storage unavailable") from exc

    if not taken:
        logger.info("Daily %s quota exhausted for %s", kind.value, user_id)
        return ConsumeResult.EXHAUSTED
    return ConsumeResult.OK

