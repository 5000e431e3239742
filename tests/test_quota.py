import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from core.config import settings
from core.errors import StorageUnavailableError
from models.daily_quota import DailyQuota
from schemas.quota import ConsumeResult, QuotaKind
from services import quota

DAY_ONE = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
DAY_ONE_LATE = datetime(2026, 3, 14, 23, 59, tzinfo=timezone.utc)
DAY_TWO = datetime(2026, 3, 15, 0, 1, tzinfo=timezone.utc)
NOON = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


async def test_fresh_user_gets_full_allotment(db):
    status = await quota.check_and_reset(db, "u1", now=DAY_ONE)

    assert status.date_key == "2026-03-14"
    assert status.likes_remaining == 10
    assert status.superlikes_remaining == 1
    assert not status.unlimited


async def test_ten_likes_then_exhausted(db):
    results = [await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_ONE) for _ in range(10)]
    assert results == [ConsumeResult.OK] * 10

    assert await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_ONE_LATE) == ConsumeResult.EXHAUSTED
    status = await quota.check_and_reset(db, "u1", now=DAY_ONE_LATE)
    assert status.likes_remaining == 0


async def test_exhausted_quota_never_goes_negative(db):
    for _ in range(13):
        await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_ONE)

    row = (await db.execute(select(DailyQuota).where(DailyQuota.user_id == "u1"))).scalar_one()
    assert row.likes_used == 10


async def test_rollover_restores_full_allotment(db):
    for _ in range(10):
        await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_ONE)
    await quota.consume(db, "u1", QuotaKind.SUPERLIKE, now=DAY_ONE)

    status = await quota.check_and_reset(db, "u1", now=DAY_TWO)

    assert status.date_key == "2026-03-15"
    assert status.likes_remaining == 10
    assert status.superlikes_remaining == 1
    assert await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_TWO) == ConsumeResult.OK


async def test_likes_and_superlikes_are_counted_separately(db):
    assert await quota.consume(db, "u1", QuotaKind.SUPERLIKE, now=DAY_ONE) == ConsumeResult.OK
    assert await quota.consume(db, "u1", QuotaKind.SUPERLIKE, now=DAY_ONE) == ConsumeResult.EXHAUSTED
    assert await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_ONE) == ConsumeResult.OK

    status = await quota.check_and_reset(db, "u1", now=DAY_ONE)
    assert (status.likes_remaining, status.superlikes_remaining) == (9, 0)


async def test_configured_limit_is_used(db):
    settings.DAILY_LIKE_LIMIT = 2

    assert await quota.consume(db, "u1", "like", now=DAY_ONE) == ConsumeResult.OK
    assert await quota.consume(db, "u1", "like", now=DAY_ONE) == ConsumeResult.OK
    assert await quota.consume(db, "u1", "like", now=DAY_ONE) == ConsumeResult.EXHAUSTED


async def test_unlimited_tier_bypasses_quota(db):
    for _ in range(25):
        assert await quota.consume(db, "vip", QuotaKind.LIKE, is_unlimited_tier=True, now=DAY_ONE) == ConsumeResult.OK

    status = await quota.check_and_reset(db, "vip", is_unlimited_tier=True, now=DAY_ONE)
    assert status.unlimited
    assert status.likes_remaining is None

    rows = (await db.execute(select(DailyQuota))).scalars().all()
    assert rows == []


async def test_concurrent_consumes_stop_at_the_limit(session_factory):
    async with session_factory() as setup:
        await quota.check_and_reset(setup, "u1", now=DAY_ONE)

    async def _consume():
        async with session_factory() as session:
            return await quota.consume(session, "u1", QuotaKind.LIKE, now=DAY_ONE)

    results = await asyncio.gather(*[_consume() for _ in range(15)])

    assert results.count(ConsumeResult.OK) == 10
    assert results.count(ConsumeResult.EXHAUSTED) == 5


def test_date_key_uses_utc_for_naive_and_unknown_zones():
    naive = datetime(2026, 3, 14, 23, 0)
    assert quota.date_key_for(naive) == "2026-03-14"
    assert quota.date_key_for(DAY_ONE, "Not/AZone") == "2026-03-14"


async def test_storage_failure_is_reported_as_distinct_error(db, monkeypatch):
    async def _broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is down"))

    monkeypatch.setattr(db, "execute", _broken)

    with pytest.raises(StorageUnavailableError):
        await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_ONE)


async def test_request_with_an_earlier_clock_does_not_reopen_the_day(db):
    for _ in range(10):
        assert await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_TWO) == ConsumeResult.OK

    stale = await quota.check_and_reset(db, "u1", now=DAY_ONE_LATE)
    assert stale.date_key == "2026-03-15"
    assert stale.likes_remaining == 0
    assert await quota.consume(db, "u1", QuotaKind.LIKE, now=DAY_ONE_LATE) == ConsumeResult.EXHAUSTED

    status = await quota.check_and_reset(db, "u1", now=DAY_TWO)
    assert (status.date_key, status.likes_remaining) == ("2026-03-15", 0)


async def test_day_is_counted_in_the_profile_timezone(db, save_profile):
    await save_profile("u1", timezone="Pacific/Kiritimati")

    # 12:00 UTC is already the next morning at UTC+14
    status = await quota.check_and_reset(db, "u1", now=NOON)

    assert status.date_key == "2026-03-15"


async def test_switching_timezones_does_not_refill_the_quota(db, save_profile):
    profile = await save_profile("u1", timezone="Pacific/Pago_Pago")
    granted = 0
    for zone in ("Pacific/Pago_Pago", "Pacific/Kiritimati", "Pacific/Pago_Pago", "Pacific/Kiritimati"):
        profile.timezone = zone
        await db.commit()
        for _ in range(10):
            if await quota.consume(db, "u1", QuotaKind.LIKE, now=NOON) == ConsumeResult.OK:
                granted += 1

    assert granted == 10


async def test_new_timezone_applies_from_the_next_day(db, save_profile):
    profile = await save_profile("u1", timezone="Pacific/Pago_Pago")
    for _ in range(10):
        await quota.consume(db, "u1", QuotaKind.LIKE, now=NOON)

    profile.timezone = "Pacific/Kiritimati"
    await db.commit()
    same_instant = await quota.check_and_reset(db, "u1", now=NOON)
    assert (same_instant.date_key, same_instant.likes_remaining) == ("2026-03-14", 0)

    next_day = await quota.check_and_reset(db, "u1", now=NOON + timedelta(days=1))
    assert next_day.date_key == "2026-03-16"
    assert next_day.likes_remaining == 10

    row = (await db.execute(select(DailyQuota).where(DailyQuota.user_id == "u1"))).scalar_one()
    assert row.timezone == "Pacific/Kiritimati"
