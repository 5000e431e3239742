import logging
from typing import Collection, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import ValidationError

from core.errors import ProfileNotFoundError, ProfileValidationError, StorageUnavailableError
from models.profile import Profile
from schemas.profile import ProfileData, ProfileUpsert

logger = logging.getLogger(__name__)


async def get_profile(db: AsyncSession, user_id: str) -> Profile:
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


def to_profile_data(row: Profile) -> Optional[ProfileData]:
    """ProfileData for a stored row, or None with a warning when the row is malformed."""
    try:
        return ProfileData.model_validate(row)
    except ValidationError as exc:
        logger.warning("Skipping malformed profile %s: %s", row.user_id, exc)
        return None


async def get_profile_data(db: AsyncSession, user_id: str) -> ProfileData:
    profile = await get_profile(db, user_id)
    try:
        return ProfileData.model_validate(profile)
    except ValidationError as exc:
        raise ProfileValidationError(f"Stored profile {user_id} is malformed: {exc}") from exc


async def upsert_profile(db: AsyncSession, user_id: str, payload: ProfileUpsert) -> Profile:
    """Creates the profile at signup or overwrites it after an edit or a retaken assessment."""
    fields = payload.model_dump(mode="json")
    try:
        profile = await db.get(Profile, user_id)
        if profile is None:
            profile = Profile(user_id=user_id, **fields)
            db.add(profile)
            logger.info("Profile %s created", user_id)
        else:
            for key, value in fields.items():
                setattr(profile, key, value)
        await db.commit()
        await db.refresh(profile)
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Saving profile %s failed: %s", user_id, exc)
        raise StorageUnavailableError("Profile storage unavailable") from exc
    return profile


async def load_candidate_pool(
    db: AsyncSession,
    user_id: str,
    exclude_ids: Collection[str] = (),
    limit: Optional[int] = None,
) -> List[ProfileData]:
    """Every other profile not in exclude_ids, oldest signup first so the pool order is stable."""
    stmt = select(Profile).where(Profile.user_id != user_id)
    if exclude_ids:
        stmt = stmt.where(Profile.user_id.not_in(list(exclude_ids)))
    stmt = stmt.order_by(Profile.created_at, Profile.user_id)
    if limit is not None:
        stmt = stmt.limit(limit)
    res = await db.execute(stmt)

    # One broken row must not empty the whole feed
    pool = [to_profile_data(row) for row in res.scalars().all()]
    return [p for p in pool if p is not None]
