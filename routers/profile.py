# routers/profile.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchCoreError
from core.security import CurrentUser, get_current_user
from schemas.profile import ProfileRead, ProfileUpsert
from services import profiles
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.put(
    "/me",
    response_model=ProfileRead,
    status_code=status.HTTP_200_OK,
    summary="Create or update the current user's profile",
)
async def upsert_my_profile(
    payload: ProfileUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ProfileRead:
    try:
        profile = await profiles.upsert_profile(db, current_user.user_id, payload)
    except MatchCoreError as exc:
        raise to_http_exception(exc) from exc
    return ProfileRead.model_validate(profile)


@router.get(
    "/me",
    response_model=ProfileRead,
    summary="Current user's profile",
)
async def read_my_profile(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ProfileRead:
    return await read_profile(current_user.user_id, db, current_user)


@router.get(
    "/{user_id}",
    response_model=ProfileRead,
    summary="Profile by user id",
)
async def read_profile(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ProfileRead:
    try:
        profile = await profiles.get_profile(db, user_id)
    except MatchCoreError as exc:
        raise to_http_exception(exc) from exc
    return ProfileRead.model_validate(profile)
