# routers/swipes.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchCoreError
from core.security import CurrentUser, get_current_user
from schemas.profile import ProfileData
from schemas.swipe import SwipeRequest, SwipeResult
from services import swipes
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/swipes", tags=["swipes"])


@router.post(
    "/{target_id}",
    response_model=SwipeResult,
    summary="Like, pass or superlike a profile and find out whether it is a match",
)
async def swipe(
    target_id: str,
    payload: SwipeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> SwipeResult:
    try:
        return await swipes.record_swipe(
            db,
            current_user.user_id,
            target_id,
            payload.action,
            is_unlimited_tier=current_user.is_unlimited_tier,
        )
    except MatchCoreError as exc:
        raise to_http_exception(exc) from exc


@router.get(
    "/incoming",
    response_model=List[ProfileData],
    summary="Users who liked you and are waiting for your answer",
)
async def incoming(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[ProfileData]:
    return await swipes.incoming_likes(db, current_user.user_id)
