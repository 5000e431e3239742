# routers/feed.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchCoreError
from core.security import CurrentUser, get_current_user
from schemas.feed import FeedCandidate
from services import profiles, swipes
from services.feed_builder import build_feed
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get(
    "/",
    response_model=List[FeedCandidate],
    summary="Ranked candidate feed",
)
async def get_feed(
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[FeedCandidate]:
    try:
        me = await profiles.get_profile_data(db, current_user.user_id)
        # Already swiped or matched
        seen = await swipes.seen_ids(db, current_user.user_id)
        pool = await profiles.load_candidate_pool(db, current_user.user_id, exclude_ids=seen)
    except MatchCoreError as exc:
        raise to_http_exception(exc) from exc

    feed = build_feed(me, pool, seen)
    return feed[offset:offset + limit]
