# routers/match.py

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import CurrentUser, get_current_user
from schemas.match import MatchRead
from services import swipes

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get(
    "/",
    response_model=List[MatchRead],
    summary="Users you matched with"
)
async def get_my_matches(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[MatchRead]:
    rows = await swipes.list_matches(db, current_user.user_id)
    return [
        MatchRead(
            match_id=match.id,
            user=other,
            compatibility_score=match.compatibility_score,
            created_at=match.created_at,
        )
        for match, other in rows
    ]
