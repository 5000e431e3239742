# routers/compatibility.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchCoreError
from core.security import CurrentUser, get_current_user
from schemas.compatibility import CompatibilityResult
from services import profiles
from services.compatibility import score
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/compatibility", tags=["compatibility"])


@router.get(
    "/{user_id}",
    response_model=CompatibilityResult,
    summary="Compatibility between the current user and another profile",
)
async def get_compatibility(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> CompatibilityResult:
    if user_id == current_user.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot score yourself")
    try:
        me = await profiles.get_profile_data(db, current_user.user_id)
        other = await profiles.get_profile_data(db, user_id)
    except MatchCoreError as exc:
        raise to_http_exception(exc) from exc
    return score(me, other)
