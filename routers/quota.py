# routers/quota.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.errors import MatchCoreError
from core.security import CurrentUser, get_current_user
from schemas.quota import ConsumeRequest, ConsumeResponse, QuotaStatus
from services import quota
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/quota", tags=["quota"])


@router.get(
    "",
    response_model=QuotaStatus,
    summary="Today's remaining likes and superlikes",
)
async def get_quota(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> QuotaStatus:
    try:
        return await quota.check_and_reset(
            db, current_user.user_id, is_unlimited_tier=current_user.is_unlimited_tier
        )
    except MatchCoreError as exc:
        raise to_http_exception(exc) from exc


@router.post(
    "/consume",
    response_model=ConsumeResponse,
    summary="Use one like or superlike; 'exhausted' means show the upgrade prompt",
)
async def consume_quota(
    payload: ConsumeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ConsumeResponse:
    try:
        result = await quota.consume(
            db, current_user.user_id, payload.kind, is_unlimited_tier=current_user.is_unlimited_tier
        )
        status = await quota.check_and_reset(
            db, current_user.user_id, is_unlimited_tier=current_user.is_unlimited_tier
        )
    except MatchCoreError as exc:
        raise to_http_exception(exc) from exc
    return ConsumeResponse(result=result, quota=status)
