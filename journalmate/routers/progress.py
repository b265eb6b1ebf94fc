from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.schemas.progress import ProgressDashboardResponse, ProgressStatsResponse
from journalmate.services.progress import get_active_tasks, get_progress_history, summarize_progress
from journalmate.utils.timeutils import local_today

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("", response_model=ProgressDashboardResponse)
async def get_progress(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    tasks = await get_active_tasks(db, current_user.id)
    today = local_today(current_user.timezone)
    return summarize_progress(tasks, today, current_user.timezone)


@router.get("/stats", response_model=List[ProgressStatsResponse])
async def get_progress_stats(
    days: int = Query(7, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await get_progress_history(db, current_user.id, days)
