import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import date
from typing import List, Optional
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.scheduling import SchedulingSuggestion
from journalmate.schemas.scheduling import (
    ScheduleGenerateRequest, ScheduleGenerateResponse,
    ScheduleAcceptResponse, SchedulingSuggestionResponse
)
from journalmate.services.scheduling import create_reminders_from_schedule, generate_scheduling_suggestions
from journalmate.utils.timeutils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


async def _get_user_suggestion(db: AsyncSession, suggestion_id: str, user_id: str) -> SchedulingSuggestion:
    result = await db.execute(
        select(SchedulingSuggestion)
        .where(SchedulingSuggestion.id == suggestion_id, SchedulingSuggestion.user_id == user_id)
    )
    suggestion = result.scalar_one_or_none()
    if not suggestion:
        raise HTTPException(404, "Suggestion not found")
    return suggestion


@router.get("/suggestions", response_model=List[SchedulingSuggestionResponse])
async def list_suggestions(
    target_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(SchedulingSuggestion).where(SchedulingSuggestion.user_id == current_user.id)
    if target_date:
        query = query.where(SchedulingSuggestion.target_date == target_date).order_by(SchedulingSuggestion.score.desc())
    else:
        query = query.order_by(SchedulingSuggestion.created_at.desc())

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/generate", response_model=ScheduleGenerateResponse)
async def generate(
    request: ScheduleGenerateRequest,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    suggestions = await generate_scheduling_suggestions(db, current_user.id, request.target_date)
    if not suggestions:
        message = "No pending tasks to schedule"
    else:
        message = f"Generated {len(suggestions)} scheduling suggestion{'s' if len(suggestions) != 1 else ''}"
    return ScheduleGenerateResponse(
        suggestions=[SchedulingSuggestionResponse.model_validate(s) for s in suggestions],
        message=message,
    )


@router.post("/suggestions/{suggestion_id}/accept", response_model=ScheduleAcceptResponse)
async def accept_suggestion(
    suggestion_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    suggestion = await _get_user_suggestion(db, suggestion_id, current_user.id)
    if suggestion.accepted:
        raise HTTPException(400, "Suggestion already accepted")

    created = await create_reminders_from_schedule(db, suggestion, current_user.id, current_user.timezone)
    suggestion.accepted = True
    suggestion.accepted_at = utc_now()
    db.add(suggestion)
    await db.commit()
    await db.refresh(suggestion)
    logger.info("User %s accepted suggestion %s (%d reminders)", current_user.id, suggestion.id, created)

    return ScheduleAcceptResponse(
        suggestion=SchedulingSuggestionResponse.model_validate(suggestion),
        reminders_created=created,
        message=f"Schedule accepted. {created} reminder{'s' if created != 1 else ''} set",
    )


@router.delete("/suggestions/{suggestion_id}")
async def delete_suggestion(
    suggestion_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    suggestion = await _get_user_suggestion(db, suggestion_id, current_user.id)
    await db.delete(suggestion)
    await db.commit()
    return {"message": "Suggestion deleted"}
