from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy import exc as sa_exc
from typing import List
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.notification import NotificationPreferences, TaskReminder
from journalmate.routers.task import get_user_task
from journalmate.schemas.notification import (
    NotificationPreferencesUpdate, NotificationPreferencesResponse,
    TaskReminderCreate, TaskReminderResponse
)
from journalmate.services.reminders import get_pending_for_user, mark_reminder_sent
from journalmate.utils.timeutils import as_utc, utc_now

router = APIRouter(prefix="/notifications", tags=["notifications"])


async def get_or_create_preferences(db: AsyncSession, user_id: str) -> NotificationPreferences:
    result = await db.execute(
        select(NotificationPreferences).where(NotificationPreferences.user_id == user_id)
    )
    preferences = result.scalar_one_or_none()
    if preferences is None:
        preferences = NotificationPreferences(user_id=user_id)
        db.add(preferences)
        try:
            await db.commit()
        except sa_exc.IntegrityError:
            # a concurrent request created the row first
            await db.rollback()
            result = await db.execute(
                select(NotificationPreferences).where(NotificationPreferences.user_id == user_id)
            )
            return result.scalar_one()
        await db.refresh(preferences)
    return preferences


async def _get_user_reminder(db: AsyncSession, reminder_id: str, user_id: str) -> TaskReminder:
    result = await db.execute(
        select(TaskReminder).where(TaskReminder.id == reminder_id, TaskReminder.user_id == user_id)
    )
    reminder = result.scalar_one_or_none()
    if not reminder:
        raise HTTPException(404, "Reminder not found")
    return reminder


@router.get("/preferences", response_model=NotificationPreferencesResponse)
async def get_preferences(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await get_or_create_preferences(db, current_user.id)


@router.patch("/preferences", response_model=NotificationPreferencesResponse)
async def update_preferences(
    prefs_in: NotificationPreferencesUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    preferences = await get_or_create_preferences(db, current_user.id)
    for field, value in prefs_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(preferences, field, value)

    db.add(preferences)
    await db.commit()
    await db.refresh(preferences)
    return preferences


@router.post("/reminders", response_model=TaskReminderResponse, status_code=201)
async def create_reminder(
    reminder_in: TaskReminderCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    task = await get_user_task(db, reminder_in.task_id, current_user.id)

    scheduled_at = as_utc(reminder_in.scheduled_at)
    if scheduled_at <= utc_now():
        raise HTTPException(400, "Reminder time must be in the future")

    reminder = TaskReminder(
        task_id=task.id,
        user_id=current_user.id,
        reminder_type=reminder_in.reminder_type,
        scheduled_at=scheduled_at,
        title=reminder_in.title or f"Reminder: {task.title}",
        message=reminder_in.message,
    )
    db.add(reminder)
    await db.commit()
    await db.refresh(reminder)
    return reminder


@router.get("/reminders", response_model=List[TaskReminderResponse])
async def list_reminders(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(TaskReminder)
        .where(TaskReminder.user_id == current_user.id)
        .order_by(TaskReminder.scheduled_at)
    )
    return result.scalars().all()


@router.get("/reminders/pending", response_model=List[TaskReminderResponse])
async def pending_reminders(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await get_pending_for_user(db, current_user.id)


@router.delete("/reminders/{reminder_id}")
async def delete_reminder(
    reminder_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    reminder = await _get_user_reminder(db, reminder_id, current_user.id)
    await db.delete(reminder)
    await db.commit()
    return {"message": "Reminder deleted"}


@router.patch("/reminders/{reminder_id}/sent", response_model=TaskReminderResponse)
async def mark_sent(
    reminder_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    reminder = await _get_user_reminder(db, reminder_id, current_user.id)
    return await mark_reminder_sent(db, reminder)
