import logging
import secrets
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, delete
from typing import List, Optional, Sequence
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.activity import Activity, ActivityTask
from journalmate.models.notification import TaskReminder
from journalmate.models.task import Task
from journalmate.routers.goal import progress_percent
from journalmate.schemas.activity import (
    ActivityCreate, ActivityUpdate, ActivityTaskCreate,
    ActivityResponse, ActivityDetailResponse, ActivityCopyResponse
)
from journalmate.schemas.task import TaskResponse
from journalmate.services.progress import recompute_progress_stats
from journalmate.utils.timeutils import as_utc, utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activities", tags=["activities"])
community_router = APIRouter(tags=["community"])

# Trending weights: a like counts for more than a view
LIKE_WEIGHT = 3
VIEW_WEIGHT = 1


async def get_user_activity(db: AsyncSession, activity_id: str, user_id: str) -> Activity:
    result = await db.execute(
        select(Activity).where(Activity.id == activity_id, Activity.user_id == user_id)
    )
    activity = result.scalar_one_or_none()
    if not activity:
        raise HTTPException(404, "Activity not found")
    return activity


async def get_shared_activity(db: AsyncSession, share_token: str) -> Activity:
    result = await db.execute(select(Activity).where(Activity.share_token == share_token))
    activity = result.scalar_one_or_none()
    if not activity:
        raise HTTPException(404, "Shared activity not found or link has expired")
    return activity


async def get_activity_tasks(db: AsyncSession, activity_id: str) -> Sequence[Task]:
    result = await db.execute(
        select(Task)
        .join(ActivityTask, ActivityTask.task_id == Task.id)
        .where(ActivityTask.activity_id == activity_id)
        .order_by(ActivityTask.order)
    )
    return result.scalars().all()


def _detail(activity: Activity, tasks: Sequence[Task]) -> ActivityDetailResponse:
    task_list = [TaskResponse.model_validate(t) for t in tasks]
    completed = sum(1 for t in task_list if t.completed)
    return ActivityDetailResponse(
        **ActivityResponse.model_validate(activity).model_dump(),
        tasks=task_list,
        progress_percent=progress_percent(completed, len(task_list)),
    )


@router.post("", response_model=ActivityResponse, status_code=201)
async def create_activity(
    activity_in: ActivityCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    data = activity_in.model_dump()
    data["start_date"] = as_utc(data["start_date"])
    data["end_date"] = as_utc(data["end_date"])

    activity = Activity(user_id=current_user.id, **data)
    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return activity


@router.get("", response_model=List[ActivityResponse])
async def list_activities(
    include_archived: bool = False,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(Activity).where(Activity.user_id == current_user.id)
    if not include_archived:
        query = query.where(Activity.archived.is_(False))
    result = await db.execute(query.order_by(Activity.created_at.desc()))
    return result.scalars().all()


@router.get("/{activity_id}", response_model=ActivityDetailResponse)
async def get_activity(
    activity_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    activity = await get_user_activity(db, activity_id, current_user.id)
    return _detail(activity, await get_activity_tasks(db, activity.id))


@router.patch("/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: str,
    activity_in: ActivityUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    activity = await get_user_activity(db, activity_id, current_user.id)
    data = activity_in.model_dump(exclude_unset=True)

    for field in ("start_date", "end_date"):
        if field in data:
            data[field] = as_utc(data[field])

    if data.get("featured_in_community") and not activity.is_public:
        raise HTTPException(400, "Share the activity before featuring it in the community")

    if data.get("status") and data["status"] != activity.status:
        activity.completed_at = utc_now() if data["status"] == "completed" else None

    for field, value in data.items():
        setattr(activity, field, value)

    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return activity


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    activity = await get_user_activity(db, activity_id, current_user.id)

    # The plan's tasks go with it
    task_ids = select(ActivityTask.task_id).where(ActivityTask.activity_id == activity_id)
    await db.execute(delete(TaskReminder).where(TaskReminder.task_id.in_(task_ids)))
    linked = (await db.execute(task_ids)).scalars().all()
    await db.execute(delete(ActivityTask).where(ActivityTask.activity_id == activity_id))
    if linked:
        await db.execute(delete(Task).where(Task.id.in_(linked)))
    await db.delete(activity)
    await db.commit()

    await recompute_progress_stats(db, current_user.id, current_user.timezone)
    return {"message": "Activity deleted"}


@router.post("/{activity_id}/tasks", response_model=TaskResponse, status_code=201)
async def add_activity_task(
    activity_id: str,
    task_in: ActivityTaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    activity = await get_user_activity(db, activity_id, current_user.id)

    next_order = await db.execute(
        select(func.coalesce(func.max(ActivityTask.order) + 1, 0))
        .where(ActivityTask.activity_id == activity_id)
    )

    task = Task(
        user_id=current_user.id,
        title=task_in.title,
        description=task_in.description,
        category=task_in.category or activity.category,
        priority=task_in.priority,
        due_date=as_utc(task_in.due_date),
        time_estimate=task_in.time_estimate,
        cost=task_in.cost,
        cost_notes=task_in.cost_notes,
    )
    db.add(task)
    await db.flush()
    db.add(ActivityTask(activity_id=activity.id, task_id=task.id, order=next_order.scalar_one()))
    await db.commit()
    await db.refresh(task)

    await recompute_progress_stats(db, current_user.id, current_user.timezone)
    return task


@router.post("/{activity_id}/share", response_model=ActivityResponse)
async def share_activity(
    activity_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    activity = await get_user_activity(db, activity_id, current_user.id)

    # Re-sharing keeps the old link working
    if not activity.share_token:
        activity.share_token = secrets.token_hex(16)
    activity.is_public = True
    activity.creator_name = current_user.first_name or current_user.username

    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    logger.info("Activity %s shared by %s", activity.id, current_user.id)
    return activity


@router.delete("/{activity_id}/share", response_model=ActivityResponse)
async def unshare_activity(
    activity_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    activity = await get_user_activity(db, activity_id, current_user.id)
    activity.is_public = False
    activity.featured_in_community = False

    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return activity


@router.post("/copy/{share_token}", response_model=ActivityCopyResponse, status_code=201)
async def copy_activity(
    share_token: str,
    force_update: bool = False,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    shared = await get_shared_activity(db, share_token)
    if not shared.is_public:
        raise HTTPException(403, "This activity is not public and cannot be copied")
    if shared.user_id == current_user.id:
        raise HTTPException(400, "You cannot copy your own activity")

    existing = await db.execute(
        select(Activity)
        .where(Activity.user_id == current_user.id)
        .where(Activity.copied_from_share_token == share_token)
        .where(Activity.archived.is_(False))
    )
    existing_copy = existing.scalars().first()
    if existing_copy and not force_update:
        raise HTTPException(409, "You already have a copy of this plan")

    # Updating a copy archives the old one with its tasks and carries completion over by title
    previous = {}
    if existing_copy:
        old_tasks = await get_activity_tasks(db, existing_copy.id)
        for old in old_tasks:
            previous[old.title.strip().lower()] = old
            old.archived = True
            db.add(old)
        if old_tasks:
            await db.execute(
                delete(TaskReminder)
                .where(TaskReminder.task_id.in_([t.id for t in old_tasks]))
                .where(TaskReminder.is_sent.is_(False))
            )
        existing_copy.archived = True
        db.add(existing_copy)

    copied = Activity(
        user_id=current_user.id,
        title=shared.title,
        description=shared.description,
        category=shared.category,
        start_date=shared.start_date,
        end_date=shared.end_date,
        plan_summary=shared.plan_summary,
        tags=list(shared.tags or []),
        budget=shared.budget,
        budget_breakdown=list(shared.budget_breakdown or []),
        budget_buffer=shared.budget_buffer,
        status="planning",
        is_public=False,
        copied_from_share_token=share_token,
    )
    db.add(copied)
    await db.flush()

    tasks = []
    for order, source_task in enumerate(await get_activity_tasks(db, shared.id)):
        match = previous.get(source_task.title.strip().lower())
        task = Task(
            user_id=current_user.id,
            title=source_task.title,
            description=source_task.description,
            category=source_task.category,
            priority=source_task.priority,
            due_date=source_task.due_date,
            time_estimate=source_task.time_estimate,
            cost=source_task.cost,
            cost_notes=source_task.cost_notes,
            completed=bool(match and match.completed),
            completed_at=match.completed_at if match and match.completed else None,
        )
        db.add(task)
        await db.flush()
        db.add(ActivityTask(activity_id=copied.id, task_id=task.id, order=order))
        tasks.append(task)

    await db.commit()
    await db.refresh(copied)
    for task in tasks:
        await db.refresh(task)

    await recompute_progress_stats(db, current_user.id, current_user.timezone)

    preserved = sum(1 for t in tasks if t.completed)
    logger.info("User %s copied shared plan %s (%d tasks)", current_user.id, share_token, len(tasks))
    return ActivityCopyResponse(
        activity=ActivityResponse.model_validate(copied),
        tasks=[TaskResponse.model_validate(t) for t in tasks],
        is_update=existing_copy is not None,
        preserved_progress=preserved,
        message=(
            f"Update complete! {preserved} completed tasks preserved."
            if existing_copy else "Activity copied successfully!"
        ),
    )


@router.post("/{activity_id}/like", response_model=ActivityResponse)
async def like_activity(
    activity_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(Activity)
        .where(Activity.id == activity_id)
        .where(or_(Activity.is_public.is_(True), Activity.user_id == current_user.id))
    )
    activity = result.scalar_one_or_none()
    if not activity:
        raise HTTPException(404, "Activity not found")

    activity.like_count = (activity.like_count or 0) + 1
    activity.trending_score = (activity.trending_score or 0) + LIKE_WEIGHT
    db.add(activity)
    await db.commit()
    await db.refresh(activity)
    return activity


@community_router.get("/share/{share_token}", response_model=ActivityDetailResponse)
async def view_shared_activity(share_token: str, db: AsyncSession = Depends(get_db)):
    activity = await get_shared_activity(db, share_token)
    if not activity.is_public:
        raise HTTPException(404, "Shared activity not found or link has expired")

    activity.view_count = (activity.view_count or 0) + 1
    activity.trending_score = (activity.trending_score or 0) + VIEW_WEIGHT
    db.add(activity)
    await db.commit()
    await db.refresh(activity)

    return _detail(activity, await get_activity_tasks(db, activity.id))


@community_router.get("/community-plans", response_model=List[ActivityResponse])
async def community_plans(
    category: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(Activity)
        .where(Activity.is_public.is_(True))
        .where(Activity.archived.is_(False))
    )
    if category:
        query = query.where(Activity.category == category)

    result = await db.execute(
        query.order_by(Activity.trending_score.desc(), Activity.view_count.desc()).limit(limit)
    )
    return result.scalars().all()
