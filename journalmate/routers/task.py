from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, delete
from datetime import timedelta
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.task import Task
from journalmate.models.activity import ActivityTask
from journalmate.models.notification import TaskReminder
from journalmate.routers.goal import get_user_goal
from journalmate.schemas.task import (
    TaskCreate, TaskUpdate, TaskSnooze, TaskResponse,
    Achievement, TaskActionResponse, TaskListResponse
)
from journalmate.services.progress import recompute_progress_stats
from journalmate.utils.timeutils import as_utc, utc_now

router = APIRouter(prefix="/tasks", tags=["tasks"])


async def get_user_task(db: AsyncSession, task_id: str, user_id: str) -> Task:
    result = await db.execute(
        select(Task).where(Task.id == task_id, Task.user_id == user_id)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(404, "Task not found")
    return task


async def _save(db: AsyncSession, task: Task, user) -> Task:
    db.add(task)
    await db.commit()
    await db.refresh(task)
    await recompute_progress_stats(db, user.id, user.timezone)
    return task


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    task_in: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    if task_in.goal_id:
        await get_user_goal(db, task_in.goal_id, current_user.id)

    task = Task(
        user_id=current_user.id,
        goal_id=task_in.goal_id,
        title=task_in.title,
        description=task_in.description,
        category=task_in.category,
        priority=task_in.priority,
        due_date=as_utc(task_in.due_date),
        time_estimate=task_in.time_estimate,
        cost=task_in.cost,
        cost_notes=task_in.cost_notes,
    )
    return await _save(db, task, current_user)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    include_completed: bool = False,
    include_snoozed: bool = False,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    now = utc_now()
    query = (
        select(Task)
        .where(Task.user_id == current_user.id)
        .where(Task.archived.is_(False))
    )
    if not include_completed:
        query = query.where(Task.completed.is_(False))
    if not include_snoozed:
        query = query.where(or_(Task.snooze_until.is_(None), Task.snooze_until <= now))

    result = await db.execute(query.order_by(Task.created_at.desc()))
    tasks = result.scalars().all()

    completed = 0
    overdue = 0
    pending = 0
    for task in tasks:
        if task.completed:
            completed += 1
        elif task.due_date and as_utc(task.due_date) < now:
            overdue += 1
        else:
            pending += 1

    return TaskListResponse(
        total_tasks=len(tasks),
        completed_tasks=completed,
        overdue_tasks=overdue,
        pending_tasks=pending,
        tasks=[TaskResponse.model_validate(t) for t in tasks],
    )


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_in: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    task = await get_user_task(db, task_id, current_user.id)
    data = task_in.model_dump(exclude_unset=True)

    if data.get("goal_id"):
        await get_user_goal(db, data["goal_id"], current_user.id)
    if "due_date" in data:
        data["due_date"] = as_utc(data["due_date"])

    for field, value in data.items():
        setattr(task, field, value)
    return await _save(db, task, current_user)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    task = await get_user_task(db, task_id, current_user.id)

    await db.execute(delete(TaskReminder).where(TaskReminder.task_id == task_id))
    await db.execute(delete(ActivityTask).where(ActivityTask.task_id == task_id))
    await db.delete(task)
    await db.commit()
    await recompute_progress_stats(db, current_user.id, current_user.timezone)
    return {"message": "Task deleted"}


@router.post("/{task_id}/complete", response_model=TaskActionResponse)
async def complete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    task = await get_user_task(db, task_id, current_user.id)
    if task.completed:
        raise HTTPException(400, "Task already completed")

    task.completed = True
    task.completed_at = utc_now()
    task.snooze_until = None
    task = await _save(db, task, current_user)

    return TaskActionResponse(
        task=TaskResponse.model_validate(task),
        message="Task completed!",
        achievement=Achievement(
            title="Task Master!",
            description=f'You completed "{task.title}"! Keep up the amazing work!',
            type="task",
            points=10,
        ),
    )


@router.post("/{task_id}/skip", response_model=TaskActionResponse)
async def skip_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    task = await get_user_task(db, task_id, current_user.id)
    task.skipped = True
    task = await _save(db, task, current_user)
    return TaskActionResponse(task=TaskResponse.model_validate(task), message="Task skipped")


@router.post("/{task_id}/snooze", response_model=TaskActionResponse)
async def snooze_task(
    task_id: str,
    snooze_in: TaskSnooze,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    task = await get_user_task(db, task_id, current_user.id)
    if task.completed:
        raise HTTPException(400, "Cannot snooze a completed task")

    task.snooze_until = utc_now() + timedelta(hours=snooze_in.hours)
    task = await _save(db, task, current_user)
    return TaskActionResponse(
        task=TaskResponse.model_validate(task),
        message=f"Task snoozed for {snooze_in.hours} hour{'s' if snooze_in.hours != 1 else ''}",
    )


@router.patch("/{task_id}/archive", response_model=TaskActionResponse)
async def archive_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    task = await get_user_task(db, task_id, current_user.id)
    task.archived = True
    task = await _save(db, task, current_user)
    return TaskActionResponse(task=TaskResponse.model_validate(task), message="Task archived")
