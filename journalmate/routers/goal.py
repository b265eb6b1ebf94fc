from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update, case
from typing import List
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.goal import Goal
from journalmate.models.task import Task
from journalmate.schemas.goal import GoalCreate, GoalResponse, GoalDetailResponse
from journalmate.schemas.task import TaskResponse

router = APIRouter(prefix="/goals", tags=["goals"])


async def get_user_goal(db: AsyncSession, goal_id: str, user_id: str) -> Goal:
    result = await db.execute(
        select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
    )
    goal = result.scalar_one_or_none()
    if not goal:
        raise HTTPException(404, "Goal not found")
    return goal


def progress_percent(completed: int, total: int) -> int:
    return round(completed / total * 100) if total else 0


@router.post("", response_model=GoalResponse, status_code=201)
async def create_goal(
    goal_in: GoalCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = Goal(
        user_id=current_user.id,
        title=goal_in.title,
        description=goal_in.description,
        category=goal_in.category,
        priority=goal_in.priority,
    )
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return GoalResponse.model_validate(goal)


@router.get("", response_model=List[GoalResponse])
async def list_goals(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goals = await db.execute(
        select(Goal)
        .where(Goal.user_id == current_user.id)
        .order_by(Goal.created_at.desc())
    )
    goal_list = goals.scalars().all()

    # Task totals per goal in one query
    counts = await db.execute(
        select(
            Task.goal_id,
            func.count(Task.id),
            func.sum(case((Task.completed.is_(True), 1), else_=0)),
        )
        .where(Task.user_id == current_user.id)
        .where(Task.goal_id.is_not(None))
        .where(Task.archived.is_(False))
        .group_by(Task.goal_id)
    )
    totals = {row[0]: (row[1], row[2] or 0) for row in counts.fetchall()}

    response = []
    for goal in goal_list:
        total, completed = totals.get(goal.id, (0, 0))
        resp = GoalResponse.model_validate(goal)
        resp.total_tasks = total
        resp.completed_tasks = completed
        response.append(resp)
    return response


@router.get("/{goal_id}", response_model=GoalDetailResponse)
async def get_goal_detail(
    goal_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = await get_user_goal(db, goal_id, current_user.id)

    tasks = await db.execute(
        select(Task)
        .where(Task.goal_id == goal_id)
        .where(Task.archived.is_(False))
        .order_by(Task.created_at)
    )
    task_list = [TaskResponse.model_validate(t) for t in tasks.scalars()]
    completed = sum(1 for t in task_list if t.completed)

    return GoalDetailResponse(
        id=goal.id,
        title=goal.title,
        description=goal.description,
        category=goal.category,
        priority=goal.priority,
        created_at=goal.created_at,
        total_tasks=len(task_list),
        completed_tasks=completed,
        progress_percent=progress_percent(completed, len(task_list)),
        tasks=task_list,
    )


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    goal = await get_user_goal(db, goal_id, current_user.id)

    # Tasks outlive their goal
    await db.execute(update(Task).where(Task.goal_id == goal_id).values(goal_id=None))
    await db.delete(goal)
    await db.commit()
    return {"message": "Goal deleted"}
