import logging
import secrets
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete
from sqlalchemy import exc as sa_exc
from typing import List, Optional
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.group import Group, GroupMembership, SharedGoal, SharedTask
from journalmate.models.user import User
from journalmate.routers.goal import progress_percent
from journalmate.schemas.group import (
    GroupCreate, GroupJoin, GroupMemberResponse, GroupResponse, GroupDetailResponse,
    SharedGoalCreate, SharedGoalResponse, SharedTaskCreate, SharedTaskResponse
)
from journalmate.utils.timeutils import as_utc, utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


def generate_invite_code() -> str:
    return secrets.token_urlsafe(6)


async def get_membership(db: AsyncSession, group_id: str, user_id: str) -> Optional[GroupMembership]:
    result = await db.execute(
        select(GroupMembership)
        .where(GroupMembership.group_id == group_id)
        .where(GroupMembership.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def require_member(db: AsyncSession, group_id: str, user_id: str) -> GroupMembership:
    """404 for both a missing group and a group the caller is not in."""
    membership = await get_membership(db, group_id, user_id)
    if not membership:
        raise HTTPException(404, "Group not found")
    return membership


async def _member_count(db: AsyncSession, group_id: str) -> int:
    result = await db.execute(
        select(func.count(GroupMembership.id)).where(GroupMembership.group_id == group_id)
    )
    return result.scalar_one()


def _group_response(group: Group, member_count: int, role: str) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        created_by=group.created_by,
        is_private=group.is_private,
        invite_code=group.invite_code,
        tracking_enabled=group.tracking_enabled,
        created_at=group.created_at,
        member_count=member_count,
        role=role,
    )


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_in: GroupCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    group = Group(
        name=group_in.name,
        description=group_in.description,
        is_private=group_in.is_private,
        created_by=current_user.id,
        invite_code=generate_invite_code(),
    )
    db.add(group)
    await db.flush()

    db.add(GroupMembership(group_id=group.id, user_id=current_user.id, role="admin"))
    await db.commit()
    await db.refresh(group)

    logger.info("User %s created group %s", current_user.id, group.id)
    return _group_response(group, 1, "admin")


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(Group, GroupMembership.role)
        .join(GroupMembership, GroupMembership.group_id == Group.id)
        .where(GroupMembership.user_id == current_user.id)
        .order_by(Group.created_at.desc())
    )
    rows = result.fetchall()

    counts = await db.execute(
        select(GroupMembership.group_id, func.count(GroupMembership.id))
        .where(GroupMembership.group_id.in_([row[0].id for row in rows]))
        .group_by(GroupMembership.group_id)
    )
    member_counts = {row[0]: row[1] for row in counts.fetchall()}

    return [_group_response(group, member_counts.get(group.id, 0), role) for group, role in rows]


@router.post("/join", response_model=GroupResponse)
async def join_group(
    join_in: GroupJoin,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(select(Group).where(Group.invite_code == join_in.invite_code))
    group = result.scalar_one_or_none()
    if not group:
        raise HTTPException(404, "Invalid invite code")

    if await get_membership(db, group.id, current_user.id):
        raise HTTPException(409, "Already a member of this group")

    db.add(GroupMembership(group_id=group.id, user_id=current_user.id, role="member"))
    try:
        await db.commit()
    except sa_exc.IntegrityError:
        await db.rollback()
        raise HTTPException(409, "Already a member of this group")

    logger.info("User %s joined group %s", current_user.id, group.id)
    return _group_response(group, await _member_count(db, group.id), "member")


@router.get("/{group_id}", response_model=GroupDetailResponse)
async def get_group(
    group_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    membership = await require_member(db, group_id, current_user.id)
    group = await db.get(Group, group_id)

    result = await db.execute(
        select(GroupMembership, User.username)
        .join(User, User.id == GroupMembership.user_id)
        .where(GroupMembership.group_id == group_id)
        .order_by(GroupMembership.joined_at)
    )
    members = [
        GroupMemberResponse(user_id=m.user_id, username=username, role=m.role, joined_at=m.joined_at)
        for m, username in result.fetchall()
    ]

    base = _group_response(group, len(members), membership.role)
    return GroupDetailResponse(**base.model_dump(), members=members)


@router.delete("/{group_id}/members/{user_id}")
async def remove_member(
    group_id: str,
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    caller = await require_member(db, group_id, current_user.id)
    leaving = user_id == current_user.id
    if not leaving and caller.role != "admin":
        raise HTTPException(403, "Only group admins can remove members")

    target = await get_membership(db, group_id, user_id)
    if not target:
        raise HTTPException(404, "Member not found")

    if target.role == "admin":
        admins = await db.execute(
            select(func.count(GroupMembership.id))
            .where(GroupMembership.group_id == group_id)
            .where(GroupMembership.role == "admin")
        )
        if admins.scalar_one() == 1 and await _member_count(db, group_id) > 1:
            raise HTTPException(400, "The last admin cannot leave while other members remain")

    await db.delete(target)
    await db.commit()

    if await _member_count(db, group_id) == 0:
        await _delete_group(db, group_id)

    return {"message": "Left group" if leaving else "Member removed"}


async def _delete_group(db: AsyncSession, group_id: str) -> None:
    goal_ids = select(SharedGoal.id).where(SharedGoal.group_id == group_id)
    await db.execute(delete(SharedTask).where(SharedTask.shared_goal_id.in_(goal_ids)))
    await db.execute(delete(SharedGoal).where(SharedGoal.group_id == group_id))
    await db.execute(delete(GroupMembership).where(GroupMembership.group_id == group_id))
    await db.execute(delete(Group).where(Group.id == group_id))
    await db.commit()
    logger.info("Deleted group %s", group_id)


@router.delete("/{group_id}")
async def delete_group(
    group_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    membership = await require_member(db, group_id, current_user.id)
    if membership.role != "admin":
        raise HTTPException(403, "Only group admins can delete the group")

    await _delete_group(db, group_id)
    return {"message": "Group deleted"}


# ----- Shared goals and tasks -----

async def _get_shared_goal(db: AsyncSession, group_id: str, goal_id: str) -> SharedGoal:
    result = await db.execute(
        select(SharedGoal).where(SharedGoal.id == goal_id, SharedGoal.group_id == group_id)
    )
    goal = result.scalar_one_or_none()
    if not goal:
        raise HTTPException(404, "Shared goal not found")
    return goal


@router.post("/{group_id}/goals", response_model=SharedGoalResponse, status_code=201)
async def create_shared_goal(
    group_id: str,
    goal_in: SharedGoalCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await require_member(db, group_id, current_user.id)

    goal = SharedGoal(
        group_id=group_id,
        created_by=current_user.id,
        title=goal_in.title,
        description=goal_in.description,
        category=goal_in.category,
        priority=goal_in.priority,
        due_date=as_utc(goal_in.due_date),
    )
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return SharedGoalResponse.model_validate(goal)


@router.get("/{group_id}/goals", response_model=List[SharedGoalResponse])
async def list_shared_goals(
    group_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await require_member(db, group_id, current_user.id)

    goals = await db.execute(
        select(SharedGoal)
        .where(SharedGoal.group_id == group_id)
        .order_by(SharedGoal.created_at.desc())
    )
    goal_list = goals.scalars().all()

    tasks = await db.execute(
        select(SharedTask)
        .where(SharedTask.shared_goal_id.in_([g.id for g in goal_list]))
        .order_by(SharedTask.created_at)
    )
    by_goal = {}
    for task in tasks.scalars():
        by_goal.setdefault(task.shared_goal_id, []).append(SharedTaskResponse.model_validate(task))

    response = []
    for goal in goal_list:
        goal_tasks = by_goal.get(goal.id, [])
        resp = SharedGoalResponse.model_validate(goal)
        resp.tasks = goal_tasks
        resp.progress_percent = progress_percent(sum(1 for t in goal_tasks if t.completed), len(goal_tasks))
        response.append(resp)
    return response


@router.post("/{group_id}/goals/{goal_id}/tasks", response_model=SharedTaskResponse, status_code=201)
async def create_shared_task(
    group_id: str,
    goal_id: str,
    task_in: SharedTaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    await require_member(db, group_id, current_user.id)
    goal = await _get_shared_goal(db, group_id, goal_id)

    if task_in.assigned_to and not await get_membership(db, group_id, task_in.assigned_to):
        raise HTTPException(400, "Assignee is not a member of this group")

    task = SharedTask(
        shared_goal_id=goal.id,
        assigned_to=task_in.assigned_to,
        created_by=current_user.id,
        title=task_in.title,
        description=task_in.description,
        category=task_in.category or goal.category,
        priority=task_in.priority,
        due_date=as_utc(task_in.due_date),
    )
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task


@router.post("/{group_id}/tasks/{task_id}/complete", response_model=SharedTaskResponse)
async def complete_shared_task(
    group_id: str,
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    membership = await require_member(db, group_id, current_user.id)

    result = await db.execute(
        select(SharedTask)
        .join(SharedGoal, SharedGoal.id == SharedTask.shared_goal_id)
        .where(SharedTask.id == task_id)
        .where(SharedGoal.group_id == group_id)
    )
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(404, "Shared task not found")

    if current_user.id not in (task.assigned_to, task.created_by) and membership.role != "admin":
        raise HTTPException(403, "Only the assignee, the creator or a group admin can complete this task")
    if task.completed:
        raise HTTPException(400, "Task already completed")

    task.completed = True
    task.completed_at = utc_now()
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task
