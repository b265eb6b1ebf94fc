from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import date
from typing import List, Optional
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.journal import JournalEntry
from journalmate.schemas.journal import JournalEntryCreate, JournalEntryUpdate, JournalEntryResponse

router = APIRouter(prefix="/journal", tags=["journal"])


@router.get("", response_model=List[JournalEntryResponse])
async def list_entries(
    limit: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(JournalEntry)
        .where(JournalEntry.user_id == current_user.id)
        .order_by(JournalEntry.date.desc())
        .limit(limit)
    )
    return result.scalars().all()


@router.get("/{entry_date}", response_model=Optional[JournalEntryResponse])
async def get_entry(
    entry_date: date,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(JournalEntry)
        .where(JournalEntry.user_id == current_user.id)
        .where(JournalEntry.date == entry_date)
    )
    return result.scalar_one_or_none()


@router.post("", response_model=JournalEntryResponse, status_code=201)
async def create_entry(
    entry_in: JournalEntryCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    # One entry per day
    existing = await db.execute(
        select(JournalEntry)
        .where(JournalEntry.user_id == current_user.id)
        .where(JournalEntry.date == entry_in.date)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(409, "A journal entry already exists for this date")

    entry = JournalEntry(user_id=current_user.id, **entry_in.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


@router.put("/{entry_id}", response_model=JournalEntryResponse)
async def update_entry(
    entry_id: str,
    entry_in: JournalEntryUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(JournalEntry).where(JournalEntry.id == entry_id, JournalEntry.user_id == current_user.id)
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise HTTPException(404, "Journal entry not found")

    for field, value in entry_in.model_dump(exclude_unset=True).items():
        setattr(entry, field, value)

    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry
