import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List
from journalmate.database import get_db
from journalmate.core.auth import get_current_user
from journalmate.models.chat_import import ChatImport
from journalmate.models.task import Task
from journalmate.schemas.chat_import import ChatImportCreate, ChatImportResponse, ChatImportResult
from journalmate.schemas.task import TaskResponse
from journalmate.services.chat_import import process_chat_history
from journalmate.services.progress import recompute_progress_stats
from journalmate.utils.timeutils import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/import", response_model=ChatImportResult, status_code=201)
async def import_chat(
    import_in: ChatImportCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    if not import_in.chat_history:
        raise HTTPException(400, "Chat history must not be empty")

    history = [m.model_dump(exclude_none=True) for m in import_in.chat_history]
    extracted = process_chat_history(history)

    chat_import = ChatImport(
        user_id=current_user.id,
        source=import_in.source,
        conversation_title=import_in.conversation_title,
        chat_history=history,
        extracted_goals=extracted["extracted_goals"],
        processed_at=utc_now(),
    )
    db.add(chat_import)

    tasks = []
    for item in extracted["tasks"]:
        task = Task(
            user_id=current_user.id,
            title=item["title"],
            description=f"From {import_in.conversation_title or import_in.source} conversation",
            category=item["category"],
            priority=item["priority"],
        )
        db.add(task)
        tasks.append(task)

    await db.commit()
    await db.refresh(chat_import)
    for task in tasks:
        await db.refresh(task)

    if tasks:
        await recompute_progress_stats(db, current_user.id, current_user.timezone)

    logger.info("Chat import %s created %d tasks for user %s", chat_import.id, len(tasks), current_user.id)
    return ChatImportResult(
        chat_import=ChatImportResponse.model_validate(chat_import),
        extracted_goals=extracted["extracted_goals"],
        tasks=[TaskResponse.model_validate(t) for t in tasks],
        message=f"Created {len(tasks)} accountability task{'s' if len(tasks) != 1 else ''} from your conversation",
    )


@router.get("/imports", response_model=List[ChatImportResponse])
async def list_imports(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(ChatImport)
        .where(ChatImport.user_id == current_user.id)
        .order_by(ChatImport.created_at.desc())
    )
    return result.scalars().all()


@router.get("/imports/{import_id}", response_model=ChatImportResponse)
async def get_import(
    import_id: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(ChatImport).where(ChatImport.id == import_id, ChatImport.user_id == current_user.id)
    )
    chat_import = result.scalar_one_or_none()
    if not chat_import:
        raise HTTPException(404, "Chat import not found")
    return chat_import
