# journalmate/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import exc as sa_exc
from journalmate.config import settings
from journalmate.database import engine, Base, AsyncSessionLocal
from journalmate.models import (  # noqa: F401  registers every table on Base.metadata
    user, goal, task, activity, journal, progress, chat_import, group, notification, scheduling
)
from journalmate.routers import (
    auth, goal as goal_router, task as task_router, journal as journal_router,
    progress as progress_router, chat_import as chat_router, group as group_router,
    notification as notification_router, scheduling as scheduling_router, activity as activity_router
)
from journalmate.services.reminders import ReminderProcessor

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="JournalMate API", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(auth.router)
app.include_router(goal_router.router)
app.include_router(task_router.router)
app.include_router(journal_router.router)
app.include_router(progress_router.router)
app.include_router(chat_router.router)
app.include_router(group_router.router)
app.include_router(notification_router.router)
app.include_router(scheduling_router.router)
app.include_router(activity_router.router)
app.include_router(activity_router.community_router)

reminder_processor = ReminderProcessor(AsyncSessionLocal, interval_seconds=settings.REMINDER_POLL_SECONDS)


# Create DB Tables (for local runs; use Alembic in prod)
@app.on_event("startup")
async def startup_event():
    # ignore duplicate-object errors from previous partial runs
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise

    if settings.REMINDER_POLL_SECONDS > 0:
        reminder_processor.start()
    else:
        logger.info("Reminder processor disabled")


@app.on_event("shutdown")
async def shutdown_event():
    await reminder_processor.stop()


@app.get("/")
def read_root():
    return {"message": "Welcome to JournalMate API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("journalmate.main:app", host="0.0.0.0", port=8000, reload=True)
