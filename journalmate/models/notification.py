from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from journalmate.database import Base, new_id


class NotificationPreferences(Base):
    __tablename__ = "notification_preferences"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    enable_browser_notifications = Column(Boolean, default=True)
    enable_task_reminders = Column(Boolean, default=True)
    enable_deadline_warnings = Column(Boolean, default=True)
    enable_daily_planning = Column(Boolean, default=False)
    reminder_lead_time = Column(Integer, default=30)        # minutes
    daily_planning_time = Column(String, default="09:00")   # HH:MM
    quiet_hours_start = Column(String, default="22:00")
    quiet_hours_end = Column(String, default="08:00")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class TaskReminder(Base):
    __tablename__ = "task_reminders"

    id = Column(String, primary_key=True, default=new_id)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reminder_type = Column(String, nullable=False)  # deadline, daily_planning, custom
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=True)
    is_sent = Column(Boolean, default=False)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
