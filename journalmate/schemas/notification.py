from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

class NotificationPreferencesUpdate(BaseModel):
    enable_browser_notifications: Optional[bool] = None
    enable_task_reminders: Optional[bool] = None
    enable_deadline_warnings: Optional[bool] = None
    enable_daily_planning: Optional[bool] = None
    reminder_lead_time: Optional[int] = Field(None, ge=0, le=1440)
    daily_planning_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    quiet_hours_start: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    quiet_hours_end: Optional[str] = Field(None, pattern=HHMM_PATTERN)

class NotificationPreferencesResponse(BaseModel):
    id: str
    enable_browser_notifications: bool
    enable_task_reminders: bool
    enable_deadline_warnings: bool
    enable_daily_planning: bool
    reminder_lead_time: int
    daily_planning_time: str
    quiet_hours_start: str
    quiet_hours_end: str
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}

class TaskReminderCreate(BaseModel):
    task_id: str
    reminder_type: str = Field("custom", pattern="^(deadline|daily_planning|custom)$")
    scheduled_at: datetime
    title: Optional[str] = Field(None, max_length=200)
    message: Optional[str] = None

class TaskReminderResponse(BaseModel):
    id: str
    task_id: str
    reminder_type: str
    scheduled_at: datetime
    title: str
    message: Optional[str]
    is_sent: bool
    sent_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}
