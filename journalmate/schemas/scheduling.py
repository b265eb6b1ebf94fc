from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional

class SuggestedTask(BaseModel):
    task_id: str
    title: str
    priority: str
    estimated_time: str
    suggested_start_time: str  # HH:MM
    reason: str

class ScheduleGenerateRequest(BaseModel):
    target_date: date

class SchedulingSuggestionResponse(BaseModel):
    id: str
    suggestion_type: str
    target_date: date
    suggested_tasks: List[SuggestedTask]
    score: int
    accepted: bool
    accepted_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}

class ScheduleGenerateResponse(BaseModel):
    suggestions: List[SchedulingSuggestionResponse]
    message: str

class ScheduleAcceptResponse(BaseModel):
    suggestion: SchedulingSuggestionResponse
    reminders_created: int
    message: str
