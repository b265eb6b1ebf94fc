from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List

PRIORITY_PATTERN = "^(low|medium|high)$"

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)
    priority: str = Field("medium", pattern=PRIORITY_PATTERN)
    goal_id: Optional[str] = None
    due_date: Optional[datetime] = None
    time_estimate: Optional[str] = Field(None, max_length=50)
    cost: Optional[int] = Field(None, ge=0)
    cost_notes: Optional[str] = None

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    goal_id: Optional[str] = None
    due_date: Optional[datetime] = None
    time_estimate: Optional[str] = Field(None, max_length=50)
    cost: Optional[int] = Field(None, ge=0)
    cost_notes: Optional[str] = None

    @field_validator("title", "category", "priority")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

class TaskSnooze(BaseModel):
    hours: int = Field(..., gt=0, le=168)  # Max 1 week

class TaskResponse(BaseModel):
    id: str
    goal_id: Optional[str]
    title: str
    description: Optional[str]
    category: str
    priority: str
    completed: bool
    completed_at: Optional[datetime]
    due_date: Optional[datetime]
    time_estimate: Optional[str]
    cost: Optional[int]
    cost_notes: Optional[str]
    archived: bool
    skipped: bool
    snooze_until: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}

class Achievement(BaseModel):
    title: str
    description: str
    type: str
    points: int

class TaskActionResponse(BaseModel):
    task: TaskResponse
    message: str
    achievement: Optional[Achievement] = None

class TaskListResponse(BaseModel):
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    pending_tasks: int
    tasks: List[TaskResponse]
