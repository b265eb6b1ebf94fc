from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from .task import TaskResponse

PRIORITY_PATTERN = "^(low|medium|high)$"

class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)
    priority: str = Field("medium", pattern=PRIORITY_PATTERN)

class GoalResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    category: str
    priority: str
    created_at: datetime
    total_tasks: int = 0
    completed_tasks: int = 0

    model_config = {"from_attributes": True}

class GoalDetailResponse(GoalResponse):
    progress_percent: int
    tasks: List[TaskResponse]
