from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Any, Dict, List, Optional
from .task import TaskCreate, TaskResponse

STATUS_PATTERN = "^(planning|in_progress|completed|cancelled)$"

class ActivityCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    plan_summary: Optional[str] = None
    tags: List[str] = []
    budget: int = Field(0, ge=0)
    budget_breakdown: List[Dict[str, Any]] = []
    budget_buffer: int = Field(0, ge=0)

class ActivityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    plan_summary: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = Field(None, pattern=STATUS_PATTERN)
    featured_in_community: Optional[bool] = None
    budget: Optional[int] = Field(None, ge=0)
    budget_breakdown: Optional[List[Dict[str, Any]]] = None
    budget_buffer: Optional[int] = Field(None, ge=0)

    @field_validator(
        "title", "category", "tags", "status", "featured_in_community",
        "budget", "budget_breakdown", "budget_buffer",
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

class ActivityTaskCreate(TaskCreate):
    category: Optional[str] = Field(None, max_length=50)  # defaults to the activity's category

class ActivityResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str]
    category: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    plan_summary: Optional[str]
    is_public: bool
    share_token: Optional[str]
    tags: List[str]
    view_count: int
    like_count: int
    trending_score: int
    featured_in_community: bool
    creator_name: Optional[str]
    copied_from_share_token: Optional[str]
    status: str
    completed_at: Optional[datetime]
    archived: bool
    budget: int
    budget_breakdown: List[Dict[str, Any]]
    budget_buffer: int
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}

class ActivityDetailResponse(ActivityResponse):
    tasks: List[TaskResponse]
    progress_percent: int

class ActivityCopyResponse(BaseModel):
    activity: ActivityResponse
    tasks: List[TaskResponse]
    is_update: bool
    preserved_progress: int
    message: str
