from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

PRIORITY_PATTERN = "^(low|medium|high)$"

class GroupCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None
    is_private: bool = False

class GroupJoin(BaseModel):
    invite_code: str

class GroupMemberResponse(BaseModel):
    user_id: str
    username: str
    role: str
    joined_at: datetime

class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    created_by: str
    is_private: bool
    invite_code: str
    tracking_enabled: bool
    created_at: datetime
    member_count: int
    role: str  # caller's role

class GroupDetailResponse(GroupResponse):
    members: List[GroupMemberResponse]

class SharedGoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)
    priority: str = Field("medium", pattern=PRIORITY_PATTERN)
    due_date: Optional[datetime] = None

class SharedTaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)  # defaults to the goal's category
    priority: str = Field("medium", pattern=PRIORITY_PATTERN)
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None

class SharedTaskResponse(BaseModel):
    id: str
    shared_goal_id: str
    assigned_to: Optional[str]
    created_by: str
    title: str
    description: Optional[str]
    category: str
    priority: str
    completed: bool
    completed_at: Optional[datetime]
    due_date: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}

class SharedGoalResponse(BaseModel):
    id: str
    group_id: str
    created_by: str
    title: str
    description: Optional[str]
    category: str
    priority: str
    due_date: Optional[datetime]
    created_at: datetime
    progress_percent: int = 0
    tasks: List[SharedTaskResponse] = []

    model_config = {"from_attributes": True}
