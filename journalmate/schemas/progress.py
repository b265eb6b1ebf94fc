from pydantic import BaseModel
from datetime import date
from typing import List

class CategoryProgress(BaseModel):
    name: str
    completed: int
    total: int

class ProgressStatsResponse(BaseModel):
    id: str
    date: date
    completed_count: int
    total_count: int
    categories: List[CategoryProgress]

    model_config = {"from_attributes": True}

class ProgressDashboardResponse(BaseModel):
    completed_today: int
    total_today: int
    streak_days: int
    total_completed: int
    completion_rate: int  # rounded percent
    categories: List[CategoryProgress]
    recent_achievements: List[str]
