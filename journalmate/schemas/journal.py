from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import List, Optional

MOOD_PATTERN = "^(great|good|okay|poor)$"

class JournalEntryCreate(BaseModel):
    date: date
    mood: str = Field(..., pattern=MOOD_PATTERN)
    reflection: Optional[str] = None
    completed_tasks: List[str] = []
    missed_tasks: List[str] = []
    achievements: List[str] = []

class JournalEntryUpdate(BaseModel):
    mood: Optional[str] = Field(None, pattern=MOOD_PATTERN)
    reflection: Optional[str] = None
    completed_tasks: Optional[List[str]] = None
    missed_tasks: Optional[List[str]] = None
    achievements: Optional[List[str]] = None

    # reflection is the only field that can be cleared
    @field_validator("mood", "completed_tasks", "missed_tasks", "achievements")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

class JournalEntryResponse(BaseModel):
    id: str
    date: date
    mood: str
    reflection: Optional[str]
    completed_tasks: List[str]
    missed_tasks: List[str]
    achievements: List[str]
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}
