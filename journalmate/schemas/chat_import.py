from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from .task import TaskResponse

class ChatMessage(BaseModel):
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str
    timestamp: Optional[str] = None

class ChatImportCreate(BaseModel):
    source: str = Field(..., pattern="^(chatgpt|claude|manual)$")
    conversation_title: Optional[str] = Field(None, max_length=200)
    chat_history: List[ChatMessage]

class ChatImportResponse(BaseModel):
    id: str
    source: str
    conversation_title: Optional[str]
    chat_history: List[ChatMessage]
    extracted_goals: List[str]
    processed_at: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}

class ChatImportResult(BaseModel):
    chat_import: ChatImportResponse
    extracted_goals: List[str]
    tasks: List[TaskResponse]
    message: str
