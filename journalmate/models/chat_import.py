from sqlalchemy import Column, String, DateTime, ForeignKey, func
from journalmate.database import Base, JSONType, new_id

class ChatImport(Base):
    __tablename__ = "chat_imports"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    source = Column(String, nullable=False)  # chatgpt, claude, manual
    conversation_title = Column(String, nullable=True)
    chat_history = Column(JSONType, nullable=False)  # [{role, content, timestamp?}]
    extracted_goals = Column(JSONType, default=list)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
