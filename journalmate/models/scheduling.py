from sqlalchemy import Column, Integer, String, Date, Boolean, DateTime, ForeignKey, func
from journalmate.database import Base, JSONType, new_id

class SchedulingSuggestion(Base):
    __tablename__ = "scheduling_suggestions"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    suggestion_type = Column(String, nullable=False)  # daily, weekly, priority_based
    target_date = Column(Date, nullable=False)
    suggested_tasks = Column(JSONType, default=list)
    score = Column(Integer, default=0)
    accepted = Column(Boolean, default=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
