from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, func
from journalmate.database import Base, new_id

class Task(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    goal_id = Column(String, ForeignKey("goals.id"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)
    priority = Column(String, nullable=False)           # low, medium, high
    completed = Column(Boolean, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    time_estimate = Column(String, nullable=True)       # "30 min", "2 hours"
    cost = Column(Integer, nullable=True)               # cents
    cost_notes = Column(Text, nullable=True)
    archived = Column(Boolean, default=False)
    skipped = Column(Boolean, default=False)
    snooze_until = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
