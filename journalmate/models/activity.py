from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from journalmate.database import Base, JSONType, new_id

class Activity(Base):
    __tablename__ = "activities"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    plan_summary = Column(Text, nullable=True)

    # Sharing / community discovery
    is_public = Column(Boolean, default=False)
    share_token = Column(String, unique=True, nullable=True)
    tags = Column(JSONType, default=list)
    view_count = Column(Integer, default=0)
    like_count = Column(Integer, default=0)
    trending_score = Column(Integer, default=0)
    featured_in_community = Column(Boolean, default=False)
    creator_name = Column(String, nullable=True)
    copied_from_share_token = Column(String, nullable=True)

    status = Column(String, default="planning", nullable=False)  # planning, in_progress, completed, cancelled
    completed_at = Column(DateTime(timezone=True), nullable=True)
    archived = Column(Boolean, default=False)

    budget = Column(Integer, default=0, nullable=False)            # cents
    budget_breakdown = Column(JSONType, default=list, nullable=False)
    budget_buffer = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class ActivityTask(Base):
    __tablename__ = "activity_tasks"

    id = Column(String, primary_key=True, default=new_id)
    activity_id = Column(String, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    order = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (UniqueConstraint("activity_id", "task_id", name="unique_activity_task"),)
