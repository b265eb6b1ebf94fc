from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint, func
from journalmate.database import Base, JSONType, new_id

class ProgressStats(Base):
    __tablename__ = "progress_stats"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    completed_count = Column(Integer, default=0)
    total_count = Column(Integer, default=0)
    categories = Column(JSONType, default=list)  # [{name, completed, total}]
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_progress_user_date"),
    )
