from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, UniqueConstraint, func
from journalmate.database import Base, JSONType, new_id

class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    mood = Column(String, nullable=False)  # great, good, okay, poor
    reflection = Column(Text, nullable=True)
    completed_tasks = Column(JSONType, default=list)
    missed_tasks = Column(JSONType, default=list)
    achievements = Column(JSONType, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_journal_user_date"),)
