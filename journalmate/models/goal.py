from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func
from journalmate.database import Base, new_id

class Goal(Base):
    __tablename__ = "goals"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)
    priority = Column(String, nullable=False)   # low, medium, high
    created_at = Column(DateTime(timezone=True), server_default=func.now())
