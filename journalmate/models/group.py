from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from journalmate.database import Base, new_id


class Group(Base):
    __tablename__ = "groups"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(String, ForeignKey("users.id"), nullable=False)
    is_private = Column(Boolean, default=False)
    invite_code = Column(String, unique=True, nullable=False)
    tracking_enabled = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class GroupMembership(Base):
    __tablename__ = "group_memberships"

    id = Column(String, primary_key=True, default=new_id)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(String, default="member")  # admin, member
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_user"),)


class SharedGoal(Base):
    __tablename__ = "shared_goals"

    id = Column(String, primary_key=True, default=new_id)
    group_id = Column(String, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    created_by = Column(String, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)
    priority = Column(String, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class SharedTask(Base):
    __tablename__ = "shared_tasks"

    id = Column(String, primary_key=True, default=new_id)
    shared_goal_id = Column(String, ForeignKey("shared_goals.id", ondelete="CASCADE"), nullable=False)
    assigned_to = Column(String, ForeignKey("users.id"), nullable=True)   # Who does it
    created_by = Column(String, ForeignKey("users.id"), nullable=False)   # Who created it
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False)
    priority = Column(String, nullable=False)
    completed = Column(Boolean, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
