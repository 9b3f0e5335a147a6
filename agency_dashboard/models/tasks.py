from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from agency_dashboard.database import Base
from agency_dashboard.models.choices import Priority, TaskStatus
from agency_dashboard.models.user import User


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    department = Column(String(20), nullable=False, index=True)
    assigned_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    deadline = Column(DateTime(timezone=True), nullable=False)
    priority = Column(String(20), nullable=False, default=Priority.MEDIUM.value)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value, index=True)
    points = Column(Integer, nullable=False)  # frozen at creation
    assigned_at = Column(DateTime(timezone=True), nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    assigner = relationship(User, foreign_keys=[assigned_by_id], lazy="joined")
    assignee = relationship(User, foreign_keys=[assigned_to_id], lazy="joined")

    # Display names are resolved from the linked users on every read
    @property
    def assigned_by(self) -> str | None:
        return self.assigner.name if self.assigner else None

    @property
    def assigned_to(self) -> str | None:
        return self.assignee.name if self.assignee else None
