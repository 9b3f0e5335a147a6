from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from agency_dashboard.database import Base
from agency_dashboard.models.choices import Department, Role

class User(Base):
    __tablename__ = "users"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), index=True, nullable=False)
    # login key of the provisioned admin; employees log in by name or phone
    username = Column(String(50), unique=True, index=True, nullable=True)
    phone = Column(String(20), unique=True, index=True, nullable=True)
    department = Column(String(20), nullable=False, default=Department.WEB.value)
    role = Column(String(20), nullable=False, default=Role.EMPLOYEE.value)
    hashed_password = Column(String(255), nullable=False)
    completed_tasks = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    last_login = Column(DateTime(timezone=True), server_default=func.now())
    profile_picture = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
