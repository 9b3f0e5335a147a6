from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from agency_dashboard.database import Base
from agency_dashboard.models.choices import ClientStatus
from agency_dashboard.models.user import User

class Client(Base):
    __tablename__ = "clients"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    business_type = Column(String(50), nullable=True)
    industry = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    website = Column(String(255), nullable=True)
    gst_number = Column(String(20), nullable=True)
    pan_number = Column(String(20), nullable=True)
    state = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    pincode = Column(String(10), nullable=True)
    business_registration = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=ClientStatus.APPROVED.value, index=True)
    # No cascade: removing a user leaves the client pointing nowhere
    assigned_employee_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    assigned_employee = relationship(User, lazy="joined")
