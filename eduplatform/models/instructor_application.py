import uuid
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, func
from eduplatform.db.base import Base


class InstructorApplication(Base):
    __tablename__ = "instructor_applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    bio = Column(Text, nullable=False)
    experience_years = Column(Integer, nullable=False, default=0)
    expertise = Column(JSON, nullable=False, default=list)
    portfolio_url = Column(String(1023), nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    reviewed_by = Column(String(128), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
