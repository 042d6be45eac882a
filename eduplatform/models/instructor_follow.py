import uuid
from sqlalchemy import Column, String, DateTime, UniqueConstraint, func
from eduplatform.db.base import Base


class InstructorFollow(Base):
    __tablename__ = "instructor_follows"
    __table_args__ = (UniqueConstraint("user_id", "instructor_id", name="uq_instructor_follows_pair"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), nullable=False, index=True)
    instructor_id = Column(String(128), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
