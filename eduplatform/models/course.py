import uuid
from sqlalchemy import Column, Integer, String, Text, Boolean, Float, DateTime, func
from eduplatform.db.base import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    short_description = Column(String(500), nullable=True)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # 최소 통화 단위
    original_price = Column(Integer, nullable=True)
    category = Column(String(100), nullable=False)
    level = Column(String(50), nullable=False)
    duration_hours = Column(Integer, nullable=True)
    total_lessons = Column(Integer, nullable=True)
    thumbnail_url = Column(String(1023), nullable=True)
    instructor_id = Column(String(128), nullable=False, index=True)
    instructor_name = Column(String(255), nullable=True)

    # 승인 상태는 review_service 에서만 변경
    approval_status = Column(String(20), nullable=False, default="pending", index=True)
    is_published = Column(Boolean, nullable=False, default=False)
    approved_by = Column(String(128), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    approval_notes = Column(Text, nullable=True)

    rating = Column(Float, nullable=False, default=0.0)
    total_students = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
