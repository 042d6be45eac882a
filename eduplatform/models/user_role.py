import uuid
from sqlalchemy import Column, String, DateTime, UniqueConstraint, func
from eduplatform.db.base import Base


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), nullable=False, index=True)
    role = Column(String(20), nullable=False)  # 'student', 'instructor', 'admin'
    created_at = Column(DateTime, server_default=func.now())
