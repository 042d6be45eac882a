from sqlalchemy import Column, String, DateTime, func
from eduplatform.db.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    # 인증 토큰의 sub 값과 동일
    id = Column(String(128), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    full_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
