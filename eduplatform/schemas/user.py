from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List


class UserProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    roles: List[str]
    created_at: Optional[datetime] = None
    message: Optional[str] = None


class UserRoleListResponse(BaseModel):
    roles: List[str]  # 'student', 'instructor', 'admin'


class FollowResponse(BaseModel):
    instructor_id: str
    following: bool
    message: str


class FollowListResponse(BaseModel):
    instructor_ids: List[str]
