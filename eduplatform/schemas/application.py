from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List, Union


class InstructorApplicationCreate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = None
    experience_years: Optional[int] = None
    # 리스트 또는 "Python, React" 형태의 콤마 구분 문자열
    expertise: Optional[Union[List[str], str]] = None
    portfolio_url: Optional[str] = None


class InstructorApplicationResponse(BaseModel):
    id: str
    user_id: str
    full_name: str
    bio: str
    experience_years: int
    expertise: List[str]
    portfolio_url: Optional[str] = None
    status: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InstructorApplicationCreateResponse(BaseModel):
    id: str
    status: str
    message: str
