from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List


class CourseCreate(BaseModel):
    title: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = None
    original_price: Optional[int] = None
    category: Optional[str] = None
    level: Optional[str] = None
    duration_hours: Optional[int] = None
    total_lessons: Optional[int] = None
    thumbnail_url: Optional[str] = None


class CourseUpdate(BaseModel):
    # 승인 관련 필드(approval_status, is_published 등)는 포함하지 않음
    title: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = None
    original_price: Optional[int] = None
    category: Optional[str] = None
    level: Optional[str] = None
    duration_hours: Optional[int] = None
    total_lessons: Optional[int] = None
    thumbnail_url: Optional[str] = None


class CourseResponse(BaseModel):
    id: str
    title: str
    short_description: Optional[str] = None
    description: str
    price: int
    original_price: Optional[int] = None
    category: str
    level: str
    duration_hours: Optional[int] = None
    total_lessons: Optional[int] = None
    thumbnail_url: Optional[str] = None
    instructor_id: str
    instructor_name: Optional[str] = None
    approval_status: str
    is_published: bool
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None
    rating: float = 0.0
    total_students: int = 0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CourseCreateResponse(BaseModel):
    id: str
    approval_status: str
    message: str


class CourseListResponse(BaseModel):
    courses: List[CourseResponse]


class CatalogPageResponse(BaseModel):
    items: List[CourseResponse]
    total: int
    page: int
    page_size: int
    pages: int
