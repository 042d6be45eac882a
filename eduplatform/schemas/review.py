from pydantic import BaseModel
from typing import Optional, List

from eduplatform.core.enums import ReviewDecision
from eduplatform.schemas.application import InstructorApplicationResponse
from eduplatform.schemas.course import CourseResponse
from eduplatform.schemas.notification import DispatchResultResponse


class ReviewRequest(BaseModel):
    decision: ReviewDecision
    notes: Optional[str] = None


class CourseReviewResponse(BaseModel):
    course: CourseResponse
    decision_recorded: bool
    notifications_delivered: bool
    notifications: List[DispatchResultResponse]
    message: str


class ApplicationReviewResponse(BaseModel):
    application: InstructorApplicationResponse
    decision_recorded: bool
    notifications_delivered: bool
    notifications: List[DispatchResultResponse]
    message: str


class CourseReviewListResponse(BaseModel):
    courses: List[CourseResponse]
    pending_count: int


class ApplicationReviewListResponse(BaseModel):
    applications: List[InstructorApplicationResponse]
    pending_count: int
