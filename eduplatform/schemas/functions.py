from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal


class InstructorDecisionMailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    full_name: str = Field(alias="fullName")
    status: Literal["approved", "rejected"]
    notes: Optional[str] = None


class CourseDecisionMailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    instructor_name: str = Field(alias="instructorName")
    course_title: str = Field(alias="courseTitle")
    status: Literal["approved", "rejected"]
    notes: Optional[str] = None


class NotifyFollowersRequest(BaseModel):
    # 알림 내용은 저장된 강의에서 가져오므로 나머지 필드는 참고용
    course_id: str
    instructor_id: Optional[str] = None
    instructor_name: Optional[str] = None
    course_title: Optional[str] = None


class ReportData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_revenue: float = Field(0, alias="totalRevenue")
    total_students: int = Field(0, alias="totalStudents")
    total_courses: int = Field(0, alias="totalCourses")
    revenue_change: float = Field(0, alias="revenueChange")
    students_change: float = Field(0, alias="studentsChange")


class ReportEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    report_type: Literal["daily", "weekly", "monthly"] = Field(alias="reportType")
    report_data: Optional[ReportData] = Field(None, alias="reportData")
