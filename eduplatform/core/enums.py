import enum


class Role(str, enum.Enum):
    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> ApprovalStatus:
        if self is ReviewDecision.APPROVE:
            return ApprovalStatus.APPROVED
        return ApprovalStatus.REJECTED


class NotificationType(str, enum.Enum):
    NEW_COURSE = "new_course"
    PROMO = "promo"
    SYSTEM = "system"
    COURSE = "course"


class NotificationEvent(str, enum.Enum):
    COURSE_APPROVED = "course_approved"
    COURSE_REJECTED = "course_rejected"
    COURSE_PUBLISHED = "course_published"
    INSTRUCTOR_APPROVED = "instructor_approved"
    INSTRUCTOR_REJECTED = "instructor_rejected"


class EmailOutcome(str, enum.Enum):
    SENT = "sent"
    DEMO = "demo"
    FAILED = "failed"
    SKIPPED = "skipped"  # 수신자 이메일 없음


COURSE_LEVELS = ("Beginner", "Intermediate", "Advanced", "All Levels")
