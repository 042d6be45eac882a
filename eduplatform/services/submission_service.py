import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eduplatform.core.enums import Role, ApprovalStatus, COURSE_LEVELS
from eduplatform.core.exceptions import ValidationError, AuthorizationError, NotFoundError, PersistenceError
from eduplatform.models.course import Course
from eduplatform.models.instructor_application import InstructorApplication
from eduplatform.schemas.application import InstructorApplicationCreate
from eduplatform.schemas.course import CourseCreate, CourseUpdate
from eduplatform.services.profile_service import display_name
from eduplatform.services.role_service import require_role, authorize
from eduplatform.services.store import commit

logger = logging.getLogger(__name__)

BIO_MIN_LENGTH = 50
BIO_MAX_LENGTH = 1000
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
MAX_EXPERIENCE_YEARS = 50


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_course_fields(data: dict, partial: bool = False) -> dict:
    """필드별 오류 메시지 dict 반환 (없으면 빈 dict). partial=True 면 전달된 필드만 검사."""
    errors = {}

    for name in ("title", "description", "category", "level"):
        if name in data or not partial:
            if _blank(data.get(name)):
                errors[name] = f"{name} is required."

    if "price" in data or not partial:
        price = data.get("price")
        if price is None:
            errors["price"] = "price is required."
        elif price <= 0:
            errors["price"] = "price must be greater than 0."

    level = data.get("level")
    if "level" not in errors and not _blank(level) and level not in COURSE_LEVELS:
        errors["level"] = f"level must be one of: {', '.join(COURSE_LEVELS)}."

    original_price = data.get("original_price")
    price = data.get("price")
    if original_price is not None and price is not None and "price" not in errors and original_price < price:
        errors["original_price"] = "original_price must not be lower than price."

    for name in ("duration_hours", "total_lessons"):
        value = data.get(name)
        if value is not None and value < 0:
            errors[name] = f"{name} must not be negative."

    return errors


def submit_course(db: Session, instructor_id: str, course_in: CourseCreate) -> Course:
    """
    강의 개설 요청. 항상 pending / 비공개 상태로 저장되며 관리자 승인 전에는 노출되지 않습니다.
    """
    require_role(db, instructor_id, Role.INSTRUCTOR, Role.ADMIN)

    data = course_in.model_dump()
    errors = validate_course_fields(data)
    if errors:
        raise ValidationError("Please fill in all required course fields.", errors)

    course = Course(
        title=data["title"].strip(),
        short_description=data.get("short_description") or None,
        description=data["description"].strip(),
        price=data["price"],
        original_price=data.get("original_price"),
        category=data["category"].strip(),
        level=data["level"],
        duration_hours=data.get("duration_hours"),
        total_lessons=data.get("total_lessons"),
        thumbnail_url=data.get("thumbnail_url") or None,
        instructor_id=instructor_id,
        instructor_name=display_name(db, instructor_id),
        approval_status=ApprovalStatus.PENDING.value,
        is_published=False,
    )
    try:
        db.add(course)
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to create course: {e}") from e
    commit(db)
    db.refresh(course)
    logger.info(f"Course submitted - id: {course.id}, instructor: {instructor_id}")
    return course


def get_my_courses(db: Session, instructor_id: str) -> list[Course]:
    return (
        db.query(Course)
        .filter(Course.instructor_id == instructor_id)
        .order_by(Course.created_at.desc())
        .all()
    )


def update_course_details(db: Session, instructor_id: str, course_id: str, course_in: CourseUpdate) -> Course:
    """본인 강의의 일반 필드만 수정. 승인 상태/공개 여부는 바꾸지 않습니다."""
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course not found.")
    if course.instructor_id != instructor_id and not authorize(db, instructor_id, Role.ADMIN):
        raise AuthorizationError("You can only edit your own courses.")

    changes = course_in.model_dump(exclude_unset=True)
    merged = {
        "price": course.price,
        "original_price": course.original_price,
        **changes,
    }
    errors = validate_course_fields(merged, partial=True)
    if errors:
        raise ValidationError("Invalid course fields.", errors)

    for key, value in changes.items():
        setattr(course, key, value.strip() if isinstance(value, str) else value)
    commit(db)
    db.refresh(course)
    return course


def _normalize_expertise(expertise) -> list[str]:
    if expertise is None:
        return []
    if isinstance(expertise, str):
        expertise = expertise.split(",")
    return [item.strip() for item in expertise if item and item.strip()]


def validate_application_fields(application_in: InstructorApplicationCreate) -> dict:
    errors = {}

    full_name = (application_in.full_name or "").strip()
    if len(full_name) < NAME_MIN_LENGTH:
        errors["full_name"] = f"Full name must be at least {NAME_MIN_LENGTH} characters."
    elif len(full_name) > NAME_MAX_LENGTH:
        errors["full_name"] = f"Full name must be at most {NAME_MAX_LENGTH} characters."

    bio = (application_in.bio or "").strip()
    if len(bio) < BIO_MIN_LENGTH:
        errors["bio"] = f"Bio must be at least {BIO_MIN_LENGTH} characters."
    elif len(bio) > BIO_MAX_LENGTH:
        errors["bio"] = f"Bio must be at most {BIO_MAX_LENGTH} characters."

    years = application_in.experience_years
    if years is None:
        errors["experience_years"] = "Years of experience is required."
    elif years < 0 or years > MAX_EXPERIENCE_YEARS:
        errors["experience_years"] = f"Years of experience must be between 0 and {MAX_EXPERIENCE_YEARS}."

    if not _normalize_expertise(application_in.expertise):
        errors["expertise"] = "Please enter at least one area of expertise."

    return errors


def get_pending_application(db: Session, user_id: str) -> InstructorApplication | None:
    return (
        db.query(InstructorApplication)
        .filter(
            InstructorApplication.user_id == user_id,
            InstructorApplication.status == ApprovalStatus.PENDING.value,
        )
        .first()
    )


def submit_instructor_application(db: Session, user_id: str, application_in: InstructorApplicationCreate) -> InstructorApplication:
    errors = validate_application_fields(application_in)
    if errors:
        raise ValidationError("Invalid instructor application.", errors)

    # 중복 체크: 대기 중인 신청이 이미 있는지 확인
    if get_pending_application(db, user_id):
        raise ValidationError(
            "You already have a pending application.",
            {"application": "A pending application already exists."},
        )
    if authorize(db, user_id, Role.INSTRUCTOR):
        raise ValidationError(
            "You are already an instructor.",
            {"application": "User already holds the instructor role."},
        )

    application = InstructorApplication(
        user_id=user_id,
        full_name=application_in.full_name.strip(),
        bio=application_in.bio.strip(),
        experience_years=application_in.experience_years,
        expertise=_normalize_expertise(application_in.expertise),
        portfolio_url=application_in.portfolio_url or None,
        status=ApprovalStatus.PENDING.value,
    )
    try:
        db.add(application)
        db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to create application: {e}") from e
    commit(db)
    db.refresh(application)
    logger.info(f"Instructor application submitted - id: {application.id}, user: {user_id}")
    return application


def get_my_applications(db: Session, user_id: str) -> list[InstructorApplication]:
    return (
        db.query(InstructorApplication)
        .filter(InstructorApplication.user_id == user_id)
        .order_by(InstructorApplication.created_at.desc())
        .all()
    )
