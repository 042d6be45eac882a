import pytest

from eduplatform.core.enums import Role
from eduplatform.core.exceptions import ValidationError, AuthorizationError, NotFoundError
from eduplatform.schemas.application import InstructorApplicationCreate
from eduplatform.schemas.course import CourseCreate, CourseUpdate
from eduplatform.services.submission_service import (
    validate_course_fields,
    submit_course,
    update_course_details,
    get_my_courses,
    validate_application_fields,
    submit_instructor_application,
    get_my_applications,
)

from helpers import ADMIN_ID, INSTRUCTOR_ID, STUDENT_ID, make_user

BIO = "Ten years building production web applications and mentoring junior devs."


def _course(**overrides):
    data = {
        "title": "React Basics",
        "description": "Components, props, state and hooks.",
        "price": 100000,
        "category": "Web Development",
        "level": "Beginner",
    }
    data.update(overrides)
    return CourseCreate(**data)


def test_validate_course_fields_lists_every_missing_field():
    errors = validate_course_fields({"title": "  ", "price": 0})
    assert set(errors) == {"title", "description", "category", "level", "price"}
    assert errors["price"] == "price must be greater than 0."


def test_validate_course_fields_checks_level_and_original_price():
    errors = validate_course_fields({
        "title": "T", "description": "D", "category": "C", "level": "Expert",
        "price": 500, "original_price": 100,
    })
    assert set(errors) == {"level", "original_price"}


def test_partial_validation_only_checks_given_fields():
    assert validate_course_fields({"title": "New title"}, partial=True) == {}
    assert "title" in validate_course_fields({"title": ""}, partial=True)


def test_submitted_course_is_pending_and_unpublished(db, users):
    course = submit_course(db, INSTRUCTOR_ID, _course(title="  React Basics  "))

    assert course.approval_status == "pending"
    assert course.is_published is False
    assert course.title == "React Basics"
    assert course.instructor_id == INSTRUCTOR_ID
    assert course.instructor_name == "Lan Nguyen"
    assert course.approved_by is None


def test_submit_course_with_missing_fields_creates_nothing(db, users):
    with pytest.raises(ValidationError) as exc:
        submit_course(db, INSTRUCTOR_ID, _course(price=None, category=""))

    assert set(exc.value.errors) == {"price", "category"}
    assert get_my_courses(db, INSTRUCTOR_ID) == []


def test_student_cannot_submit_course(db, users):
    with pytest.raises(AuthorizationError):
        submit_course(db, STUDENT_ID, _course())


def test_admin_can_submit_course(db, users):
    course = submit_course(db, ADMIN_ID, _course())
    assert course.instructor_name == "Admin Kim"


def test_update_course_details_keeps_approval_state(db, users):
    course = submit_course(db, INSTRUCTOR_ID, _course())

    updated = update_course_details(db, INSTRUCTOR_ID, course.id, CourseUpdate(title="React in Depth", price=120000))

    assert updated.title == "React in Depth"
    assert updated.price == 120000
    assert updated.approval_status == "pending"
    assert updated.is_published is False


def test_update_course_by_other_instructor_is_forbidden(db, users):
    make_user(db, "instructor-0002", "other@example.com", "Other Teacher", Role.INSTRUCTOR)
    course = submit_course(db, INSTRUCTOR_ID, _course())

    with pytest.raises(AuthorizationError):
        update_course_details(db, "instructor-0002", course.id, CourseUpdate(title="Mine now"))
    with pytest.raises(NotFoundError):
        update_course_details(db, INSTRUCTOR_ID, "missing", CourseUpdate(title="x"))


def test_update_course_rejects_original_price_below_price(db, users):
    course = submit_course(db, INSTRUCTOR_ID, _course(price=1000))

    with pytest.raises(ValidationError) as exc:
        update_course_details(db, INSTRUCTOR_ID, course.id, CourseUpdate(original_price=500))
    assert "original_price" in exc.value.errors


def test_application_validation_messages():
    errors = validate_application_fields(InstructorApplicationCreate(
        full_name="A",
        bio="too short",
        experience_years=51,
        expertise=" , ",
    ))
    assert set(errors) == {"full_name", "bio", "experience_years", "expertise"}


def test_application_splits_comma_separated_expertise(db, users):
    application = submit_instructor_application(db, STUDENT_ID, InstructorApplicationCreate(
        full_name="Minh Tran",
        bio=BIO,
        experience_years=0,
        expertise="React,  Node.js , ,TypeScript",
    ))

    assert application.status == "pending"
    assert application.expertise == ["React", "Node.js", "TypeScript"]
    assert application.reviewed_by is None


def test_second_pending_application_is_rejected(db, users):
    form = InstructorApplicationCreate(full_name="Minh Tran", bio=BIO, experience_years=3, expertise=["Python"])
    submit_instructor_application(db, STUDENT_ID, form)

    with pytest.raises(ValidationError) as exc:
        submit_instructor_application(db, STUDENT_ID, form)
    assert "application" in exc.value.errors
    assert len(get_my_applications(db, STUDENT_ID)) == 1


def test_existing_instructor_cannot_apply(db, users):
    form = InstructorApplicationCreate(full_name="Lan Nguyen", bio=BIO, experience_years=8, expertise=["Design"])

    with pytest.raises(ValidationError):
        submit_instructor_application(db, INSTRUCTOR_ID, form)
