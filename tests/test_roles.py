import pytest
from sqlalchemy.exc import OperationalError

from eduplatform.core.enums import Role, ApprovalStatus
from eduplatform.core.exceptions import AuthorizationError, ValidationError
from eduplatform.models.course import Course
from eduplatform.models.user_profile import UserProfile
from eduplatform.models.user_role import UserRole
from eduplatform.services import role_service
from eduplatform.services.profile_service import sync_profile, display_name
from eduplatform.services.role_service import capabilities_of, authorize, require_role, grant_role
from eduplatform.services.store import update_if, insert_if_absent

from helpers import ADMIN_ID, INSTRUCTOR_ID, STUDENT_ID


def test_capabilities_are_read_from_user_roles(db, users):
    assert capabilities_of(db, INSTRUCTOR_ID) == {Role.STUDENT, Role.INSTRUCTOR}
    assert capabilities_of(db, "nobody") == set()


def test_unknown_role_values_are_ignored(db, users):
    db.add(UserRole(user_id=STUDENT_ID, role="moderator"))
    db.commit()

    assert capabilities_of(db, STUDENT_ID) == {Role.STUDENT}


def test_authorize_and_require_role(db, users):
    assert authorize(db, ADMIN_ID, Role.ADMIN) is True
    assert authorize(db, STUDENT_ID, Role.ADMIN) is False

    require_role(db, INSTRUCTOR_ID, Role.INSTRUCTOR, Role.ADMIN)
    with pytest.raises(AuthorizationError):
        require_role(db, STUDENT_ID, Role.INSTRUCTOR, Role.ADMIN)


def test_authorize_fails_closed_when_lookup_breaks(db, users, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT user_roles", {}, Exception("no such table"))

    monkeypatch.setattr(role_service, "capabilities_of", broken)

    assert authorize(db, ADMIN_ID, Role.ADMIN) is False


def test_grant_role_is_idempotent(db, users):
    assert grant_role(db, STUDENT_ID, Role.INSTRUCTOR) is True
    assert grant_role(db, STUDENT_ID, Role.INSTRUCTOR) is False
    db.commit()

    rows = db.query(UserRole).filter(UserRole.user_id == STUDENT_ID, UserRole.role == "instructor").count()
    assert rows == 1


def test_sync_profile_creates_student_once(db):
    profile, created = sync_profile(db, "new-user", "new@example.com", "New Person")
    assert created is True
    assert capabilities_of(db, "new-user") == {Role.STUDENT}

    profile, created = sync_profile(db, "new-user", None, "Renamed Person")
    assert created is False
    assert profile.email == "new@example.com"
    assert profile.full_name == "Renamed Person"
    assert db.query(UserRole).filter(UserRole.user_id == "new-user").count() == 1


def test_sync_profile_rejects_email_of_another_account(db, users):
    with pytest.raises(ValidationError) as exc:
        sync_profile(db, "new-user", "student@example.com", "Copycat")
    assert "email" in exc.value.errors
    assert db.get(UserProfile, "new-user") is None
    assert capabilities_of(db, "new-user") == set()

    with pytest.raises(ValidationError):
        sync_profile(db, INSTRUCTOR_ID, "student@example.com", None)
    db.expire_all()
    assert db.get(UserProfile, INSTRUCTOR_ID).email == "lan@example.com"

    # 본인 이메일을 다시 보내는 것은 허용
    profile, created = sync_profile(db, STUDENT_ID, "student@example.com", "Minh Tran")
    assert created is False


def test_display_name_falls_back_to_email(db):
    sync_profile(db, "mail-only", "jane.doe@example.com", None)
    assert display_name(db, "mail-only") == "jane.doe"
    assert display_name(db, "unknown") == "Instructor"


def test_update_if_respects_precondition(db, users):
    course = Course(
        title="Docker", description="Containers", price=10, category="DevOps",
        level="Beginner", instructor_id=INSTRUCTOR_ID, approval_status="approved",
    )
    db.add(course)
    db.commit()

    changed = update_if(
        db, Course, course.id,
        {Course.approval_status: "rejected"},
        Course.approval_status == ApprovalStatus.PENDING.value,
    )
    db.commit()

    assert changed is False
    db.expire_all()
    assert db.get(Course, course.id).approval_status == "approved"


def test_insert_if_absent_returns_false_for_duplicates(db):
    assert insert_if_absent(db, UserRole, user_id="u1", role="student") is True
    assert insert_if_absent(db, UserRole, user_id="u1", role="student") is False
    db.commit()
    assert db.query(UserRole).filter(UserRole.user_id == "u1").count() == 1
