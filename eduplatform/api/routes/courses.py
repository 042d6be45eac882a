from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from eduplatform.core.enums import Role
from eduplatform.core.exceptions import NotFoundError
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.auth import CurrentUser, get_optional_user
from eduplatform.models.course import Course
from eduplatform.schemas.course import CatalogPageResponse, CourseResponse
from eduplatform.services.catalog import CourseFilter, browse, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SORT_OPTIONS
from eduplatform.services.role_service import authorize

router = APIRouter()


@router.get("", response_model=CatalogPageResponse, summary="공개 강의 목록 조회")
def get_course_catalog(
    search: Optional[str] = None,
    category: Optional[str] = None,
    level: Optional[str] = None,
    duration: Optional[str] = Query(None, description="0-2, 2-5, 5-10, 10+"),
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    sort: str = Query("popular", description=", ".join(SORT_OPTIONS)),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """
    승인되어 공개(is_published)된 강의만 반환합니다.
    """
    published = db.query(Course).filter(Course.is_published.is_(True)).all()
    criteria = CourseFilter(
        search=search,
        category=category,
        level=level,
        duration=duration,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
        page_size=page_size,
    )
    result = browse(published, criteria)
    return CatalogPageResponse(
        items=result.items,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        pages=result.pages,
    )


@router.get("/{course_id}", response_model=CourseResponse, summary="강의 상세 조회")
def get_course_detail(
    course_id: str,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    비공개 강의는 소유 강사와 관리자만 조회할 수 있습니다 (그 외 404).
    """
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course not found.")
    if not course.is_published:
        is_owner = user is not None and user.id == course.instructor_id
        if not is_owner and not (user is not None and authorize(db, user.id, Role.ADMIN)):
            raise NotFoundError("Course not found.")
    return course
