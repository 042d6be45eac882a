"""
강의 목록 필터/정렬/페이지네이션.

DB 나 요청 상태에 의존하지 않는 순수 함수입니다.
이미 공개(is_published)된 강의 목록을 받아 CourseFilter 조건을 적용합니다.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

SORT_OPTIONS = ("popular", "newest", "rating", "price-low", "price-high")
DURATION_BUCKETS = ("0-2", "2-5", "5-10", "10+")
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class CourseFilter:
    search: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    duration: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    sort: str = "popular"
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class CatalogPage:
    items: list
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0


def _matches_duration(hours: Optional[int], bucket: str) -> bool:
    if hours is None:
        return False
    if bucket == "0-2":
        return hours <= 2
    if bucket == "2-5":
        return 2 < hours <= 5
    if bucket == "5-10":
        return 5 < hours <= 10
    return hours > 10


def _matches(course, criteria: CourseFilter) -> bool:
    if criteria.search:
        needle = criteria.search.strip().lower()
        haystack = f"{course.title or ''} {course.description or ''}".lower()
        if needle and needle not in haystack:
            return False
    # "All Categories" / "All Levels" 는 필터 없음과 동일
    if criteria.category and criteria.category != "All Categories" and course.category != criteria.category:
        return False
    if criteria.level and criteria.level != "All Levels" and course.level != criteria.level:
        return False
    if criteria.duration and criteria.duration in DURATION_BUCKETS:
        if not _matches_duration(course.duration_hours, criteria.duration):
            return False
    if criteria.min_price is not None and course.price < criteria.min_price:
        return False
    if criteria.max_price is not None and course.price > criteria.max_price:
        return False
    return True


def filter_courses(courses: Sequence, criteria: CourseFilter) -> list:
    return [course for course in courses if _matches(course, criteria)]


def sort_courses(courses: Sequence, sort: str = "popular") -> list:
    if sort == "newest":
        return sorted(courses, key=lambda c: c.created_at or datetime.min, reverse=True)
    if sort == "rating":
        return sorted(courses, key=lambda c: c.rating or 0, reverse=True)
    if sort == "price-low":
        return sorted(courses, key=lambda c: c.price)
    if sort == "price-high":
        return sorted(courses, key=lambda c: c.price, reverse=True)
    return sorted(courses, key=lambda c: c.total_students or 0, reverse=True)


def paginate(items: Sequence, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> CatalogPage:
    page = max(1, page)
    page_size = max(1, min(page_size, MAX_PAGE_SIZE))
    start = (page - 1) * page_size
    return CatalogPage(items=list(items[start:start + page_size]), total=len(items), page=page, page_size=page_size)


def browse(courses: Sequence, criteria: CourseFilter) -> CatalogPage:
    filtered = filter_courses(courses, criteria)
    ordered = sort_courses(filtered, criteria.sort)
    return paginate(ordered, criteria.page, criteria.page_size)
