# /eduplatform/main.py
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

# --- Core / Config ---
from eduplatform.core.config import settings
from eduplatform.core.enums import Role
from eduplatform.core.exceptions import DomainError, ValidationError, InvalidStateError
from eduplatform.db.base import Base
from eduplatform.db.session import engine, SessionLocal
from eduplatform.services.role_service import grant_role
from eduplatform.services.store import commit

# --- API Routers ---
from eduplatform.api.routes import users as users_router
from eduplatform.api.routes import courses as courses_router
from eduplatform.api.routes import instructor as instructor_router
from eduplatform.api.routes import applications as applications_router
from eduplatform.api.routes import admin as admin_router
from eduplatform.api.routes import notifications as notifications_router
from eduplatform.api.routes import follows as follows_router
from eduplatform.api.routes import functions as functions_router


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    force=True
)

logger = logging.getLogger(__name__)


def bootstrap_admins() -> None:
    """ADMIN_USER_IDS 에 지정된 사용자에게 admin 역할 부여 (이미 있으면 무시)."""
    if not settings.ADMIN_USER_IDS:
        return
    db = SessionLocal()
    try:
        for user_id in settings.ADMIN_USER_IDS:
            grant_role(db, user_id, Role.ADMIN)
        commit(db)
    finally:
        db.close()


# --- Lifespan (애플리케이션 시작/종료 이벤트) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    bootstrap_admins()
    if not settings.RESEND_API_KEY:
        logger.warning("RESEND_API_KEY is not set - emails will be logged in demo mode")
    yield


# --- FastAPI App Instance ---
app = FastAPI(
    title="EduPlatform API",
    lifespan=lifespan
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    logging.info(
        f"Request processed: {request.method} {request.url.path} - Completed in {process_time:.4f} secs"
    )

    return response


# --- 도메인 예외 -> HTTP 응답 ---
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    content = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    if isinstance(exc, InvalidStateError):
        content["current_status"] = exc.current_status
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=content)


# --- CORS 미들웨어 설정 ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- 라우트 등록 ---
app.include_router(
    users_router.router,
    prefix="/api/v1/users",
    tags=["users"]
)

app.include_router(
    courses_router.router,
    prefix="/api/v1/courses",
    tags=["courses"]
)

app.include_router(
    instructor_router.router,
    prefix="/api/v1/instructors",
    tags=["instructors"]
)

app.include_router(
    applications_router.router,
    prefix="/api/v1/applications",
    tags=["applications"]
)

app.include_router(
    admin_router.router,
    prefix="/api/v1/admin",
    tags=["admin"]
)

app.include_router(
    notifications_router.router,
    prefix="/api/v1/notifications",
    tags=["notifications"]
)

app.include_router(
    follows_router.router,
    prefix="/api/v1/follows",
    tags=["follows"]
)

app.include_router(
    functions_router.router,
    prefix="/functions/v1",
    tags=["functions"]
)
