"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 근태 오류 핸들러, 업로드 정적 서빙을 등록합니다."""

import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from workforce.config import settings
from workforce.database import Base, engine
from workforce.exceptions import AttendanceError
from workforce.logging_config import setup_logging
import workforce.models  # noqa: F401 - 모델 import로 metadata 등록
from workforce.routers import (
    auth, attendance, attendance_approval, attendance_settings, notifications,
)

setup_logging()

app = FastAPI(
    title="Workforce 근태 관리 시스템",
    description="프로모터 출퇴근, 휴식, 근태 승인 워크플로",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AttendanceError)
async def attendance_error_handler(request: Request, exc: AttendanceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


# Register all routers
app.include_router(auth.router)
app.include_router(attendance_settings.router)
app.include_router(attendance_approval.router)
app.include_router(attendance.router)
app.include_router(notifications.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Workforce 근태 관리 시스템"}


# Static file serving for attendance photos
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
