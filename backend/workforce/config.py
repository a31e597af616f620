"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./workforce.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Attendance photo upload
    UPLOAD_DIR: str = "uploads"
    MAX_PHOTO_SIZE: int = 5 * 1024 * 1024  # 5 MB

    # 회사별 근태 설정이 없을 때 사용하는 기본값
    DEFAULT_CHECK_IN_TIME: str = "09:00"
    LATE_THRESHOLD_MINUTES: int = 15
    STANDARD_WORK_HOURS: float = 8.0
    UNPAID_BREAK_MINUTES: int = 0
    REQUIRE_PHOTO: bool = True
    REQUIRE_LOCATION: bool = True
    LOCATION_RADIUS_METERS: float = 50.0
    ALLOW_BREAKS: bool = True
    MAX_BREAKS_PER_DAY: int = 0  # 0 = unlimited
    ATTENDANCE_TIMEZONE: str = "UTC"

    # optimistic lock 충돌 시 재시도 횟수
    ATTENDANCE_WRITE_RETRIES: int = 3

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
