"""Auth Service 도메인 서비스 레이어입니다. 사번 기반 mock SSO 로그인과 회사/역할 클레임이 담긴 토큰 발급을 담당합니다."""

import logging
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from jose import jwt
from sqlalchemy.orm import Session

from workforce.config import settings
from workforce.models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_access_token(user: User) -> str:
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.user_id),
        "company_id": user.company_id,
        "role": user.role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises jose.JWTError on a bad signature, malformed token or expiry."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])


def mock_sso_login(db: Session, emp_id: str) -> User:
    emp_id = (emp_id or "").strip()
    user = db.query(User).filter(User.emp_id == emp_id, User.is_active == True).first()
    if user is None:
        logger.info("login rejected: emp_id=%s", emp_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"사번 '{emp_id}'에 해당하는 활성 사용자를 찾을 수 없습니다.",
        )
    logger.info("login: user_id=%s company_id=%s role=%s", user.user_id, user.company_id, user.role)
    return user
