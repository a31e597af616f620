"""Auth 기능 API 라우터입니다. 사번 로그인으로 토큰을 발급하고 현재 사용자 정보를 반환합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from workforce.database import get_db
from workforce.schemas.user import LoginRequest, TokenResponse, UserOut
from workforce.services.auth_service import create_access_token, mock_sso_login
from workforce.middleware.auth_middleware import get_current_user
from workforce.models.user import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = mock_sso_login(db, request.emp_id)
    return TokenResponse(
        access_token=create_access_token(user),
        user=UserOut.model_validate(user),
    )


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
