"""Bearer 토큰 인증과 역할 기반 접근 제어 의존성입니다."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from workforce.database import get_db
from workforce.models.user import User
from workforce.services.auth_service import decode_access_token
from workforce.utils.permissions import REVIEWER_ROLES

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    try:
        claims = decode_access_token(credentials.credentials)
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    subject = claims.get("sub")
    if subject is None or not str(subject).isdigit():
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.user_id == int(subject), User.is_active == True).first()
    if user is None:
        raise _unauthorized("User not found or inactive")
    # 회사 이동 후에는 이전 회사 기록에 접근하던 토큰을 무효화한다.
    if claims.get("company_id") != user.company_id:
        raise _unauthorized("Token company does not match user")
    return user


def require_roles(*roles: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user
    return checker


require_reviewer = require_roles(*REVIEWER_ROLES)
