"""User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, computed_field
from typing import Optional
from datetime import datetime

from workforce.utils.permissions import REVIEWER_ROLES


class UserOut(BaseModel):
    user_id: int
    emp_id: str
    name: str
    company_id: int
    department: Optional[str] = None
    role: str
    email: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES


class LoginRequest(BaseModel):
    emp_id: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
