# app/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 및 세션)의 Pydantic 스키마를 정의하는 모듈입니다.

사용자 생성/수정 요청, 매직링크 세션 요청, 세션 검증 결과 및
`{id, type, fields}` 형태의 사용자 응답 모델을 포함합니다.
"""

from typing import Optional
from datetime import datetime
from pydantic import ConfigDict, EmailStr, Field
from sqlmodel import SQLModel

from app.domains.usr.models import UserRole


# =============================================================================
# 1. users 스키마
# =============================================================================
class UserBase(SQLModel):
    """
    사용자의 기본 속성을 정의하는 Pydantic/SQLModel Base 스키마입니다.
    """
    email: EmailStr = Field(..., description="사용자 이메일")
    role: UserRole = Field(UserRole.VIEWER, description="사용자 역할 (viewer, reporter, editor, owner)")


class UserCreate(UserBase):
    """
    새로운 사용자를 생성하기 위한 Pydantic 모델입니다.
    `email`은 필수 필드입니다.
    """
    pass


class UserUpdate(SQLModel):
    """
    기존 사용자의 역할을 변경하기 위한 Pydantic 모델입니다.
    """
    model_config = ConfigDict(extra="forbid")

    role: UserRole = Field(..., description="변경할 사용자 역할")


class UserFields(UserBase):
    """사용자 응답의 `fields` 부분입니다."""
    email: str = Field(..., description="사용자 이메일")
    created_at: Optional[datetime] = Field(None, description="레코드 생성 일시")
    updated_at: Optional[datetime] = Field(None, description="레코드 마지막 업데이트 일시")


class UserResponse(SQLModel):
    id: str
    type: str = "user"
    fields: UserFields


# =============================================================================
# 2. 매직링크 세션 스키마
# =============================================================================
class SessionRequest(SQLModel):
    """매직링크 발송을 요청하는 모델입니다."""
    email: EmailStr = Field(..., description="매직링크를 받을 이메일")


class SessionRead(SQLModel):
    """
    매직링크 검증(verifySession) 결과로 발급된 세션 정보입니다.
    `id`를 이후 요청의 Bearer 토큰으로 사용합니다.
    """
    id: str = Field(..., description="세션 ID (Bearer 토큰)")
    user_id: str = Field(..., description="세션 소유 사용자 ID")
    expiry: datetime = Field(..., description="세션 만료 일시")
