# app/domains/usr/models.py

"""
'usr' 도메인 (사용자 및 세션)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 users, sessions 테이블에 대한 SQLModel 클래스를 포함합니다.
세션은 매직링크 검증 시점에만 생성되고, 로그아웃(명시적 삭제) 또는 만료(지연 판정)로 사라집니다.
세션 테이블에 쓰기를 수행하는 곳은 이 도메인뿐입니다.
"""

from typing import Optional, List
from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import Enum as SAEnum, ForeignKey, String
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 사용자 역할(RBAC) Enum: 정확히 네 가지 값만 허용됩니다.
# =============================================================================
class UserRole(str, Enum):
    """
    사용자 역할을 정의하는 문자열 Enum 클래스입니다.
    선언 순서가 곧 권한 순서입니다. (viewer < reporter < editor < owner)
    """
    VIEWER = "viewer"       # 조회 전용
    REPORTER = "reporter"   # 점검 기록/첨부 등록
    EDITOR = "editor"       # 자산/계층 구조 편집
    OWNER = "owner"         # 사용자 관리 포함 전체 권한

    @property
    def rank(self) -> int:
        return list(UserRole).index(self)


# =============================================================================
# 1. users 테이블 모델
# =============================================================================
class User(SQLModel, table=True):
    """
    사용자 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="사용자 고유 ID")
    email: str = Field(max_length=255, sa_column_kwargs={"unique": True}, index=True, description="사용자 이메일 (로그인 식별자)")
    role: UserRole = Field(
        default=UserRole.VIEWER,
        sa_column=Column(
            SAEnum(
                UserRole,
                name="user_role",
                native_enum=False,
                create_constraint=True,
                validate_strings=True,
                values_callable=lambda roles: [r.value for r in roles],
            ),
            nullable=False,
        ),
        description="사용자 역할 (viewer, reporter, editor, owner)"
    )

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    sessions: List["Session"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"passive_deletes": True}
    )


# =============================================================================
# 2. sessions 테이블 모델
# =============================================================================
class Session(SQLModel, table=True):
    """
    인증 세션 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    세션 ID가 곧 Bearer 토큰이며, `now < expiry`인 동안에만 유효합니다.
    """
    __tablename__ = "sessions"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="세션 ID (Bearer 토큰)")
    user_id: str = Field(
        sa_column=Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        description="세션 소유 사용자 ID (FK)"
    )
    expiry: datetime = Field(
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
        description="세션 만료 일시"
    )

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    user: Optional["User"] = Relationship(back_populates="sessions")
