# app/core/security.py

"""
애플리케이션의 보안 관련 유틸리티를 정의하는 모듈입니다.

- 매직링크 검증 토큰(JWT) 생성 및 해독.
- Bearer 세션 토큰 스키마.
- 작업(operation)별 최소 역할을 정의하는 권한 결정 테이블.

현재 사용자 획득 및 권한 검사 의존성은 app/core/dependencies.py에 있습니다.
"""

from datetime import datetime, timedelta, UTC
from typing import Dict, Optional
import logging

from jose import jwt, JWTError
from fastapi.security import HTTPBearer

from app.core.config import settings
from app.domains.usr.models import UserRole

logger = logging.getLogger(__name__)

MAGIC_LINK_PURPOSE = "magic_link"


# --- Bearer 스키마 설정 ---
# 세션 ID를 `Authorization: Bearer <session_id>` 헤더로 전달받습니다.
# auto_error=False: 헤더가 없을 때 403 대신 직접 401을 반환하기 위함
bearer_scheme = HTTPBearer(auto_error=False)


# --- 매직링크 토큰 생성 및 검증 ---
def create_magic_link_token(email: str, now: Optional[datetime] = None) -> str:
    """
    이메일로 발송할 매직링크 검증 토큰을 생성합니다.
    """
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(minutes=settings.MAGIC_LINK_EXPIRE_MINUTES)
    to_encode = {"sub": email, "purpose": MAGIC_LINK_PURPOSE, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_magic_link_token(token: str) -> Optional[str]:
    """
    매직링크 토큰을 해독하여 이메일을 반환합니다.
    서명 불일치, 만료, 용도 불일치인 경우 None을 반환합니다.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Magic-link token rejected: %s", e)
        return None
    if payload.get("purpose") != MAGIC_LINK_PURPOSE:
        return None
    return payload.get("sub")


def session_expiry(now: datetime) -> datetime:
    """세션 만료 시각 (now + 고정 유효기간)"""
    return now + timedelta(hours=settings.SESSION_EXPIRE_HOURS)


# =============================================================================
# 권한 결정 테이블: 작업별 최소 역할
# =============================================================================
PERMISSIONS: Dict[str, UserRole] = {
    # 조회
    "port:read": UserRole.VIEWER,
    "fleet:read": UserRole.VIEWER,
    "template:read": UserRole.VIEWER,
    "component:read": UserRole.VIEWER,
    "asset:read": UserRole.VIEWER,
    "inspection:read": UserRole.VIEWER,
    "attachment:read": UserRole.VIEWER,
    "compliance:read": UserRole.VIEWER,
    # 점검 기록
    "inspection:write": UserRole.REPORTER,
    "attachment:write": UserRole.REPORTER,
    # 편집
    "port:write": UserRole.EDITOR,
    "fleet:write": UserRole.EDITOR,
    "template:write": UserRole.EDITOR,
    "component:write": UserRole.EDITOR,
    "asset:write": UserRole.EDITOR,
    "attachment:delete": UserRole.EDITOR,
    # 관리
    "user:manage": UserRole.OWNER,
}


def has_permission(role: UserRole, operation: str) -> bool:
    """역할이 작업의 최소 역할 이상인지 판정합니다. 테이블에 없는 작업은 거부합니다."""
    required = PERMISSIONS.get(operation)
    if required is None:
        return False
    return role.rank >= required.rank
