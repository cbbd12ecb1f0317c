# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- ID 생성기와 현재 시각 (get_id_generator, get_now): 테스트에서 결정적인 값으로 교체합니다.
- 현재 인증된 사용자 정보 획득 (get_current_user).
- 권한 결정 테이블 기반 권한 부여 (require_permission).
"""

from datetime import datetime
from typing import AsyncGenerator, Callable, Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.clock import utc_now
from app.core.database import get_session as get_main_app_session
from app.core.ids import IdGenerator, default_id_generator
from app.core.security import bearer_scheme, has_permission
from app.domains.usr import crud as usr_crud
from app.domains.usr.models import User as UsrUser

logger = logging.getLogger(__name__)


# --- 데이터베이스 세션 의존성 주입 ---
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


# --- ID 생성기 / 현재 시각 ---
def get_id_generator() -> IdGenerator:
    return default_id_generator


def get_now() -> datetime:
    return utc_now()


# --- 인증 관련 의존성 ---
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
    now: datetime = Depends(get_now),
) -> UsrUser:
    """
    Bearer 세션 토큰을 현재 사용자로 해석합니다.
    토큰이 없거나, 세션이 없거나, 만료된 경우 401 Unauthorized를 발생시킵니다.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    current_user = await usr_crud.session.resolve(db, session_id=credentials.credentials, now=now)
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or invalid",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


def require_permission(operation: str) -> Callable[..., UsrUser]:
    """
    권한 결정 테이블(PERMISSIONS)에 따라 작업을 허용하는 의존성을 생성합니다.
    역할이 부족하면 403 Forbidden을 발생시킵니다.
    """
    async def _check(current_user: UsrUser = Depends(get_current_user)) -> UsrUser:
        if not has_permission(current_user.role, operation):
            logger.info("권한 부족: user_id=%s role=%s operation=%s", current_user.id, current_user.role.value, operation)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not enough permissions for '{operation}'."
            )
        return current_user
    return _check
