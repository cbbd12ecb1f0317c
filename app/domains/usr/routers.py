# app/domains/usr/routers.py

"""
'usr' 도메인 (사용자 및 세션)의 API 엔드포인트를 정의하는 모듈입니다.

- 매직링크 인증: 세션 요청(메일 발송), 토큰 검증(세션 발급), 세션 삭제(로그아웃)
- 사용자 관리: 생성, 조회, 역할 변경 (owner 권한)
"""

from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlencode
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core import security
from app.core.config import settings
from app.core.envelope import to_envelope
from app.core.ids import IdGenerator
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import User as UsrUser, UserRole

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["User & Session Management (사용자 및 세션 관리)"],
    responses={404: {"description": "Not found"}},
)


def _user_response(db_user: UsrUser) -> usr_schemas.UserResponse:
    return to_envelope(usr_schemas.UserResponse, db_user)


# =============================================================================
# 1. 매직링크 인증 엔드포인트
# =============================================================================
@router.post("/auth/session", summary="매직링크 세션 요청")
async def create_session(
    request: Request,
    session_request: usr_schemas.SessionRequest,
) -> Dict[str, str]:
    """
    이메일로 매직링크 검증 토큰을 발송합니다.
    호출자가 관찰할 수 있는 상태 변경은 없습니다.
    """
    token = security.create_magic_link_token(session_request.email)
    link = f"{settings.MAGIC_LINK_BASE_URL}?{urlencode({'token': token})}"

    arq_redis_pool: Optional[Any] = getattr(request.app.state, "redis", None)
    if arq_redis_pool is not None:
        await arq_redis_pool.enqueue_job("send_magic_link_email_task", session_request.email, link)
        logger.info("매직링크 발송 작업을 큐에 등록했습니다: email=%s", session_request.email)
    else:
        logger.warning("ARQ Redis 풀이 없어 매직링크 발송 작업을 등록하지 못했습니다: email=%s", session_request.email)
        logger.debug("매직링크: %s", link)
    return {"message": "Magic link sent to email"}


@router.get("/auth/session/verify", response_model=usr_schemas.SessionRead, summary="매직링크 토큰 검증")
async def verify_session(
    token: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    now: datetime = Depends(deps.get_now),
):
    """
    매직링크 토큰을 세션으로 교환합니다.
    처음 접속하는 이메일이면 viewer 역할의 사용자를 함께 생성합니다.
    """
    if not token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token is required")
    email = security.decode_magic_link_token(token)
    if email is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token")
    return await usr_crud.session.create_for_email(db, email=email, now=now, id_gen=id_gen)


@router.delete("/auth/session/{session_id}", summary="세션 삭제 (로그아웃)")
async def delete_session(
    session_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
) -> Dict[str, str]:
    """
    세션을 삭제합니다. 존재하지 않는 세션이어도 성공으로 응답합니다.
    """
    await usr_crud.session.remove(db, session_id=session_id)
    return {"message": "Session deleted"}


@router.get("/auth/me", response_model=usr_schemas.UserResponse, summary="현재 사용자 조회")
async def read_current_user(current_user: UsrUser = Depends(deps.get_current_user)):
    return _user_response(current_user)


# =============================================================================
# 2. 사용자 관리 엔드포인트
# =============================================================================
@router.post("/users", response_model=usr_schemas.UserResponse, status_code=status.HTTP_201_CREATED, summary="새 사용자 생성")
async def create_user(
    user_create: usr_schemas.UserCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("user:manage")),
):
    """
    새로운 사용자를 생성합니다. (owner 권한 필요)
    - `email`: 사용자 이메일 (고유, 필수)
    - `role`: viewer, reporter, editor, owner 중 하나 (기본 viewer)
    """
    db_user = await usr_crud.user.create(db, obj_in=user_create, id_gen=id_gen)
    return _user_response(db_user)


@router.get("/users/{user_id}", response_model=usr_schemas.UserResponse, summary="사용자 정보 조회")
async def read_user(
    user_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_user),
):
    """
    특정 사용자를 조회합니다. 본인 또는 owner만 조회할 수 있습니다.
    """
    if current_user.id != user_id and not security.has_permission(current_user.role, "user:manage"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions to view this user.")
    db_user = await usr_crud.user.get(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _user_response(db_user)


@router.put("/users/{user_id}", response_model=usr_schemas.UserResponse, summary="사용자 역할 변경")
async def update_user(
    user_id: str,
    user_update: usr_schemas.UserUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("user:manage")),
):
    """
    사용자의 역할을 변경합니다. (owner 권한 필요)
    owner는 자기 자신의 역할을 낮출 수 없습니다.
    """
    db_user = await usr_crud.user.get(db, user_id)
    if db_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if db_user.id == current_user.id and user_update.role != UserRole.OWNER:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Owners cannot demote themselves.")
    db_user = await usr_crud.user.update(db, db_obj=db_user, obj_in=user_update)
    return _user_response(db_user)
