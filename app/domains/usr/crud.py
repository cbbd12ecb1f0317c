# app/domains/usr/crud.py

"""
'usr' 도메인 (사용자 및 세션)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from datetime import datetime
from typing import Optional
import logging

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from app.core.clock import as_utc
from app.core.crud_base import CRUDBase, commit_or_rollback
from app.core.ids import IdGenerator
from app.core import security
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 사용자 (User) CRUD
# =============================================================================
class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserUpdate]):
    def __init__(self):
        super().__init__(model=usr_models.User)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """이메일로 사용자를 조회합니다."""
        statement = select(self.model).where(self.model.email == email.lower())
        result = await db.execute(statement)
        return result.scalars().one_or_none()

    async def create(
        self, db: AsyncSession, *, obj_in: usr_schemas.UserCreate, id_gen: IdGenerator
    ) -> usr_models.User:
        """이메일 중복을 확인하고 생성합니다."""
        if await self.get_by_email(db, email=obj_in.email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this email already exists.")
        return await super().create(db, obj_in=obj_in, id_gen=id_gen, email=obj_in.email.lower())

    async def get_or_build_by_email(
        self, db: AsyncSession, *, email: str, id_gen: IdGenerator
    ) -> usr_models.User:
        """
        이메일에 해당하는 사용자를 반환하고, 없으면 viewer 역할로 새로 만들어 세션에 추가합니다.
        (커밋은 호출자가 수행)
        """
        db_user = await self.get_by_email(db, email=email)
        if db_user is None:
            db_user = self.build(
                obj_in={"email": email.lower(), "role": usr_models.UserRole.VIEWER},
                id_gen=id_gen,
            )
            db.add(db_user)
            logger.info("Just-in-time 사용자 생성: id=%s", db_user.id)
        return db_user


user = CRUDUser()


# =============================================================================
# 2. 세션 (Session) CRUD
# =============================================================================
class CRUDSession(CRUDBase[usr_models.Session, usr_schemas.SessionRead, usr_schemas.SessionRead]):
    def __init__(self):
        super().__init__(model=usr_models.Session)

    async def create_for_email(
        self, db: AsyncSession, *, email: str, now: datetime, id_gen: IdGenerator
    ) -> usr_models.Session:
        """
        검증된 이메일로 세션을 생성합니다.
        사용자가 없으면 같은 트랜잭션 안에서 함께 생성합니다.
        """
        db_user = await user.get_or_build_by_email(db, email=email, id_gen=id_gen)
        db_session = usr_models.Session(
            id=id_gen.new_id(),
            user_id=db_user.id,
            expiry=security.session_expiry(now),
        )
        db.add(db_session)
        await commit_or_rollback(db)
        await db.refresh(db_session)
        logger.info("세션 생성: id=%s user_id=%s", db_session.id, db_user.id)
        return db_session

    async def resolve(self, db: AsyncSession, *, session_id: str, now: datetime) -> Optional[usr_models.User]:
        """
        세션 ID를 사용자로 해석합니다.
        세션이 없거나 만료된 경우 None을 반환합니다. (만료 세션은 지연 판정하며 삭제하지 않음)
        """
        db_session = await self.get(db, session_id)
        if db_session is None:
            return None
        if not now < as_utc(db_session.expiry):
            logger.info("만료된 세션 사용 시도: id=%s", session_id)
            return None
        return await user.get(db, db_session.user_id)

    async def remove(self, db: AsyncSession, *, session_id: str) -> None:
        """세션을 삭제합니다. 존재하지 않는 세션이어도 오류가 아닙니다."""
        await db.execute(delete(self.model).where(self.model.id == session_id))
        await commit_or_rollback(db)
        logger.info("세션 삭제 요청 처리: id=%s", session_id)


session = CRUDSession()
