# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 메서드는 비동기(async) 환경에 맞게 작성되었습니다.

- 생성(create)은 주입된 ID 생성기(IdGenerator)로 새 ID를 부여합니다.
- 커밋 실패 시 항상 롤백한 뒤 오류를 전파하므로, 하나의 논리적 쓰기가 부분 커밋되지 않습니다.
"""

from typing import Generic, List, Optional, Type, TypeVar, Any, Dict, Union
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel
from fastapi import HTTPException, status

from app.core.ids import IdGenerator

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


async def commit_or_rollback(db: AsyncSession) -> None:
    """
    현재 트랜잭션을 커밋합니다.
    무결성 제약 위반은 400으로 변환하고, 그 밖의 저장소 오류는 롤백 후 그대로 전파합니다.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.error("IntegrityError caught during commit: %s", e, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Operation violates a data integrity constraint."
        )
    except SQLAlchemyError:
        await db.rollback()
        logger.error("Store failure during commit; transaction rolled back.", exc_info=True)
        raise


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 단일 레코드를 조회합니다.
        """
        return await db.get(self.model, id)

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = 100, **kwargs: Any
    ) -> List[ModelType]:
        """
        여러 레코드를 조회합니다. 필터링을 위한 키워드 인자를 지원합니다.
        ID가 시간순 정렬 가능하므로 ID 오름차순이 곧 생성 순서입니다.
        limit=None이면 전체를 조회합니다.
        """
        query = select(self.model)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        query = query.order_by(self.model.id).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_ids_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> List[str]:
        """특정 속성 값을 가진 레코드들의 ID 목록을 생성 순서대로 반환합니다."""
        statement = (
            select(self.model.id)
            .where(getattr(self.model, attribute) == value)
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    def build(
        self, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], id_gen: IdGenerator, **extra: Any
    ) -> ModelType:
        """새 ID를 부여한 ORM 객체를 만듭니다. (세션에 추가하거나 커밋하지 않음)"""
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        return self.model.model_validate({**data, **extra, "id": id_gen.new_id()})

    async def create(
        self, db: AsyncSession, *, obj_in: CreateSchemaType, id_gen: IdGenerator, **extra: Any
    ) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.build(obj_in=obj_in, id_gen=id_gen, **extra)
        db.add(db_obj)
        await commit_or_rollback(db)
        await db.refresh(db_obj)
        logger.info("%s 생성: id=%s", self.model.__name__, db_obj.id)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        기존 레코드를 부분 업데이트합니다. (전달된 필드만 변경)
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await commit_or_rollback(db)
        await db.refresh(db_obj)
        logger.info("%s 수정: id=%s fields=%s", self.model.__name__, db_obj.id, sorted(update_data))
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 레코드를 삭제합니다.
        """
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            await commit_or_rollback(db)
            logger.info("%s 삭제: id=%s", self.model.__name__, id)
        return db_obj
