# app/domains/shared/crud.py

"""
'shared' 도메인 (첨부 메타데이터)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import List
import logging

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

from app.core.crud_base import CRUDBase
from . import models as shared_models
from . import schemas as shared_schemas

logger = logging.getLogger(__name__)


class CRUDAttachment(
    CRUDBase[
        shared_models.Attachment,
        shared_schemas.AttachmentCreate,
        BaseModel
    ]
):
    def __init__(self):
        super().__init__(model=shared_models.Attachment)

    async def get_uris(
        self, db: AsyncSession, *, entity_type: shared_models.AttachableType, entity_id: str
    ) -> List[str]:
        """특정 엔티티에 연결된 첨부 URI 목록"""
        statement = (
            select(self.model.uri)
            .where(
                self.model.entity_type == entity_type,
                self.model.entity_id == entity_id
            )
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


attachment = CRUDAttachment()
