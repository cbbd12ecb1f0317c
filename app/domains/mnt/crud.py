# app/domains/mnt/crud.py

"""
'mnt' 도메인 (점검 기록)과 관련된 CRUD 로직을 담당하는 모듈입니다.

- 점검 기록 생성은 대상(자산 또는 자산 부품)을 태그 쌍으로 받아 저장합니다.
- 일괄 기록은 항목마다 따로 커밋하므로, 뒤 항목의 실패가 앞 항목을 되돌리지 않습니다.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
import logging

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.clock import as_utc
from app.core.crud_base import CRUDBase
from app.core.envelope import describe_validation_errors
from app.core.ids import IdGenerator
from . import models as mnt_models
from . import schemas as mnt_schemas

logger = logging.getLogger(__name__)


class CRUDInspection(
    CRUDBase[
        mnt_models.Inspection,
        mnt_schemas.InspectionCreate,
        mnt_schemas.InspectionUpdate
    ]
):
    def __init__(self):
        super().__init__(model=mnt_models.Inspection)

    async def create_for_target(
        self,
        db: AsyncSession,
        *,
        target_type: mnt_models.InspectionTargetType,
        target_id: str,
        obj_in: mnt_schemas.InspectionCreate,
        id_gen: IdGenerator,
        reported_by_user_id: Optional[str] = None,
    ) -> mnt_models.Inspection:
        """대상 태그와 기록자를 채워 점검 기록 한 건을 생성합니다."""
        return await self.create(
            db,
            obj_in=obj_in,
            id_gen=id_gen,
            target_type=target_type,
            target_id=target_id,
            timestamp=as_utc(obj_in.timestamp),
            reported_by_user_id=reported_by_user_id,
        )

    async def log_batch(
        self,
        db: AsyncSession,
        *,
        part_id: str,
        entries: Sequence[Dict[str, Any]],
        id_gen: IdGenerator,
        reported_by_user_id: Optional[str] = None,
    ) -> List[mnt_schemas.InspectionBatchOutcome]:
        """
        자산 부품에 점검 기록을 일괄 추가합니다.
        항목마다 독립적으로 검증하고 커밋하며, 입력 항목 수만큼의 결과를 순서대로 반환합니다.
        """
        outcomes: List[mnt_schemas.InspectionBatchOutcome] = []
        for index, entry in enumerate(entries):
            try:
                obj_in = mnt_schemas.InspectionCreate.model_validate(entry)
            except ValidationError as e:
                outcomes.append(mnt_schemas.InspectionBatchOutcome(
                    index=index, status="failed", error=describe_validation_errors(e.errors())
                ))
                continue

            try:
                db_obj = await self.create_for_target(
                    db,
                    target_type=mnt_models.InspectionTargetType.ASSET_PART,
                    target_id=part_id,
                    obj_in=obj_in,
                    id_gen=id_gen,
                    reported_by_user_id=reported_by_user_id,
                )
            except HTTPException as e:
                outcomes.append(mnt_schemas.InspectionBatchOutcome(index=index, status="failed", error=str(e.detail)))
                continue
            except SQLAlchemyError:
                # commit_or_rollback이 이미 롤백하고 로그를 남겼음
                outcomes.append(mnt_schemas.InspectionBatchOutcome(index=index, status="failed", error="Store failure"))
                continue

            outcomes.append(mnt_schemas.InspectionBatchOutcome(index=index, status="created", id=db_obj.id))

        failed = sum(1 for o in outcomes if o.status == "failed")
        logger.info("점검 일괄 기록: part_id=%s total=%d failed=%d", part_id, len(outcomes), failed)
        return outcomes

    async def get_by_target(
        self,
        db: AsyncSession,
        *,
        target_type: mnt_models.InspectionTargetType,
        target_id: str,
        skip: int = 0,
        limit: int = 100,
    ) -> List[mnt_models.Inspection]:
        """대상의 점검 기록을 최신 시각 순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(self.model.target_type == target_type, self.model.target_id == target_id)
            .order_by(self.model.timestamp.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_latest_part_times(
        self, db: AsyncSession, *, part_ids: Sequence[str], now: datetime
    ) -> Dict[str, datetime]:
        """
        부품별 가장 최근 점검 시각을 조회합니다.
        입력 순서가 아닌 시각 기준이며, `now` 이후로 예정된 점검은 제외합니다.
        """
        if not part_ids:
            return {}
        statement = (
            select(self.model.target_id, func.max(self.model.timestamp))
            .where(
                self.model.target_type == mnt_models.InspectionTargetType.ASSET_PART,
                self.model.target_id.in_(list(part_ids)),
                self.model.timestamp <= now,
            )
            .group_by(self.model.target_id)
        )
        result = await db.execute(statement)
        return {target_id: as_utc(latest) for target_id, latest in result.all() if latest is not None}


inspection = CRUDInspection()
