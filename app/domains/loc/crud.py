# app/domains/loc/crud.py

"""
'loc' 도메인 (위치/편대 계층)과 관련된 CRUD 로직을 담당하는 모듈입니다.

배정 해제(unassign)는 "비교 후 해제(compare-and-clear)" 방식의 단일 UPDATE 문으로 수행합니다.
현재 참조가 요청한 상위 ID와 일치할 때만 NULL로 바꾸며,
그 사이 다른 곳으로 옮겨진 경우에는 아무것도 바꾸지 않고 조용히 넘어갑니다.
"""

from datetime import datetime, UTC
from typing import List, Optional
import logging

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase, commit_or_rollback
from app.core.ids import IdGenerator
from . import models as loc_models
from . import schemas as loc_schemas
from app.domains.fms.models import Asset as FmsAsset

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 기지 (Port) CRUD
# =============================================================================
class CRUDPort(CRUDBase[loc_models.Port, loc_schemas.PortCreate, loc_schemas.PortUpdate]):
    def __init__(self):
        super().__init__(model=loc_models.Port)

    async def get_fleet_ids(self, db: AsyncSession, *, port_id: str) -> List[str]:
        """기지에 소속된 편대 ID 목록을 조회합니다."""
        return await fleet.get_ids_by_attribute(db, attribute="port_id", value=port_id)

    async def remove(self, db: AsyncSession, *, id: str) -> Optional[loc_models.Port]:
        """
        기지를 삭제합니다.
        소속 편대는 삭제하지 않고 기지 참조만 비운 뒤, 같은 트랜잭션에서 기지를 삭제합니다.
        """
        db_obj = await self.get(db, id)
        if db_obj is None:
            return None
        await db.execute(
            update(loc_models.Fleet)
            .where(loc_models.Fleet.port_id == id)
            .values(port_id=None, updated_at=datetime.now(UTC))
        )
        await db.delete(db_obj)
        await commit_or_rollback(db)
        logger.info("기지 삭제: id=%s", id)
        return db_obj


port = CRUDPort()


# =============================================================================
# 2. 편대 (Fleet) CRUD
# =============================================================================
class CRUDFleet(CRUDBase[loc_models.Fleet, loc_schemas.FleetCreate, loc_schemas.FleetUpdate]):
    def __init__(self):
        super().__init__(model=loc_models.Fleet)

    async def create(
        self, db: AsyncSession, *, obj_in: loc_schemas.FleetCreate, id_gen: IdGenerator
    ) -> loc_models.Fleet:
        """FK 유효성을 확인하고 생성합니다."""
        if obj_in.port_id and not await port.get(db, obj_in.port_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Port not found for the given ID")
        return await super().create(db, obj_in=obj_in, id_gen=id_gen)

    async def get_template_ids(self, db: AsyncSession, *, fleet_id: str) -> List[str]:
        """편대와 연관된 자산 템플릿 ID 목록을 조회합니다."""
        statement = (
            select(loc_models.FleetAssetTemplate.template_id)
            .where(loc_models.FleetAssetTemplate.fleet_id == fleet_id)
            .order_by(loc_models.FleetAssetTemplate.template_id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def get_asset_ids(self, db: AsyncSession, *, fleet_id: str) -> List[str]:
        """편대에 소속된 자산 ID 목록을 조회합니다."""
        statement = select(FmsAsset.id).where(FmsAsset.fleet_id == fleet_id).order_by(FmsAsset.id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def remove(self, db: AsyncSession, *, id: str) -> Optional[loc_models.Fleet]:
        """
        편대를 삭제합니다.
        소속 자산의 편대 참조를 비우고 템플릿 연관을 제거한 뒤 편대를 삭제합니다. (단일 커밋)
        """
        db_obj = await self.get(db, id)
        if db_obj is None:
            return None
        await db.execute(
            update(FmsAsset)
            .where(FmsAsset.fleet_id == id)
            .values(fleet_id=None, updated_at=datetime.now(UTC))
        )
        await db.execute(delete(loc_models.FleetAssetTemplate).where(loc_models.FleetAssetTemplate.fleet_id == id))
        await db.delete(db_obj)
        await commit_or_rollback(db)
        logger.info("편대 삭제: id=%s", id)
        return db_obj

    # --- 기지 배정 ---
    async def assign_to_port(self, db: AsyncSession, *, fleet_id: str, port_id: str) -> None:
        """편대를 기지에 배정합니다. (기존 배정은 덮어씀)"""
        await db.execute(
            update(loc_models.Fleet)
            .where(loc_models.Fleet.id == fleet_id)
            .values(port_id=port_id, updated_at=datetime.now(UTC))
        )
        await commit_or_rollback(db)
        logger.info("편대 기지 배정: fleet_id=%s port_id=%s", fleet_id, port_id)

    async def unassign_from_port(self, db: AsyncSession, *, fleet_id: str, port_id: str) -> bool:
        """
        편대의 기지 참조가 여전히 `port_id`일 때만 비웁니다.
        실제로 변경되었으면 True, 선행 조건이 맞지 않아 아무 일도 없었으면 False를 반환합니다.
        """
        result = await db.execute(
            update(loc_models.Fleet)
            .where(loc_models.Fleet.id == fleet_id, loc_models.Fleet.port_id == port_id)
            .values(port_id=None, updated_at=datetime.now(UTC))
        )
        await commit_or_rollback(db)
        cleared = result.rowcount > 0
        if not cleared:
            logger.info("편대 기지 해제 생략 (현재 배정 불일치): fleet_id=%s port_id=%s", fleet_id, port_id)
        return cleared

    # --- 템플릿 연관 ---
    async def associate_template(self, db: AsyncSession, *, fleet_id: str, template_id: str) -> None:
        """편대와 자산 템플릿을 연관합니다. 이미 연관되어 있으면 아무것도 하지 않습니다."""
        existing = await db.get(loc_models.FleetAssetTemplate, (fleet_id, template_id))
        if existing is not None:
            return
        db.add(loc_models.FleetAssetTemplate(fleet_id=fleet_id, template_id=template_id))
        await commit_or_rollback(db)
        logger.info("편대-템플릿 연관: fleet_id=%s template_id=%s", fleet_id, template_id)

    async def dissociate_template(self, db: AsyncSession, *, fleet_id: str, template_id: str) -> None:
        """편대와 자산 템플릿의 연관을 제거합니다. 연관이 없어도 오류가 아닙니다."""
        await db.execute(
            delete(loc_models.FleetAssetTemplate).where(
                loc_models.FleetAssetTemplate.fleet_id == fleet_id,
                loc_models.FleetAssetTemplate.template_id == template_id,
            )
        )
        await commit_or_rollback(db)

    # --- 자산 배정 ---
    async def assign_asset(self, db: AsyncSession, *, fleet_id: str, asset_id: str) -> None:
        """자산을 편대에 배정합니다. (기존 배정은 덮어씀)"""
        await db.execute(
            update(FmsAsset)
            .where(FmsAsset.id == asset_id)
            .values(fleet_id=fleet_id, updated_at=datetime.now(UTC))
        )
        await commit_or_rollback(db)
        logger.info("자산 편대 배정: asset_id=%s fleet_id=%s", asset_id, fleet_id)

    async def unassign_asset(self, db: AsyncSession, *, fleet_id: str, asset_id: str) -> bool:
        """자산의 편대 참조가 여전히 `fleet_id`일 때만 비웁니다. (compare-and-clear)"""
        result = await db.execute(
            update(FmsAsset)
            .where(FmsAsset.id == asset_id, FmsAsset.fleet_id == fleet_id)
            .values(fleet_id=None, updated_at=datetime.now(UTC))
        )
        await commit_or_rollback(db)
        cleared = result.rowcount > 0
        if not cleared:
            logger.info("자산 편대 해제 생략 (현재 배정 불일치): asset_id=%s fleet_id=%s", asset_id, fleet_id)
        return cleared


fleet = CRUDFleet()
