# app/domains/fms/crud.py

"""
'fms' 도메인 (장비 카탈로그 및 자산 인스턴스)과 관련된 CRUD 로직을 담당하는 모듈입니다.

- 자산 템플릿/구성품: 카탈로그 정의
- 자산/자산 부품: 실제 기체와 장착 부품

자산 또는 부품을 삭제하면 그 대상의 점검 기록과 첨부(점검 기록의 첨부 포함)도
같은 트랜잭션에서 함께 삭제됩니다.
"""

from datetime import datetime
from typing import Iterable, List, Optional
import logging

from sqlalchemy import delete, or_, and_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fastapi import HTTPException, status

from app.core.crud_base import CRUDBase, commit_or_rollback
from app.core.ids import IdGenerator
from . import models as fms_models
from . import schemas as fms_schemas
from app.domains.loc.models import Fleet as LocFleet, FleetAssetTemplate
from app.domains.mnt.models import Inspection, InspectionTargetType
from app.domains.shared.models import Attachment, AttachableType

logger = logging.getLogger(__name__)


async def _purge_owned_records(db: AsyncSession, *, asset_ids: Iterable[str], part_ids: Iterable[str]) -> None:
    """
    자산/부품에 딸린 점검 기록과 첨부를 삭제합니다. (커밋은 호출자가 수행)
    """
    asset_ids, part_ids = list(asset_ids), list(part_ids)
    target_clause = or_(
        and_(Inspection.target_type == InspectionTargetType.ASSET, Inspection.target_id.in_(asset_ids)),
        and_(Inspection.target_type == InspectionTargetType.ASSET_PART, Inspection.target_id.in_(part_ids)),
    )
    inspection_ids = list((await db.execute(select(Inspection.id).where(target_clause))).scalars().all())

    await db.execute(
        delete(Attachment).where(
            or_(
                and_(Attachment.entity_type == AttachableType.ASSET, Attachment.entity_id.in_(asset_ids)),
                and_(Attachment.entity_type == AttachableType.ASSET_PART, Attachment.entity_id.in_(part_ids)),
                and_(Attachment.entity_type == AttachableType.INSPECTION, Attachment.entity_id.in_(inspection_ids)),
            )
        )
    )
    await db.execute(delete(Inspection).where(target_clause))


# =============================================================================
# 1. 자산 템플릿 (AssetTemplate) CRUD
# =============================================================================
class CRUDAssetTemplate(
    CRUDBase[
        fms_models.AssetTemplate,
        fms_schemas.AssetTemplateCreate,
        fms_schemas.AssetTemplateUpdate
    ]
):
    def __init__(self):
        super().__init__(model=fms_models.AssetTemplate)

    async def get_component_ids(self, db: AsyncSession, *, template_id: str) -> List[str]:
        """템플릿에 속한 구성품 ID 목록을 조회합니다."""
        return await component.get_ids_by_attribute(db, attribute="template_id", value=template_id)

    async def remove(self, db: AsyncSession, *, id: str) -> Optional[fms_models.AssetTemplate]:
        """
        템플릿을 삭제합니다.
        이 템플릿으로 만든 자산이 있으면 삭제를 거부하고,
        없으면 구성품과 편대 연관을 함께 삭제합니다.
        """
        db_obj = await self.get(db, id)
        if db_obj is None:
            return None

        asset_check_stmt = select(fms_models.Asset.id).where(fms_models.Asset.template_id == id).limit(1)
        if (await db.execute(asset_check_stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete this asset template as it has associated assets."
            )

        await db.execute(delete(fms_models.Component).where(fms_models.Component.template_id == id))
        await db.execute(delete(FleetAssetTemplate).where(FleetAssetTemplate.template_id == id))
        await db.delete(db_obj)
        await commit_or_rollback(db)
        logger.info("자산 템플릿 삭제: id=%s", id)
        return db_obj


asset_template = CRUDAssetTemplate()


# =============================================================================
# 2. 구성품 (Component) CRUD
# =============================================================================
class CRUDComponent(
    CRUDBase[
        fms_models.Component,
        fms_schemas.ComponentCreate,
        fms_schemas.ComponentUpdate
    ]
):
    def __init__(self):
        super().__init__(model=fms_models.Component)

    async def create(
        self, db: AsyncSession, *, obj_in: fms_schemas.ComponentCreate, id_gen: IdGenerator
    ) -> fms_models.Component:
        """소속 템플릿이 존재하는지 확인하고 생성합니다."""
        if not await asset_template.get(db, obj_in.template_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Asset template not found for the given ID")
        return await super().create(db, obj_in=obj_in, id_gen=id_gen)

    async def get_by_template(self, db: AsyncSession, *, template_id: str) -> List[fms_models.Component]:
        """템플릿에 속한 구성품 목록을 생성 순서대로 조회합니다."""
        statement = select(self.model).where(self.model.template_id == template_id).order_by(self.model.id)
        result = await db.execute(statement)
        return list(result.scalars().all())


component = CRUDComponent()


# =============================================================================
# 3. 자산 (Asset) CRUD
# =============================================================================
class CRUDAsset(CRUDBase[fms_models.Asset, fms_schemas.AssetCreate, fms_schemas.AssetUpdate]):
    def __init__(self):
        super().__init__(model=fms_models.Asset)

    async def create(
        self, db: AsyncSession, *, obj_in: fms_schemas.AssetCreate, id_gen: IdGenerator, now: datetime
    ) -> fms_models.Asset:
        """
        템플릿/편대 FK 유효성을 확인하고 자산을 생성합니다.
        `instantiate_parts`가 true이면 템플릿의 구성품마다 부품을 함께 만들어 한 번에 커밋합니다.
        자산과 부품의 생성 시각은 `now`로 기록합니다. (부품 점검 기한 계산의 기준 시각)
        """
        if not await asset_template.get(db, obj_in.template_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Asset template not found for the given ID")
        if obj_in.fleet_id and not await db.get(LocFleet, obj_in.fleet_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Fleet not found for the given ID")

        db_asset = self.build(
            obj_in=obj_in.model_dump(exclude={"instantiate_parts", "inspection_frequency"}),
            id_gen=id_gen,
            created_at=now,
            updated_at=now,
        )
        db.add(db_asset)

        if obj_in.instantiate_parts:
            for db_component in await component.get_by_template(db, template_id=obj_in.template_id):
                db.add(asset_part.build(
                    obj_in={
                        "asset_id": db_asset.id,
                        "component_id": db_component.id,
                        "name": db_component.name,
                        "inspection_frequency": obj_in.inspection_frequency,
                        "created_at": now,
                        "updated_at": now,
                    },
                    id_gen=id_gen,
                ))

        await commit_or_rollback(db)
        await db.refresh(db_asset)
        logger.info("자산 생성: id=%s template_id=%s", db_asset.id, db_asset.template_id)
        return db_asset

    async def remove(self, db: AsyncSession, *, id: str) -> Optional[fms_models.Asset]:
        """
        자산을 삭제합니다.
        장착 부품과, 자산/부품에 딸린 점검 기록 및 첨부를 같은 트랜잭션에서 삭제합니다.
        """
        db_obj = await self.get(db, id)
        if db_obj is None:
            return None

        part_ids = await asset_part.get_ids_by_attribute(db, attribute="asset_id", value=id)
        await _purge_owned_records(db, asset_ids=[id], part_ids=part_ids)
        await db.execute(delete(fms_models.AssetPart).where(fms_models.AssetPart.asset_id == id))
        await db.delete(db_obj)
        await commit_or_rollback(db)
        logger.info("자산 삭제: id=%s (부품 %d개 포함)", id, len(part_ids))
        return db_obj


asset = CRUDAsset()


# =============================================================================
# 4. 자산 부품 (AssetPart) CRUD
# =============================================================================
class CRUDAssetPart(
    CRUDBase[
        fms_models.AssetPart,
        fms_schemas.AssetPartCreate,
        fms_schemas.AssetPartUpdate
    ]
):
    def __init__(self):
        super().__init__(model=fms_models.AssetPart)

    async def get_by_asset(self, db: AsyncSession, *, asset_id: str) -> List[fms_models.AssetPart]:
        """자산에 장착된 부품 목록을 생성 순서대로 조회합니다."""
        statement = select(self.model).where(self.model.asset_id == asset_id).order_by(self.model.id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create_for_asset(
        self,
        db: AsyncSession,
        *,
        db_asset: fms_models.Asset,
        obj_in: fms_schemas.AssetPartCreate,
        id_gen: IdGenerator,
        now: datetime,
    ) -> fms_models.AssetPart:
        """
        구성품이 자산의 템플릿에 속하는지 확인하고 부품을 생성합니다.
        생성 시각은 `now`로 기록합니다.
        """
        db_component = await component.get(db, obj_in.component_id)
        if db_component is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Component not found for the given ID")
        if db_component.template_id != db_asset.template_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Component does not belong to the asset's template"
            )
        return await super().create(
            db,
            obj_in=obj_in,
            id_gen=id_gen,
            asset_id=db_asset.id,
            name=obj_in.name or db_component.name,
            created_at=now,
            updated_at=now,
        )

    async def remove(self, db: AsyncSession, *, id: str) -> Optional[fms_models.AssetPart]:
        """부품과 그 점검 기록 및 첨부를 함께 삭제합니다."""
        db_obj = await self.get(db, id)
        if db_obj is None:
            return None
        await _purge_owned_records(db, asset_ids=[], part_ids=[id])
        await db.delete(db_obj)
        await commit_or_rollback(db)
        logger.info("자산 부품 삭제: id=%s", id)
        return db_obj


asset_part = CRUDAssetPart()
