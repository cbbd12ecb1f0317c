# app/domains/mnt/routers.py

"""
'mnt' 도메인 (점검 및 정비 기한 관리)의 API 엔드포인트를 정의하는 모듈입니다.

- 자산 점검 예정 등록, 자산 부품 점검 기록 (단건/일괄)
- 점검 기록 조회 및 정정 (조치/상태/비고만)
- 편대 정비 기한 초과 부품 조회 (컴플라이언스)
"""

from datetime import datetime
from typing import Any, List
from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.envelope import to_envelope
from app.core.ids import IdGenerator
from app.domains.usr.models import User as UsrUser

from app.domains.fms import crud as fms_crud
from app.domains.mnt import crud as mnt_crud
from app.domains.mnt import schemas as mnt_schemas
from app.domains.mnt import services as mnt_services
from app.domains.mnt.models import InspectionTargetType

router = APIRouter(
    tags=["Maintenance & Compliance (점검 및 정비 기한 관리)"],
    responses={404: {"description": "Not found"}},
)


async def _ensure_asset(db: AsyncSession, asset_id: str) -> None:
    if await fms_crud.asset.get(db, asset_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")


async def _ensure_part(db: AsyncSession, part_id: str) -> None:
    if await fms_crud.asset_part.get(db, part_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset part not found")


# =============================================================================
# 1. 자산 점검 (예정) 엔드포인트
# =============================================================================
@router.post(
    "/assets/{asset_id}/inspections",
    response_model=mnt_schemas.InspectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="자산 점검 예정 등록"
)
async def schedule_inspection(
    asset_id: str,
    inspection_create: mnt_schemas.InspectionCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("inspection:write")),
):
    """
    자산 단위의 점검을 지정 시각으로 등록합니다. (reporter 이상)
    """
    await _ensure_asset(db, asset_id)
    db_obj = await mnt_crud.inspection.create_for_target(
        db,
        target_type=InspectionTargetType.ASSET,
        target_id=asset_id,
        obj_in=inspection_create,
        id_gen=id_gen,
        reported_by_user_id=current_user.id,
    )
    return to_envelope(mnt_schemas.InspectionResponse, db_obj)


@router.get("/assets/{asset_id}/inspections", response_model=List[mnt_schemas.InspectionResponse], summary="자산 점검 목록 조회")
async def read_asset_inspections(
    asset_id: str,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inspection:read")),
):
    await _ensure_asset(db, asset_id)
    inspections = await mnt_crud.inspection.get_by_target(
        db, target_type=InspectionTargetType.ASSET, target_id=asset_id, skip=skip, limit=limit
    )
    return [to_envelope(mnt_schemas.InspectionResponse, i) for i in inspections]


# =============================================================================
# 2. 자산 부품 점검 기록 엔드포인트
# =============================================================================
@router.post(
    "/asset-parts/{part_id}/inspections",
    response_model=mnt_schemas.InspectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="자산 부품 점검 기록"
)
async def log_inspection(
    part_id: str,
    inspection_create: mnt_schemas.InspectionCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("inspection:write")),
):
    await _ensure_part(db, part_id)
    db_obj = await mnt_crud.inspection.create_for_target(
        db,
        target_type=InspectionTargetType.ASSET_PART,
        target_id=part_id,
        obj_in=inspection_create,
        id_gen=id_gen,
        reported_by_user_id=current_user.id,
    )
    return to_envelope(mnt_schemas.InspectionResponse, db_obj)


@router.post(
    "/asset-parts/{part_id}/inspections/batch",
    response_model=List[mnt_schemas.InspectionBatchOutcome],
    summary="자산 부품 점검 일괄 기록"
)
async def log_inspections_batch(
    part_id: str,
    entries: List[Any] = Body(..., description="점검 기록 항목 목록"),
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("inspection:write")),
):
    """
    점검 기록을 일괄 추가합니다.
    각 항목은 독립적으로 처리되며, 항목별 결과(`created` 또는 `failed`)를 입력 순서대로 반환합니다.
    """
    await _ensure_part(db, part_id)
    return await mnt_crud.inspection.log_batch(
        db, part_id=part_id, entries=entries, id_gen=id_gen, reported_by_user_id=current_user.id
    )


@router.get("/asset-parts/{part_id}/inspections", response_model=List[mnt_schemas.InspectionResponse], summary="자산 부품 점검 목록 조회")
async def read_part_inspections(
    part_id: str,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inspection:read")),
):
    """부품의 점검 기록을 최신 시각 순으로 조회합니다."""
    await _ensure_part(db, part_id)
    inspections = await mnt_crud.inspection.get_by_target(
        db, target_type=InspectionTargetType.ASSET_PART, target_id=part_id, skip=skip, limit=limit
    )
    return [to_envelope(mnt_schemas.InspectionResponse, i) for i in inspections]


# =============================================================================
# 3. 점검 기록 조회/정정 엔드포인트
# =============================================================================
@router.get("/inspections/{inspection_id}", response_model=mnt_schemas.InspectionResponse, summary="특정 점검 기록 조회")
async def read_inspection(
    inspection_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inspection:read")),
):
    db_obj = await mnt_crud.inspection.get(db, inspection_id)
    if db_obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inspection not found")
    return to_envelope(mnt_schemas.InspectionResponse, db_obj)


@router.put("/inspections/{inspection_id}", response_model=mnt_schemas.InspectionResponse, summary="점검 기록 정정")
async def update_inspection(
    inspection_id: str,
    inspection_update: mnt_schemas.InspectionUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("inspection:write")),
):
    """
    점검 기록의 조치/상태/비고를 정정합니다.
    시각이나 대상을 보내면 400을 반환합니다.
    """
    db_obj = await mnt_crud.inspection.get(db, inspection_id)
    if db_obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inspection not found")
    db_obj = await mnt_crud.inspection.update(db, db_obj=db_obj, obj_in=inspection_update)
    return to_envelope(mnt_schemas.InspectionResponse, db_obj)


# =============================================================================
# 4. 컴플라이언스 엔드포인트
# =============================================================================
@router.get("/fleets/{fleet_id}/compliance", response_model=mnt_schemas.FleetCompliance, summary="편대 정비 기한 초과 부품 조회")
async def read_fleet_compliance(
    fleet_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    now: datetime = Depends(deps.get_now),
    current_user: UsrUser = Depends(deps.require_permission("compliance:read")),
):
    """
    편대 자산들의 정비 기한 초과 부품을 자산별로 묶어 조회합니다.
    요청 시점에 점검 이력으로부터 새로 계산합니다.
    """
    return await mnt_services.compute_overdue_parts(db, fleet_id=fleet_id, now=now)
