# app/domains/loc/routers.py

"""
'loc' 도메인 (위치/편대 계층)의 API 엔드포인트를 정의하는 모듈입니다.

이 라우터는 기지(Port), 편대(Fleet)에 대한 CRUD와
편대-기지 배정, 편대-템플릿 연관, 자산-편대 배정을 위한 HTTP 엔드포인트를 제공합니다.
배정 해제는 현재 배정이 요청과 다르면 아무것도 바꾸지 않고 성공으로 응답합니다.
"""

from typing import Dict, List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.envelope import to_envelope
from app.core.ids import IdGenerator
from app.domains.usr.models import User as UsrUser

from app.domains.loc import crud as loc_crud
from app.domains.loc import models as loc_models
from app.domains.loc import schemas as loc_schemas
from app.domains.fms import crud as fms_crud

router = APIRouter(
    tags=["Location & Fleet Management (기지 및 편대 관리)"],
    responses={404: {"description": "Not found"}},
)


async def _port_response(db: AsyncSession, db_port: loc_models.Port) -> loc_schemas.PortResponse:
    fleet_ids = await loc_crud.port.get_fleet_ids(db, port_id=db_port.id)
    return to_envelope(loc_schemas.PortResponse, db_port, fleet=fleet_ids)


async def _fleet_response(db: AsyncSession, db_fleet: loc_models.Fleet) -> loc_schemas.FleetResponse:
    template_ids = await loc_crud.fleet.get_template_ids(db, fleet_id=db_fleet.id)
    asset_ids = await loc_crud.fleet.get_asset_ids(db, fleet_id=db_fleet.id)
    return to_envelope(loc_schemas.FleetResponse, db_fleet, templates=template_ids, assets=asset_ids)


async def _get_port_or_404(db: AsyncSession, port_id: str) -> loc_models.Port:
    db_port = await loc_crud.port.get(db, port_id)
    if db_port is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Port not found")
    return db_port


async def _get_fleet_or_404(db: AsyncSession, fleet_id: str) -> loc_models.Fleet:
    db_fleet = await loc_crud.fleet.get(db, fleet_id)
    if db_fleet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fleet not found")
    return db_fleet


# =============================================================================
# 1. ports 엔드포인트 (기지 관리)
# =============================================================================
@router.post("/ports", response_model=loc_schemas.PortResponse, status_code=status.HTTP_201_CREATED, summary="새 기지 생성")
async def create_port(
    port_create: loc_schemas.PortCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("port:write")),
):
    """
    새로운 기지를 생성합니다. (editor 이상)
    - `name`: 기지 명칭 (필수)
    - `latitude`, `longitude`: 좌표 (필수)
    - `elevation`: 고도 (기본 0)
    """
    db_port = await loc_crud.port.create(db, obj_in=port_create, id_gen=id_gen)
    return to_envelope(loc_schemas.PortResponse, db_port)


@router.get("/ports", response_model=List[loc_schemas.PortResponse], summary="기지 목록 조회")
async def read_ports(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("port:read")),
):
    ports = await loc_crud.port.get_multi(db, skip=skip, limit=limit)
    return [await _port_response(db, db_port) for db_port in ports]


@router.get("/ports/{port_id}", response_model=loc_schemas.PortResponse, summary="특정 기지 조회")
async def read_port(
    port_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("port:read")),
):
    """
    특정 기지와 그 기지에 소속된 편대 ID 목록(`fleet`)을 조회합니다.
    """
    db_port = await _get_port_or_404(db, port_id)
    return await _port_response(db, db_port)


@router.put("/ports/{port_id}", response_model=loc_schemas.PortResponse, summary="기지 정보 업데이트")
async def update_port(
    port_id: str,
    port_update: loc_schemas.PortUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("port:write")),
):
    db_port = await _get_port_or_404(db, port_id)
    db_port = await loc_crud.port.update(db, db_obj=db_port, obj_in=port_update)
    return await _port_response(db, db_port)


@router.delete("/ports/{port_id}", summary="기지 삭제")
async def delete_port(
    port_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("port:write")),
) -> Dict[str, str]:
    """
    기지를 삭제합니다. 소속 편대는 삭제되지 않고 미배정 상태가 됩니다.
    """
    db_port = await loc_crud.port.remove(db, id=port_id)
    if db_port is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Port not found")
    return {"message": "Port deleted"}


@router.post("/ports/{port_id}/fleets/{fleet_id}", summary="편대를 기지에 배정")
async def assign_fleet_to_port(
    port_id: str,
    fleet_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:write")),
) -> Dict[str, str]:
    await _get_port_or_404(db, port_id)
    await _get_fleet_or_404(db, fleet_id)
    await loc_crud.fleet.assign_to_port(db, fleet_id=fleet_id, port_id=port_id)
    return {"message": "Fleet added to port"}


@router.delete("/ports/{port_id}/fleets/{fleet_id}", summary="편대의 기지 배정 해제")
async def unassign_fleet_from_port(
    port_id: str,
    fleet_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:write")),
) -> Dict[str, str]:
    """
    편대가 여전히 이 기지에 배정되어 있을 때만 배정을 해제합니다.
    다른 기지로 옮겨진 편대라면 아무것도 바꾸지 않습니다.
    """
    await _get_fleet_or_404(db, fleet_id)
    await loc_crud.fleet.unassign_from_port(db, fleet_id=fleet_id, port_id=port_id)
    return {"message": "Fleet removed from port"}


# =============================================================================
# 2. fleets 엔드포인트 (편대 관리)
# =============================================================================
@router.post("/fleets", response_model=loc_schemas.FleetResponse, status_code=status.HTTP_201_CREATED, summary="새 편대 생성")
async def create_fleet(
    fleet_create: loc_schemas.FleetCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("fleet:write")),
):
    """
    새로운 편대를 생성합니다. (editor 이상)
    - `name`: 편대 명칭 (필수, 공백 불가)
    - `port_id`: 소속 기지 ID (선택)
    """
    db_fleet = await loc_crud.fleet.create(db, obj_in=fleet_create, id_gen=id_gen)
    return to_envelope(loc_schemas.FleetResponse, db_fleet)


@router.get("/fleets", response_model=List[loc_schemas.FleetResponse], summary="편대 목록 조회")
async def read_fleets(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:read")),
):
    fleets = await loc_crud.fleet.get_multi(db, skip=skip, limit=limit)
    return [await _fleet_response(db, db_fleet) for db_fleet in fleets]


@router.get("/fleets/{fleet_id}", response_model=loc_schemas.FleetResponse, summary="특정 편대 조회")
async def read_fleet(
    fleet_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:read")),
):
    """
    특정 편대와 연관 템플릿 ID 목록(`templates`), 소속 자산 ID 목록(`assets`)을 조회합니다.
    """
    db_fleet = await _get_fleet_or_404(db, fleet_id)
    return await _fleet_response(db, db_fleet)


@router.put("/fleets/{fleet_id}", response_model=loc_schemas.FleetResponse, summary="편대 정보 업데이트")
async def update_fleet(
    fleet_id: str,
    fleet_update: loc_schemas.FleetUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:write")),
):
    db_fleet = await _get_fleet_or_404(db, fleet_id)
    db_fleet = await loc_crud.fleet.update(db, db_obj=db_fleet, obj_in=fleet_update)
    return await _fleet_response(db, db_fleet)


@router.delete("/fleets/{fleet_id}", summary="편대 삭제")
async def delete_fleet(
    fleet_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:write")),
) -> Dict[str, str]:
    """
    편대를 삭제합니다. 소속 자산은 삭제되지 않고 미배정 상태가 됩니다.
    """
    db_fleet = await loc_crud.fleet.remove(db, id=fleet_id)
    if db_fleet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Fleet not found")
    return {"message": "Fleet deleted"}


@router.post("/fleets/{fleet_id}/templates/{template_id}", summary="편대-템플릿 연관")
async def associate_template_with_fleet(
    fleet_id: str,
    template_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:write")),
) -> Dict[str, str]:
    await _get_fleet_or_404(db, fleet_id)
    if await fms_crud.asset_template.get(db, template_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset template not found")
    await loc_crud.fleet.associate_template(db, fleet_id=fleet_id, template_id=template_id)
    return {"message": "Template associated with fleet"}


@router.delete("/fleets/{fleet_id}/templates/{template_id}", summary="편대-템플릿 연관 해제")
async def dissociate_template_from_fleet(
    fleet_id: str,
    template_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("fleet:write")),
) -> Dict[str, str]:
    """연관이 이미 없어도 성공으로 응답합니다."""
    await loc_crud.fleet.dissociate_template(db, fleet_id=fleet_id, template_id=template_id)
    return {"message": "Template dissociated from fleet"}


@router.post("/fleets/{fleet_id}/assets/{asset_id}", summary="자산을 편대에 배정")
async def assign_asset_to_fleet(
    fleet_id: str,
    asset_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
) -> Dict[str, str]:
    await _get_fleet_or_404(db, fleet_id)
    if await fms_crud.asset.get(db, asset_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    await loc_crud.fleet.assign_asset(db, fleet_id=fleet_id, asset_id=asset_id)
    return {"message": "Asset added to fleet"}


@router.delete("/fleets/{fleet_id}/assets/{asset_id}", summary="자산의 편대 배정 해제")
async def unassign_asset_from_fleet(
    fleet_id: str,
    asset_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
) -> Dict[str, str]:
    """
    자산이 여전히 이 편대에 배정되어 있을 때만 배정을 해제합니다.
    """
    if await fms_crud.asset.get(db, asset_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    await loc_crud.fleet.unassign_asset(db, fleet_id=fleet_id, asset_id=asset_id)
    return {"message": "Asset removed from fleet"}
