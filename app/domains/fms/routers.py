# app/domains/fms/routers.py

"""
'fms' 도메인 (장비 카탈로그 및 자산 인스턴스)의 API 엔드포인트를 정의하는 모듈입니다.

이 라우터는 자산 템플릿, 구성품, 자산, 자산 부품에 대한 CRUD 작업을 위한 HTTP 엔드포인트를 제공합니다.
자산 상세 조회는 장착 부품(부품별 첨부 포함)과 자산 자체의 첨부 URI 목록을 함께 반환합니다.
"""

from datetime import datetime
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.envelope import to_envelope
from app.core.ids import IdGenerator
from app.domains.usr.models import User as UsrUser

from app.domains.fms import crud as fms_crud
from app.domains.fms import models as fms_models
from app.domains.fms import schemas as fms_schemas
from app.domains.shared import crud as shared_crud
from app.domains.shared.models import AttachableType

router = APIRouter(
    tags=["Fleet Asset Management (장비 및 자산 관리)"],
    responses={404: {"description": "Not found"}},
)


async def _template_response(
    db: AsyncSession, db_template: fms_models.AssetTemplate
) -> fms_schemas.AssetTemplateResponse:
    component_ids = await fms_crud.asset_template.get_component_ids(db, template_id=db_template.id)
    return to_envelope(fms_schemas.AssetTemplateResponse, db_template, components=component_ids)


async def _part_response(db: AsyncSession, db_part: fms_models.AssetPart) -> fms_schemas.AssetPartResponse:
    uris = await shared_crud.attachment.get_uris(db, entity_type=AttachableType.ASSET_PART, entity_id=db_part.id)
    return to_envelope(fms_schemas.AssetPartResponse, db_part, attachments=uris)


async def _asset_response(db: AsyncSession, db_asset: fms_models.Asset) -> fms_schemas.AssetResponse:
    """자산 + 장착 부품(각 부품의 첨부 포함) + 자산 첨부를 조합합니다."""
    parts = await fms_crud.asset_part.get_by_asset(db, asset_id=db_asset.id)
    uris = await shared_crud.attachment.get_uris(db, entity_type=AttachableType.ASSET, entity_id=db_asset.id)
    return to_envelope(
        fms_schemas.AssetResponse,
        db_asset,
        parts=[await _part_response(db, db_part) for db_part in parts],
        attachments=uris,
    )


async def _get_template_or_404(db: AsyncSession, template_id: str) -> fms_models.AssetTemplate:
    db_template = await fms_crud.asset_template.get(db, template_id)
    if db_template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset template not found")
    return db_template


async def _get_component_or_404(db: AsyncSession, component_id: str) -> fms_models.Component:
    db_component = await fms_crud.component.get(db, component_id)
    if db_component is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found")
    return db_component


async def _get_asset_or_404(db: AsyncSession, asset_id: str) -> fms_models.Asset:
    db_asset = await fms_crud.asset.get(db, asset_id)
    if db_asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return db_asset


async def _get_part_or_404(db: AsyncSession, part_id: str) -> fms_models.AssetPart:
    db_part = await fms_crud.asset_part.get(db, part_id)
    if db_part is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset part not found")
    return db_part


# =============================================================================
# 1. asset_templates 엔드포인트 (자산 템플릿 관리)
# =============================================================================
@router.post(
    "/asset-templates",
    response_model=fms_schemas.AssetTemplateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="새 자산 템플릿 생성"
)
async def create_asset_template(
    template_create: fms_schemas.AssetTemplateCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("template:write")),
):
    """
    새로운 자산 템플릿(기종)을 생성합니다. (editor 이상)
    """
    db_template = await fms_crud.asset_template.create(db, obj_in=template_create, id_gen=id_gen)
    return to_envelope(fms_schemas.AssetTemplateResponse, db_template)


@router.get("/asset-templates", response_model=List[fms_schemas.AssetTemplateResponse], summary="자산 템플릿 목록 조회")
async def read_asset_templates(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("template:read")),
):
    templates = await fms_crud.asset_template.get_multi(db, skip=skip, limit=limit)
    return [await _template_response(db, db_template) for db_template in templates]


@router.get("/asset-templates/{template_id}", response_model=fms_schemas.AssetTemplateResponse, summary="특정 자산 템플릿 조회")
async def read_asset_template(
    template_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("template:read")),
):
    """템플릿과 그 구성품 ID 목록(`components`)을 조회합니다."""
    db_template = await _get_template_or_404(db, template_id)
    return await _template_response(db, db_template)


@router.put("/asset-templates/{template_id}", response_model=fms_schemas.AssetTemplateResponse, summary="자산 템플릿 업데이트")
async def update_asset_template(
    template_id: str,
    template_update: fms_schemas.AssetTemplateUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("template:write")),
):
    """
    템플릿을 부분 업데이트합니다. 전달하지 않은 필드는 기존 값을 유지합니다.
    """
    db_template = await _get_template_or_404(db, template_id)
    db_template = await fms_crud.asset_template.update(db, db_obj=db_template, obj_in=template_update)
    return await _template_response(db, db_template)


@router.delete("/asset-templates/{template_id}", summary="자산 템플릿 삭제")
async def delete_asset_template(
    template_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("template:write")),
) -> Dict[str, str]:
    """
    템플릿을 삭제합니다. 이 템플릿으로 만든 자산이 있으면 400을 반환합니다.
    """
    db_template = await fms_crud.asset_template.remove(db, id=template_id)
    if db_template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset template not found")
    return {"message": "Asset template deleted"}


# =============================================================================
# 2. components 엔드포인트 (구성품 관리)
# =============================================================================
@router.post(
    "/components",
    response_model=fms_schemas.ComponentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="새 구성품 생성"
)
async def create_component(
    component_create: fms_schemas.ComponentCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("component:write")),
):
    """
    템플릿에 속한 구성품을 생성합니다.
    - `template_id`: 존재하는 템플릿 ID (없으면 400)
    """
    db_component = await fms_crud.component.create(db, obj_in=component_create, id_gen=id_gen)
    return to_envelope(fms_schemas.ComponentResponse, db_component)


@router.get("/components", response_model=List[fms_schemas.ComponentResponse], summary="구성품 목록 조회")
async def read_components(
    template_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("component:read")),
):
    filters = {"template_id": template_id} if template_id else {}
    components = await fms_crud.component.get_multi(db, skip=skip, limit=limit, **filters)
    return [to_envelope(fms_schemas.ComponentResponse, c) for c in components]


@router.get("/components/{component_id}", response_model=fms_schemas.ComponentResponse, summary="특정 구성품 조회")
async def read_component(
    component_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("component:read")),
):
    db_component = await _get_component_or_404(db, component_id)
    return to_envelope(fms_schemas.ComponentResponse, db_component)


@router.put("/components/{component_id}", response_model=fms_schemas.ComponentResponse, summary="구성품 업데이트")
async def update_component(
    component_id: str,
    component_update: fms_schemas.ComponentUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("component:write")),
):
    db_component = await _get_component_or_404(db, component_id)
    db_component = await fms_crud.component.update(db, db_obj=db_component, obj_in=component_update)
    return to_envelope(fms_schemas.ComponentResponse, db_component)


@router.delete("/components/{component_id}", summary="구성품 삭제")
async def delete_component(
    component_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("component:write")),
) -> Dict[str, str]:
    """
    구성품을 삭제합니다. 이 구성품으로 만든 자산 부품은 삭제되지 않습니다.
    """
    db_component = await fms_crud.component.delete(db, id=component_id)
    if db_component is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found")
    return {"message": "Component deleted"}


# =============================================================================
# 3. assets 엔드포인트 (자산 관리)
# =============================================================================
@router.post("/assets", response_model=fms_schemas.AssetResponse, status_code=status.HTTP_201_CREATED, summary="새 자산 생성")
async def create_asset(
    asset_create: fms_schemas.AssetCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    now: datetime = Depends(deps.get_now),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
):
    """
    새로운 자산을 생성합니다. (editor 이상)
    - `template_id`: 존재하는 템플릿 ID (없으면 400)
    - `fleet_id`: 소속 편대 ID (선택, 없으면 400)
    - `instantiate_parts`: true이면 템플릿의 구성품마다 부품을 함께 생성합니다.
    """
    db_asset = await fms_crud.asset.create(db, obj_in=asset_create, id_gen=id_gen, now=now)
    return await _asset_response(db, db_asset)


@router.get("/assets", response_model=List[fms_schemas.AssetSummaryResponse], summary="자산 목록 조회")
async def read_assets(
    fleet_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:read")),
):
    """
    자산 목록을 조회합니다. `fleet_id`로 특정 편대의 자산만 필터링할 수 있습니다.
    """
    filters = {"fleet_id": fleet_id} if fleet_id else {}
    assets = await fms_crud.asset.get_multi(db, skip=skip, limit=limit, **filters)
    return [to_envelope(fms_schemas.AssetSummaryResponse, db_asset) for db_asset in assets]


@router.get("/assets/{asset_id}", response_model=fms_schemas.AssetResponse, summary="특정 자산 상세 조회")
async def read_asset(
    asset_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:read")),
):
    """
    자산과 장착 부품 목록(각 부품의 첨부 포함), 자산 자체의 첨부 URI 목록을 조회합니다.
    """
    db_asset = await _get_asset_or_404(db, asset_id)
    return await _asset_response(db, db_asset)


@router.put("/assets/{asset_id}", response_model=fms_schemas.AssetResponse, summary="자산 정보 업데이트")
async def update_asset(
    asset_id: str,
    asset_update: fms_schemas.AssetUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
):
    db_asset = await _get_asset_or_404(db, asset_id)
    db_asset = await fms_crud.asset.update(db, db_obj=db_asset, obj_in=asset_update)
    return await _asset_response(db, db_asset)


@router.delete("/assets/{asset_id}", summary="자산 삭제")
async def delete_asset(
    asset_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
) -> Dict[str, str]:
    """
    자산을 삭제합니다. 장착 부품과 관련 점검 기록, 첨부도 함께 삭제됩니다.
    """
    db_asset = await fms_crud.asset.remove(db, id=asset_id)
    if db_asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return {"message": "Asset deleted"}


# =============================================================================
# 4. asset_parts 엔드포인트 (자산 부품 관리)
# =============================================================================
@router.post(
    "/assets/{asset_id}/parts",
    response_model=fms_schemas.AssetPartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="자산에 부품 장착"
)
async def create_asset_part(
    asset_id: str,
    part_create: fms_schemas.AssetPartCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    now: datetime = Depends(deps.get_now),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
):
    """
    자산에 부품을 장착합니다.
    - 자산이 없으면 404
    - 구성품이 없거나 자산의 템플릿에 속하지 않으면 400
    """
    db_asset = await _get_asset_or_404(db, asset_id)
    db_part = await fms_crud.asset_part.create_for_asset(
        db, db_asset=db_asset, obj_in=part_create, id_gen=id_gen, now=now
    )
    return to_envelope(fms_schemas.AssetPartResponse, db_part)


@router.get("/asset-parts/{part_id}", response_model=fms_schemas.AssetPartResponse, summary="특정 자산 부품 조회")
async def read_asset_part(
    part_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:read")),
):
    db_part = await _get_part_or_404(db, part_id)
    return await _part_response(db, db_part)


@router.put("/asset-parts/{part_id}", response_model=fms_schemas.AssetPartResponse, summary="자산 부품 업데이트")
async def update_asset_part(
    part_id: str,
    part_update: fms_schemas.AssetPartUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
):
    """
    부품의 상태/비고/일련번호/점검 주기를 부분 업데이트합니다.
    """
    db_part = await _get_part_or_404(db, part_id)
    db_part = await fms_crud.asset_part.update(db, db_obj=db_part, obj_in=part_update)
    return await _part_response(db, db_part)


@router.delete("/asset-parts/{part_id}", summary="자산 부품 삭제")
async def delete_asset_part(
    part_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("asset:write")),
) -> Dict[str, str]:
    db_part = await fms_crud.asset_part.remove(db, id=part_id)
    if db_part is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset part not found")
    return {"message": "Asset part deleted"}
