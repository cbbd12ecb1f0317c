# app/domains/shared/routers.py

"""
'shared' 도메인 (첨부 메타데이터)의 API 엔드포인트를 정의하는 모듈입니다.

첨부는 자산, 자산 부품, 점검 기록에 연결할 수 있으며, 파일 자체는 다루지 않습니다.
"""

from typing import Dict
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.envelope import to_envelope
from app.core.ids import IdGenerator
from app.domains.usr.models import User as UsrUser

from app.domains.shared import crud as shared_crud
from app.domains.shared import schemas as shared_schemas
from app.domains.shared.models import AttachableType

router = APIRouter(
    tags=["Shared Attachments (첨부 관리)"],
    responses={404: {"description": "Not found"}},
)


@router.post(
    "/attachments",
    response_model=shared_schemas.AttachmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="첨부 추가"
)
async def create_attachment(
    attachment_create: shared_schemas.AttachmentCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    id_gen: IdGenerator = Depends(deps.get_id_generator),
    current_user: UsrUser = Depends(deps.require_permission("attachment:write")),
):
    """
    엔티티에 첨부 메타데이터를 추가합니다. (reporter 이상)
    소유 엔티티의 존재 여부는 확인하지 않고, 종류(`entity_type`)만 검증합니다.
    """
    db_attachment = await shared_crud.attachment.create(db, obj_in=attachment_create, id_gen=id_gen)
    return to_envelope(shared_schemas.AttachmentResponse, db_attachment)


@router.get("/attachments", response_model=shared_schemas.AttachmentList, summary="엔티티별 첨부 URI 목록 조회")
async def read_attachments_for_entity(
    entity_type: AttachableType,
    entity_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("attachment:read")),
):
    uris = await shared_crud.attachment.get_uris(db, entity_type=entity_type, entity_id=entity_id)
    return shared_schemas.AttachmentList(entity_type=entity_type, entity_id=entity_id, attachments=uris)


@router.get("/attachments/{attachment_id}", response_model=shared_schemas.AttachmentResponse, summary="특정 첨부 조회")
async def read_attachment(
    attachment_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("attachment:read")),
):
    db_attachment = await shared_crud.attachment.get(db, attachment_id)
    if db_attachment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attachment not found")
    return to_envelope(shared_schemas.AttachmentResponse, db_attachment)


@router.delete("/attachments/{attachment_id}", summary="첨부 삭제")
async def delete_attachment(
    attachment_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.require_permission("attachment:delete")),
) -> Dict[str, str]:
    """첨부 메타데이터를 삭제합니다. (editor 이상)"""
    db_attachment = await shared_crud.attachment.delete(db, id=attachment_id)
    if db_attachment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attachment not found")
    return {"message": "Attachment deleted"}
