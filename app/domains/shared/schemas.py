# app/domains/shared/schemas.py

"""
'shared' 도메인 (첨부 메타데이터)의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import Field
from sqlmodel import SQLModel

from app.domains.shared.models import AttachableType


class AttachmentCreate(SQLModel):
    """
    첨부를 추가하기 위한 Pydantic 모델입니다.
    - `entity_type`: Asset, AssetPart, Inspection 중 하나 (그 밖의 값은 400)
    - `entity_id`: 소유 엔티티 ID (존재 여부는 확인하지 않음)
    """
    entity_type: AttachableType = Field(..., description="소유 엔티티 종류")
    entity_id: str = Field(..., min_length=1, max_length=32, description="소유 엔티티 ID")
    uri: str = Field(..., min_length=1, max_length=2048, description="외부 저장소 URI")
    name: Optional[str] = Field(None, max_length=255, description="표시 이름")
    mime_type: Optional[str] = Field(None, max_length=100, description="MIME 유형")


class AttachmentFields(SQLModel):
    entity_type: AttachableType
    entity_id: str
    uri: str
    name: Optional[str] = None
    mime_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AttachmentResponse(SQLModel):
    id: str
    type: str = "attachment"
    fields: AttachmentFields


class AttachmentList(SQLModel):
    """소유 엔티티별 첨부 URI 목록"""
    entity_type: AttachableType
    entity_id: str
    attachments: List[str] = Field(default_factory=list)
