# app/domains/shared/models.py

"""
'shared' 도메인 (여러 도메인이 공유하는 첨부 메타데이터)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

첨부(Attachment)는 파일 자체가 아닌 외부 저장소의 URI, 이름, MIME 유형만 저장합니다.
소유 엔티티는 (entity_type, entity_id) 태그 쌍으로 표현하며,
entity_type은 자산, 자산 부품, 점검 기록 중 하나만 허용됩니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Enum as SAEnum, Index
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


class AttachableType(str, Enum):
    """첨부를 가질 수 있는 엔티티 종류"""
    ASSET = "Asset"
    ASSET_PART = "AssetPart"
    INSPECTION = "Inspection"


# =============================================================================
# 1. attachments 테이블 모델
# =============================================================================
class AttachmentBase(SQLModel):
    """
    attachments 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    uri: str = Field(max_length=2048, description="외부 저장소 URI")
    name: Optional[str] = Field(default=None, max_length=255, description="표시 이름")
    mime_type: Optional[str] = Field(default=None, max_length=100, description="MIME 유형")


class Attachment(AttachmentBase, table=True):
    """
    attachments 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "attachments"
    __table_args__ = (Index("ix_attachments_entity", "entity_type", "entity_id"),)

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="첨부 고유 ID")
    entity_type: AttachableType = Field(
        sa_column=Column(
            SAEnum(
                AttachableType,
                name="attachable_type",
                native_enum=False,
                create_constraint=True,
                validate_strings=True,
                values_callable=lambda kinds: [k.value for k in kinds],
            ),
            nullable=False,
        ),
        description="소유 엔티티 종류 (Asset, AssetPart, Inspection)"
    )
    entity_id: str = Field(max_length=32, description="소유 엔티티 ID")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )
