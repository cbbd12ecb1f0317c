# app/domains/mnt/models.py

"""
'mnt' 도메인 (점검 및 정비 기한 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

점검 기록(Inspection)은 자산 또는 자산 부품 중 하나를 대상으로 하며,
대상은 (target_type, target_id) 태그 쌍으로 표현합니다.
대상과 시각은 생성 후 변경할 수 없고, 조치/상태/비고만 정정할 수 있습니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum

from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Enum as SAEnum, ForeignKey, Index, String
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


class InspectionTargetType(str, Enum):
    """점검 대상 종류"""
    ASSET = "Asset"
    ASSET_PART = "AssetPart"


# =============================================================================
# 1. inspections 테이블 모델
# =============================================================================
class InspectionBase(SQLModel):
    """
    inspections 테이블의 정정 가능한 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    action: Optional[str] = Field(default=None, max_length=255, description="수행한 조치")
    condition: Optional[str] = Field(default=None, max_length=50, description="점검 후 상태")
    notes: Optional[str] = Field(default=None, description="비고")


class Inspection(InspectionBase, table=True):
    """
    inspections 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "inspections"
    __table_args__ = (Index("ix_inspections_target", "target_type", "target_id", "timestamp"),)

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="점검 기록 고유 ID")
    target_type: InspectionTargetType = Field(
        sa_column=Column(
            SAEnum(
                InspectionTargetType,
                name="inspection_target_type",
                native_enum=False,
                create_constraint=True,
                validate_strings=True,
                values_callable=lambda kinds: [k.value for k in kinds],
            ),
            nullable=False,
        ),
        description="점검 대상 종류 (Asset, AssetPart)"
    )
    target_id: str = Field(max_length=32, description="점검 대상 ID")
    timestamp: datetime = Field(
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False),
        description="점검 (예정) 시각"
    )
    reported_by_user_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        description="기록한 사용자 ID"
    )
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
