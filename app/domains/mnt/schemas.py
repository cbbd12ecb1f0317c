# app/domains/mnt/schemas.py

"""
'mnt' 도메인 (점검 및 정비 기한 관리)의 Pydantic 스키마를 정의하는 모듈입니다.

점검 기록 생성/정정 요청 모델, `{id, type, fields}` 응답 모델,
일괄 기록 결과 모델, 편대 정비 기한 초과(컴플라이언스) 응답 모델을 포함합니다.
"""

from typing import Literal, Optional, List
from datetime import datetime
from pydantic import ConfigDict, Field
from sqlmodel import SQLModel

from app.domains.mnt.models import InspectionTargetType


# =============================================================================
# 1. inspections 스키마
# =============================================================================
class InspectionCreate(SQLModel):
    """
    점검 기록(또는 예정)을 생성하기 위한 Pydantic 모델입니다.
    대상은 URL 경로로 지정되므로 본문에는 시각과 선택 항목만 받습니다.
    """
    model_config = ConfigDict(extra="forbid")

    timestamp: datetime = Field(..., description="점검 시각 (ISO 8601)")
    action: Optional[str] = Field(None, max_length=255, description="수행한 조치")
    condition: Optional[str] = Field(None, max_length=50, description="점검 후 상태")
    notes: Optional[str] = Field(None, description="비고")


class InspectionUpdate(SQLModel):
    """
    점검 기록 정정용 모델입니다. 시각과 대상은 변경할 수 없습니다.
    """
    model_config = ConfigDict(extra="forbid")

    action: Optional[str] = Field(None, max_length=255, description="수행한 조치")
    condition: Optional[str] = Field(None, max_length=50, description="점검 후 상태")
    notes: Optional[str] = Field(None, description="비고")


class InspectionFields(SQLModel):
    target_type: InspectionTargetType
    target_id: str
    timestamp: datetime
    action: Optional[str] = None
    condition: Optional[str] = None
    notes: Optional[str] = None
    reported_by_user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InspectionResponse(SQLModel):
    id: str
    type: str = "inspection"
    fields: InspectionFields


class InspectionBatchOutcome(SQLModel):
    """일괄 기록의 항목별 결과"""
    index: int
    status: Literal["created", "failed"]
    id: Optional[str] = None
    error: Optional[str] = None


# =============================================================================
# 2. 컴플라이언스 (정비 기한 초과) 응답 스키마
# =============================================================================
class OverduePart(SQLModel):
    part_id: str
    part_name: str
    last_inspection_time: Optional[datetime] = Field(None, description="마지막 점검 시각 (점검 이력 없으면 null)")
    baseline_time: datetime = Field(..., description="경과 일수 계산 기준 시각")
    inspection_frequency: int
    days_overdue: int


class AssetWithOverdueParts(SQLModel):
    asset_id: str
    asset_name: str
    overdue_parts: List[OverduePart] = Field(default_factory=list)


class FleetCompliance(SQLModel):
    fleet_id: str
    assets_with_overdue_parts: List[AssetWithOverdueParts] = Field(default_factory=list)
