# app/domains/fms/schemas.py

"""
'fms' 도메인 (장비 카탈로그 및 자산 인스턴스)의 Pydantic 스키마를 정의하는 모듈입니다.

자산 템플릿, 구성품, 자산, 자산 부품에 대한 생성/수정 요청 모델과
`{id, type, fields}` 형태의 응답 모델을 포함합니다.
수정 모델은 모두 부분 업데이트이며, 변경할 수 없는 참조(템플릿, 자산, 구성품)는 받지 않습니다.
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import ConfigDict, Field, field_validator
from sqlmodel import SQLModel

from app.core.envelope import reject_null


# =============================================================================
# 1. asset_templates 스키마
# =============================================================================
class AssetTemplateBase(SQLModel):
    """
    자산 템플릿(기종)의 기본 속성을 정의하는 Pydantic/SQLModel Base 스키마입니다.
    """
    name: str = Field(..., min_length=1, max_length=100, description="템플릿 명칭")
    manufacturer_id: Optional[str] = Field(None, max_length=100, description="제조사 식별자")
    product_weight: Optional[float] = Field(None, ge=0, description="무게 (kg)")
    product_width: Optional[float] = Field(None, ge=0, description="폭 (mm)")
    product_height: Optional[float] = Field(None, ge=0, description="높이 (mm)")
    product_length: Optional[float] = Field(None, ge=0, description="길이 (mm)")


class AssetTemplateCreate(AssetTemplateBase):
    pass


class AssetTemplateUpdate(SQLModel):
    """
    기존 템플릿 정보를 업데이트하기 위한 Pydantic 모델입니다.
    전달된 필드만 변경되고 나머지는 기존 값을 유지합니다.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=100, description="템플릿 명칭")
    manufacturer_id: Optional[str] = Field(None, max_length=100, description="제조사 식별자")
    product_weight: Optional[float] = Field(None, ge=0, description="무게 (kg)")
    product_width: Optional[float] = Field(None, ge=0, description="폭 (mm)")
    product_height: Optional[float] = Field(None, ge=0, description="높이 (mm)")
    product_length: Optional[float] = Field(None, ge=0, description="길이 (mm)")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return reject_null(value)


class AssetTemplateFields(AssetTemplateBase):
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AssetTemplateResponse(SQLModel):
    """템플릿 응답: 구성품 ID 목록(`components`)을 포함합니다."""
    id: str
    type: str = "template"
    fields: AssetTemplateFields
    components: List[str] = Field(default_factory=list, description="구성품 ID 목록")


# =============================================================================
# 2. components 스키마
# =============================================================================
class ComponentBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100, description="구성품 명칭")
    manufacturer_id: Optional[str] = Field(None, max_length=100, description="제조사 식별자")
    product_weight: Optional[float] = Field(None, ge=0, description="무게 (kg)")


class ComponentCreate(ComponentBase):
    """
    새로운 구성품을 생성하기 위한 Pydantic 모델입니다.
    `template_id`는 기존 템플릿이어야 합니다.
    """
    template_id: str = Field(..., description="소속 템플릿 ID")


class ComponentUpdate(SQLModel):
    """구성품의 소속 템플릿은 변경할 수 없습니다."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=100, description="구성품 명칭")
    manufacturer_id: Optional[str] = Field(None, max_length=100, description="제조사 식별자")
    product_weight: Optional[float] = Field(None, ge=0, description="무게 (kg)")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return reject_null(value)


class ComponentFields(ComponentBase):
    name: str
    template_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ComponentResponse(SQLModel):
    id: str
    type: str = "component"
    fields: ComponentFields


# =============================================================================
# 3. asset_parts 스키마
# =============================================================================
class AssetPartCreate(SQLModel):
    """
    자산에 부품을 장착(생성)하기 위한 Pydantic 모델입니다.
    `component_id`는 자산 템플릿에 속한 구성품이어야 합니다.
    `name`을 생략하면 구성품 명칭을 사용합니다.
    """
    component_id: str = Field(..., description="구성품 ID")
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="부품 명칭")
    serial_number: Optional[str] = Field(None, max_length=100, description="일련번호")
    condition: Optional[str] = Field(None, max_length=50, description="상태")
    notes: Optional[str] = Field(None, description="비고")
    inspection_frequency: Optional[int] = Field(None, ge=0, description="점검 주기 (일)")


class AssetPartUpdate(SQLModel):
    """
    자산 부품의 상태/비고/일련번호/점검 주기를 부분 업데이트합니다.
    `inspection_frequency`에 null을 보내면 점검 기한 계산에서 제외됩니다.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=100, description="부품 명칭")
    serial_number: Optional[str] = Field(None, max_length=100, description="일련번호")
    condition: Optional[str] = Field(None, max_length=50, description="상태")
    notes: Optional[str] = Field(None, description="비고")
    inspection_frequency: Optional[int] = Field(None, ge=0, description="점검 주기 (일)")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return reject_null(value)


class AssetPartFields(SQLModel):
    asset_id: str
    component_id: str
    name: str
    serial_number: Optional[str] = None
    condition: Optional[str] = None
    notes: Optional[str] = None
    inspection_frequency: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AssetPartResponse(SQLModel):
    """자산 부품 응답: 부품에 연결된 첨부 URI 목록을 포함합니다."""
    id: str
    type: str = "asset_part"
    fields: AssetPartFields
    attachments: List[str] = Field(default_factory=list, description="첨부 URI 목록")


# =============================================================================
# 4. assets 스키마
# =============================================================================
class AssetBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100, description="자산 명칭")
    purchase_date: Optional[date] = Field(None, description="구매일")
    install_date: Optional[date] = Field(None, description="설치일")
    warranty: Optional[str] = Field(None, max_length=255, description="보증 내용")


class AssetCreate(AssetBase):
    """
    새로운 자산을 생성하기 위한 Pydantic 모델입니다.
    - `template_id`: 기존 템플릿 ID (필수)
    - `fleet_id`: 소속 편대 ID (선택)
    - `instantiate_parts`: true이면 템플릿의 구성품마다 부품을 함께 생성합니다.
    """
    template_id: str = Field(..., description="자산 템플릿 ID")
    fleet_id: Optional[str] = Field(None, description="소속 편대 ID")
    instantiate_parts: bool = Field(False, description="템플릿 구성품으로 부품 자동 생성 여부")
    inspection_frequency: Optional[int] = Field(
        None, ge=0, description="자동 생성 부품에 적용할 점검 주기 (일)"
    )


class AssetUpdate(SQLModel):
    """자산의 템플릿은 변경할 수 없고, 편대 배정은 배정/해제 엔드포인트로만 변경합니다."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=100, description="자산 명칭")
    purchase_date: Optional[date] = Field(None, description="구매일")
    install_date: Optional[date] = Field(None, description="설치일")
    warranty: Optional[str] = Field(None, max_length=255, description="보증 내용")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return reject_null(value)


class AssetFields(AssetBase):
    name: str
    template_id: str
    fleet_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AssetSummaryResponse(SQLModel):
    id: str
    type: str = "asset"
    fields: AssetFields


class AssetResponse(SQLModel):
    """
    자산 상세 응답: 장착 부품 목록(각 부품의 첨부 포함)과 자산 자체의 첨부 URI 목록을 포함합니다.
    """
    id: str
    type: str = "asset"
    fields: AssetFields
    parts: List[AssetPartResponse] = Field(default_factory=list, description="장착 부품 목록")
    attachments: List[str] = Field(default_factory=list, description="첨부 URI 목록")
