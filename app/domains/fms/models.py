# app/domains/fms/models.py

"""
'fms' 도메인 (장비 카탈로그 및 자산 인스턴스)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
 - 카탈로그: 자산 템플릿(AssetTemplate) -> 구성품(Component) (기종별 부품 구성표)
 - 인스턴스: 자산(Asset, 실제 기체 1대) -> 자산 부품(AssetPart, 장착된 구성품 1개)

자산 부품의 구성품 참조(component_id)는 외래 키가 아닌 인덱스 컬럼입니다.
구성품을 삭제해도 이미 장착된 부품은 남아 있으며, 조회 시 끊어진 참조를 허용합니다.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, date, UTC
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey, String
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from app.domains.loc.models import FleetAssetTemplate

if TYPE_CHECKING:
    from app.domains.loc.models import Fleet


# =============================================================================
# 1. asset_templates 테이블 모델
# =============================================================================
class AssetTemplateBase(SQLModel):
    """
    asset_templates 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=100, description="템플릿(기종) 명칭")
    manufacturer_id: Optional[str] = Field(default=None, max_length=100, description="제조사 식별자")
    product_weight: Optional[float] = Field(default=None, description="무게 (kg)")
    product_width: Optional[float] = Field(default=None, description="폭 (mm)")
    product_height: Optional[float] = Field(default=None, description="높이 (mm)")
    product_length: Optional[float] = Field(default=None, description="길이 (mm)")


class AssetTemplate(AssetTemplateBase, table=True):
    """
    asset_templates 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "asset_templates"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="템플릿 고유 ID")
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

    # 관계 정의:
    components: List["Component"] = Relationship(
        back_populates="template",
        sa_relationship_kwargs={"passive_deletes": True}
    )
    assets: List["Asset"] = Relationship(
        back_populates="template",
        sa_relationship_kwargs={"passive_deletes": True}
    )
    fleets: List["Fleet"] = Relationship(
        back_populates="templates",
        link_model=FleetAssetTemplate,
        sa_relationship_kwargs={"passive_deletes": True}
    )


# =============================================================================
# 2. components 테이블 모델
# =============================================================================
class ComponentBase(SQLModel):
    """
    components 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=100, description="구성품 명칭")
    manufacturer_id: Optional[str] = Field(default=None, max_length=100, description="제조사 식별자")
    product_weight: Optional[float] = Field(default=None, description="무게 (kg)")


class Component(ComponentBase, table=True):
    """
    components 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    구성품은 생성 시 지정한 템플릿에만 속하며, 소속 템플릿은 변경할 수 없습니다.
    """
    __tablename__ = "components"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="구성품 고유 ID")
    template_id: str = Field(
        sa_column=Column(String(32), ForeignKey("asset_templates.id", ondelete="CASCADE"), nullable=False, index=True),
        description="소속 템플릿 ID (FK)"
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

    template: Optional["AssetTemplate"] = Relationship(back_populates="components")


# =============================================================================
# 3. assets 테이블 모델
# =============================================================================
class AssetBase(SQLModel):
    """
    assets 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=100, description="자산(기체) 명칭")
    purchase_date: Optional[date] = Field(default=None, description="구매일")
    install_date: Optional[date] = Field(default=None, description="설치(운용 개시)일")
    warranty: Optional[str] = Field(default=None, max_length=255, description="보증 내용")


class Asset(AssetBase, table=True):
    """
    assets 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "assets"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="자산 고유 ID")
    template_id: str = Field(
        sa_column=Column(String(32), ForeignKey("asset_templates.id", ondelete="RESTRICT"), nullable=False, index=True),
        description="자산 템플릿 ID (FK)"
    )
    fleet_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(32), ForeignKey("fleets.id", ondelete="SET NULL"), nullable=True, index=True),
        description="소속 편대 ID (FK, 미배정 시 NULL)"
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

    # 관계 정의:
    template: Optional["AssetTemplate"] = Relationship(back_populates="assets")
    fleet: Optional["Fleet"] = Relationship(back_populates="assets")
    parts: List["AssetPart"] = Relationship(
        back_populates="asset",
        sa_relationship_kwargs={"passive_deletes": True}
    )


# =============================================================================
# 4. asset_parts 테이블 모델
# =============================================================================
class AssetPartBase(SQLModel):
    """
    asset_parts 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=100, description="부품 명칭")
    serial_number: Optional[str] = Field(default=None, max_length=100, description="일련번호")
    condition: Optional[str] = Field(default=None, max_length=50, description="상태 (예: new, good, worn)")
    notes: Optional[str] = Field(default=None, description="비고")
    inspection_frequency: Optional[int] = Field(default=None, ge=0, description="점검 주기 (일, 미설정 시 점검 기한 계산 제외)")


class AssetPart(AssetPartBase, table=True):
    """
    asset_parts 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "asset_parts"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="자산 부품 고유 ID")
    asset_id: str = Field(
        sa_column=Column(String(32), ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True),
        description="소속 자산 ID (FK)"
    )
    component_id: str = Field(max_length=32, index=True, description="구성품 ID (구성품 삭제 후에도 유지)")
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

    asset: Optional["Asset"] = Relationship(back_populates="parts")
