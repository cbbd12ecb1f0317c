# app/domains/loc/models.py

"""
'loc' 도메인 (위치/편대 계층)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
 - loc 도메인은 기지(Port) -> 편대(Fleet) -> 자산(Asset) 소속 구조
 - 편대(Fleet)와 자산 템플릿(AssetTemplate)은 다대다 연결 테이블로 연관

이 모듈은 ports, fleets, fleet_asset_templates 테이블에 대한 SQLModel 클래스를 포함합니다.
편대의 기지 참조와 자산의 편대 참조는 선택적(nullable)이며,
배정 해제는 하위 레코드를 삭제하지 않고 참조만 비웁니다.
"""

from typing import Optional, List, TYPE_CHECKING
from datetime import datetime, UTC
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey, String
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

if TYPE_CHECKING:
    from app.domains.fms.models import Asset, AssetTemplate


# =============================================================================
# 1. fleet_asset_templates (다대다 연결 테이블)
#    - link_model로만 사용되도록 두 FK 컬럼과 생성 일시만 둡니다.
# =============================================================================
class FleetAssetTemplate(SQLModel, table=True):
    """
    Fleet와 AssetTemplate의 다대다 관계를 위한 연결 테이블 모델.
    """
    __tablename__ = "fleet_asset_templates"

    fleet_id: str = Field(
        default=None,
        foreign_key="fleets.id",
        primary_key=True,
        max_length=32,
    )
    template_id: str = Field(
        default=None,
        foreign_key="asset_templates.id",
        primary_key=True,
        max_length=32,
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )


# =============================================================================
# 2. ports 테이블 모델
# =============================================================================
class PortBase(SQLModel):
    """
    ports 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=100, description="기지 명칭")
    latitude: float = Field(description="위도")
    longitude: float = Field(description="경도")
    elevation: float = Field(default=0.0, description="고도 (m)")


class Port(PortBase, table=True):
    """
    ports 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "ports"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="기지 고유 ID")
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

    # Port는 여러 Fleet를 가질 수 있습니다. (일대다 관계)
    fleets: List["Fleet"] = Relationship(
        back_populates="port",
        sa_relationship_kwargs={"passive_deletes": True}
    )


# =============================================================================
# 3. fleets 테이블 모델
# =============================================================================
class FleetBase(SQLModel):
    """
    fleets 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    name: str = Field(max_length=100, description="편대 명칭")
    description: Optional[str] = Field(default=None, description="설명")


class Fleet(FleetBase, table=True):
    """
    fleets 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "fleets"

    id: Optional[str] = Field(default=None, primary_key=True, max_length=32, description="편대 고유 ID")
    port_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(32), ForeignKey("ports.id", ondelete="SET NULL"), nullable=True, index=True),
        description="소속 기지 ID (FK, 미배정 시 NULL)"
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
    port: Optional["Port"] = Relationship(back_populates="fleets")
    assets: List["Asset"] = Relationship(
        back_populates="fleet",
        sa_relationship_kwargs={"passive_deletes": True}
    )
    templates: List["AssetTemplate"] = Relationship(
        back_populates="fleets",
        link_model=FleetAssetTemplate,
        sa_relationship_kwargs={"passive_deletes": True}
    )
