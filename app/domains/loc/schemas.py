# app/domains/loc/schemas.py

"""
'loc' 도메인 (위치/편대 계층)의 Pydantic 스키마를 정의하는 모듈입니다.

이 모듈은 기지(Port)와 편대(Fleet) 데이터에 대한
API 요청(생성, 업데이트) 및 응답(조회)에 사용되는 데이터 유효성 검사 및 직렬화를 위한
Pydantic 모델을 포함합니다.
조회 응답은 `{id, type, fields}` 형태이며, 계층 조회에는 하위 ID 목록이 추가됩니다.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import ConfigDict, Field, field_validator
from sqlmodel import SQLModel

from app.core.envelope import reject_null


def _require_text(value: Optional[str]) -> Optional[str]:
    """공백만으로 이루어진 이름을 거부합니다."""
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


# =============================================================================
# 1. ports 스키마
# =============================================================================
class PortBase(SQLModel):
    """
    기지의 기본 속성을 정의하는 Pydantic/SQLModel Base 스키마입니다.
    """
    name: str = Field(..., max_length=100, description="기지 명칭")
    latitude: float = Field(..., ge=-90, le=90, description="위도")
    longitude: float = Field(..., ge=-180, le=180, description="경도")
    elevation: float = Field(0.0, description="고도 (m)")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value)


class PortCreate(PortBase):
    """
    새로운 기지를 생성하기 위한 Pydantic 모델입니다.
    `name`, `latitude`, `longitude`는 필수 필드입니다.
    """
    pass


class PortUpdate(SQLModel):
    """
    기존 기지 정보를 업데이트하기 위한 Pydantic 모델입니다.
    모든 필드는 선택 사항입니다 (부분 업데이트 가능). 단, 전달한 필드에 null은 허용하지 않습니다.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, max_length=100, description="기지 명칭")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="위도")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="경도")
    elevation: Optional[float] = Field(None, description="고도 (m)")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(reject_null(value))

    @field_validator("latitude", "longitude", "elevation")
    @classmethod
    def check_not_null(cls, value: Optional[float]) -> Optional[float]:
        return reject_null(value)


class PortFields(SQLModel):
    name: str
    latitude: float
    longitude: float
    elevation: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PortResponse(SQLModel):
    """기지 응답: 소속 편대 ID 목록(`fleet`)을 포함합니다."""
    id: str
    type: str = "port"
    fields: PortFields
    fleet: List[str] = Field(default_factory=list, description="소속 편대 ID 목록")


# =============================================================================
# 2. fleets 스키마
# =============================================================================
class FleetBase(SQLModel):
    """
    편대의 기본 속성을 정의하는 Pydantic/SQLModel Base 스키마입니다.
    """
    name: str = Field(..., max_length=100, description="편대 명칭 (필수, 공백 불가)")
    description: Optional[str] = Field(None, description="설명")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(value)


class FleetCreate(FleetBase):
    """
    새로운 편대를 생성하기 위한 Pydantic 모델입니다.
    `port_id`를 지정하면 생성과 동시에 해당 기지에 배정됩니다.
    """
    port_id: Optional[str] = Field(None, description="소속 기지 ID")


class FleetUpdate(SQLModel):
    """
    기존 편대 정보를 업데이트하기 위한 Pydantic 모델입니다.
    기지 배정은 배정/해제 엔드포인트로만 변경합니다.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, max_length=100, description="편대 명칭")
    description: Optional[str] = Field(None, description="설명")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        return _require_text(reject_null(value))


class FleetFields(SQLModel):
    name: str
    description: Optional[str] = None
    port_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FleetResponse(SQLModel):
    """편대 응답: 연관 템플릿 ID 목록과 소속 자산 ID 목록을 포함합니다."""
    id: str
    type: str = "fleet"
    fields: FleetFields
    templates: List[str] = Field(default_factory=list, description="연관 자산 템플릿 ID 목록")
    assets: List[str] = Field(default_factory=list, description="소속 자산 ID 목록")
