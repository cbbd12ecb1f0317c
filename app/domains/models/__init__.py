# app/domains/models/__init__.py

"""
이 파일은 모든 도메인의 SQLModel 모델들을 한 곳에서 중앙 관리하여,
다른 모듈에서 쉽게 임포트할 수 있도록 하는 역할을 합니다.
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# usr (User, Session)
from app.domains.usr.models import User, UserRole, Session

# loc (Port, Fleet, FleetAssetTemplate)
from app.domains.loc.models import Port, Fleet, FleetAssetTemplate

# fms (AssetTemplate, Component, Asset, AssetPart)
from app.domains.fms.models import AssetTemplate, Component, Asset, AssetPart

# mnt (Inspection)
from app.domains.mnt.models import Inspection, InspectionTargetType

# shared (Attachment)
from app.domains.shared.models import Attachment, AttachableType

__all__ = [
    "User", "UserRole", "Session",
    "Port", "Fleet", "FleetAssetTemplate",
    "AssetTemplate", "Component", "Asset", "AssetPart",
    "Inspection", "InspectionTargetType",
    "Attachment", "AttachableType",
]
