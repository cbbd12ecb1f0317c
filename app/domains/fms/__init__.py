# app/domains/fms/__init__.py

"""
FastAPI 애플리케이션의 'fms' 도메인 패키지입니다.

'fms' 도메인은 장비 카탈로그(자산 템플릿, 구성품)와
실제 기체(자산) 및 장착 부품(자산 부품)을 관리합니다.

주요 서브모듈:
- `models.py`: asset_templates, components, assets, asset_parts 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 카탈로그/자산 요청 및 응답 모델.
- `crud.py`: 참조 무결성 검사를 포함한 CRUD 로직.
- `routers.py`: 카탈로그/자산 엔드포인트.
"""

__title__ = "DFMS Fleet Asset Domain"
__description__ = "Manages the equipment catalog, assets and installed parts."
__version__ = "0.1.0"
__all__ = []
