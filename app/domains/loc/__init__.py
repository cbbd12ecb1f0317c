# app/domains/loc/__init__.py

"""
FastAPI 애플리케이션의 'loc' 도메인 패키지입니다.

'loc' 도메인은 기지(Port) -> 편대(Fleet) -> 자산 소속 구조와
편대-자산 템플릿 다대다 연관을 관리합니다.

주요 서브모듈:
- `models.py`: ports, fleets, fleet_asset_templates 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 기지/편대 요청 및 응답 모델.
- `crud.py`: 기지/편대 CRUD와 배정/해제(조건부 해제) 로직.
- `routers.py`: 기지/편대 및 배정 엔드포인트.
"""

__title__ = "DFMS Location Domain"
__description__ = "Manages ports, fleets and their assignments."
__version__ = "0.1.0"
__all__ = []
