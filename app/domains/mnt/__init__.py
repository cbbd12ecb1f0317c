# app/domains/mnt/__init__.py

"""
FastAPI 애플리케이션의 'mnt' 도메인 패키지입니다.

'mnt' 도메인은 자산/자산 부품의 점검 기록을 관리하고,
점검 이력과 부품별 점검 주기로부터 편대의 정비 기한 초과 현황을 계산합니다.

주요 서브모듈:
- `models.py`: inspections 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 점검 기록 및 컴플라이언스 응답 모델.
- `crud.py`: 점검 기록 생성(단건/일괄), 조회, 정정 로직.
- `services.py`: 정비 기한 초과 계산.
- `routers.py`: 점검 및 컴플라이언스 엔드포인트.
"""

__title__ = "DFMS Maintenance Domain"
__description__ = "Manages inspection records and computes maintenance compliance."
__version__ = "0.1.0"
__all__ = []
