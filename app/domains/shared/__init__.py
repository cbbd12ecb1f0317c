# app/domains/shared/__init__.py

"""
FastAPI 애플리케이션의 'shared' 도메인 패키지입니다.

'shared' 도메인은 여러 도메인이 공유하는 첨부 메타데이터(URI, 이름, MIME 유형)를 관리합니다.
첨부는 자산, 자산 부품, 점검 기록 중 하나에 연결됩니다.

주요 서브모듈:
- `models.py`: attachments 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 첨부 요청 및 응답 모델.
- `crud.py`: 첨부 CRUD 및 엔티티별 조회 로직.
- `routers.py`: 첨부 엔드포인트.
"""

__title__ = "DFMS Shared Domain"
__description__ = "Manages attachment metadata shared across domains."
__version__ = "0.1.0"
__all__ = []
