# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

주요 서브모듈은 다음과 같습니다:

- `config.py`: 애플리케이션 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 비동기 엔진과 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `ids.py`: 시간 정렬 가능한 엔티티 ID 생성기.
- `envelope.py`: `{id, type, fields}` 응답 변환과 검증 오류 요약, 부분 업데이트 null 검사.
- `crud_base.py`: 공통 CRUD 기본 클래스와 커밋/롤백 처리.
- `security.py`: 매직링크 토큰과 역할별 권한 결정 테이블.
- `clock.py`: 현재 시각과 UTC 정규화 헬퍼.
- `dependencies.py`: FastAPI 의존성 (DB 세션, 현재 사용자, 권한 검사, 현재 시각).
- `tasks.py`: 공통 ARQ 백그라운드 작업.

명시적인 임포트 경로(예: `from app.core.config import settings`)를 사용합니다.
"""

__title__ = "DFMS Core"
__description__ = "Core components for the DFMS FastAPI application."
__version__ = "0.1.0"
__all__ = []
