# tests/__init__.py

"""
DFMS API 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트마다 새 메모리 SQLite DB, 결정적 ID 생성기/시계, 역할별 인증 클라이언트 픽스처.
- `test_main.py`: 루트/헬스 체크, 공통 오류 응답, 권한 결정 테이블.
- `test_scripts.py`: 관리 스크립트.
- `domains/`: 도메인(usr, loc, fms, mnt, shared)별 API 통합 테스트.
"""

__title__ = "DFMS API Tests"
__description__ = "Test suite for the DFMS FastAPI application."
__version__ = "0.1.0"
__all__ = []
