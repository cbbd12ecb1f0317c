# tests/domains/__init__.py

"""
도메인별 API 통합 테스트 패키지입니다.

- `test_usr_n.py`: 매직링크 세션과 사용자 관리.
- `test_loc_n.py`: 기지/편대 계층과 배정/연관.
- `test_fms_n.py`: 자산 템플릿, 구성품, 자산, 자산 부품.
- `test_mnt_n.py`: 점검 기록과 편대 컴플라이언스.
- `test_shared_n.py`: 첨부 메타데이터.
"""

__title__ = "DFMS Domain Tests"
__description__ = "Per-domain API tests for the DFMS FastAPI application."
__version__ = "0.1.0"
__all__ = []
